"""Validate pipeline scripts with ``rust-script --check``."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

RUST_SCRIPT = "rust-script"


class CheckError(Exception):
    """A pipeline script could not be validated."""


def check_pipeline(file: str | os.PathLike[str], cargo_output: bool = False) -> None:
    """Compile-check a pipeline script without running it.

    Raises CheckError if the file is missing, the checker cannot be run,
    or the script fails to compile.
    """
    path = Path(file)
    logger.debug("Validating pipeline: %s", path)

    if not path.exists():
        raise CheckError(f"Pipeline file not found: {path}")

    if path.suffix.lower() != ".rs":
        logger.warning("File does not have .rs extension: %s", path)

    cmd = [RUST_SCRIPT, "--check", str(path)]
    if cargo_output:
        cmd.append("--cargo-output")

    logger.debug("Running: %s", cmd)
    try:
        output = subprocess.run(cmd, capture_output=True)
    except OSError as exc:
        raise CheckError(f"Failed to execute {RUST_SCRIPT} --check: {exc}") from exc

    if output.returncode != 0:
        if output.stderr:
            print(output.stderr.decode("utf-8", errors="replace"), file=sys.stderr)
        if output.stdout:
            logger.debug("stdout: %s", output.stdout.decode("utf-8", errors="replace"))
        raise CheckError(f"Pipeline validation failed for: {path}")

    logger.info("Pipeline validation successful: %s", path)


def is_rust_script_available() -> bool:
    """Return whether ``rust-script --version`` succeeds.

    Raises CheckError if the program cannot be started at all.
    """
    try:
        output = subprocess.run([RUST_SCRIPT, "--version"], capture_output=True)
    except OSError as exc:
        raise CheckError(f"Failed to check {RUST_SCRIPT} availability: {exc}") from exc

    if output.returncode == 0:
        version = output.stdout.decode("utf-8", errors="replace").strip()
        logger.info("rust-script available: %s", version)
        return True
    logger.warning("rust-script not found or not accessible")
    return False