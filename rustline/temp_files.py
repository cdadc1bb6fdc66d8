"""Jenkins-style workspace directories: ``@tmp``, ``@libs`` and ``@script@libs``."""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import IO

TMP_DIR_NAME = "@tmp"
LIBS_DIR_NAME = "@libs"
SCRIPT_LIBS_DIR_NAME = "@script@libs"


def _open_for_writing(path: Path) -> IO[str]:
    return path.open("w", encoding="utf-8", newline="")


def _write(path: Path, content: str) -> Path:
    with _open_for_writing(path) as handle:
        handle.write(content)
    return path


class TempFileManager:
    """Creates and cleans the special directories of a build workspace.

    Used as a context manager, it removes the build's temporary and
    script-lib files on exit.
    """

    def __init__(
        self, workspace: str | os.PathLike[str], job_name: str, build_id: str
    ) -> None:
        self.workspace = Path(workspace)
        self.job_name = job_name
        self.build_id = build_id
        self.tmp_dir = self.workspace / TMP_DIR_NAME
        self.libs_dir = self.workspace / LIBS_DIR_NAME
        self.script_libs_dir = self.workspace / SCRIPT_LIBS_DIR_NAME
        for directory in (self.tmp_dir, self.libs_dir, self.script_libs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def __enter__(self) -> TempFileManager:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.full_cleanup()
        except OSError:
            pass

    @property
    def _build_prefix(self) -> str:
        return f"{self.job_name}-{self.build_id}"

    def _unique_temp_path(self) -> Path:
        return self.tmp_dir / f"{self._build_prefix}-{uuid.uuid4()}"

    def create_temp_file(self, name: str) -> IO[str]:
        """Open a new, uniquely named file in ``@tmp`` for writing."""
        return _open_for_writing(self._unique_temp_path())

    def create_temp_file_with_content(self, name: str, content: str) -> Path:
        """Write a new, uniquely named file in ``@tmp`` and return its path."""
        return _write(self._unique_temp_path(), content)

    def create_libs_file(self, name: str) -> IO[str]:
        """Open a shared, persistent file in ``@libs`` for writing."""
        return _open_for_writing(self.libs_dir / name)

    def create_libs_file_with_content(self, name: str, content: str) -> Path:
        """Write a shared file in ``@libs`` and return its path."""
        return _write(self.libs_dir / name, content)

    def create_script_libs_file(self, name: str) -> IO[str]:
        """Open a pipeline-specific file in ``@script@libs`` for writing."""
        return _open_for_writing(self.script_libs_dir / name)

    def create_script_libs_file_with_content(self, name: str, content: str) -> Path:
        """Write a pipeline-specific file in ``@script@libs`` and return its path."""
        return _write(self.script_libs_dir / name, content)

    def read_temp_file(self, name: str) -> str:
        """Read the first ``@tmp`` file whose name contains ``<job>-<build>-<name>``."""
        pattern = f"{self._build_prefix}-{name}"
        for entry in self.tmp_dir.iterdir():
            if pattern in entry.name:
                return entry.read_text(encoding="utf-8")
        raise FileNotFoundError(f"Temp file not found: {name}")

    def read_libs_file(self, name: str) -> str:
        """Read a file from ``@libs``."""
        return (self.libs_dir / name).read_text(encoding="utf-8")

    def cleanup_temp_files(self) -> None:
        """Remove this build's files from ``@tmp``."""
        if not self.tmp_dir.exists():
            return
        for entry in self.tmp_dir.iterdir():
            if entry.name.startswith(self._build_prefix):
                entry.unlink()

    def cleanup_script_libs(self) -> None:
        """Remove every regular file from ``@script@libs``."""
        if not self.script_libs_dir.exists():
            return
        for entry in self.script_libs_dir.iterdir():
            if entry.is_file():
                entry.unlink()

    def full_cleanup(self) -> None:
        """Remove this build's temp files and all script-lib files."""
        self.cleanup_temp_files()
        self.cleanup_script_libs()


class JenkinsPathResolver:
    """Resolves ``@tmp/...``, ``@libs/...`` and ``@script@libs/...`` paths."""

    def __init__(self, workspace: str | os.PathLike[str]) -> None:
        self.workspace = Path(workspace)
        self.tmp = self.workspace / TMP_DIR_NAME
        self.libs = self.workspace / LIBS_DIR_NAME
        self.script_libs = self.workspace / SCRIPT_LIBS_DIR_NAME

    def resolve(self, path: str) -> Path:
        """Map a Jenkins-style path onto the workspace."""
        if path.startswith("@tmp/"):
            return self.tmp / path[len("@tmp/"):]
        if path.startswith("@libs/"):
            return self.libs / path[len("@libs/"):]
        if path.startswith("@script@libs/"):
            return self.script_libs / path[len("@script@libs/"):]
        if path.startswith("@libs"):
            return self.libs / path[len("@libs"):]
        if path.startswith("@"):
            rest = path[1:]
            if rest.startswith("tmp"):
                return self.tmp
            if rest.startswith("libs"):
                return self.libs
            if rest.startswith("script@libs"):
                return self.script_libs
            return Path(path)
        return self.workspace / path

    @staticmethod
    def is_jenkins_path(path: str) -> bool:
        """True for paths in one of the special directories."""
        return path.startswith(("@tmp", "@libs", "@script@libs"))