"""Shell command execution with Jenkins-style variable support."""

from __future__ import annotations

import os
import re
import signal
import subprocess
import sys
import threading
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Callable, Mapping

_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class PipelineError(Exception):
    """Base error for pipeline execution failures."""


class ShellIOError(PipelineError):
    """The shell process could not be started or waited on."""


class CommandFailedError(PipelineError):
    """A shell command exited with a non-zero status."""

    def __init__(self, code: int, stderr: str) -> None:
        super().__init__(f"Command failed with exit code {code}: {stderr}")
        self.code = code
        self.stderr = stderr


class CommandTimeoutError(PipelineError):
    """A shell command did not finish within its time limit."""

    def __init__(self, duration: float) -> None:
        super().__init__(f"Command timed out after {duration}s")
        self.duration = duration


@dataclass
class ShellConfig:
    """Settings for running shell commands."""

    cwd: Path = field(default_factory=Path.cwd)
    env: dict[str, str] = field(default_factory=dict)
    shell: str = "sh"
    streaming: bool = False
    timeout: float | None = None


@dataclass
class ShellResult:
    """Outcome of a shell command."""

    stdout: str
    stderr: str
    exit_code: int
    duration: float = 0.0

    def is_success(self) -> bool:
        return self.exit_code == 0

    def is_failure(self) -> bool:
        return self.exit_code != 0


def _exit_code(returncode: int) -> int:
    # A negative return code means the process died from a signal.
    return returncode if returncode >= 0 else -1


def _kill(proc: subprocess.Popen) -> None:
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except OSError:
            pass
    proc.kill()


def _run_captured(
    command: str,
    config: ShellConfig,
    env: Mapping[str, str],
    timeout: float | None = None,
) -> ShellResult:
    try:
        proc = subprocess.Popen(
            [config.shell, "-c", command],
            cwd=config.cwd,
            env=dict(env),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=os.name == "posix",
        )
    except OSError as exc:
        raise ShellIOError(str(exc)) from exc

    try:
        out, err = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill(proc)
        proc.communicate()
        raise CommandTimeoutError(timeout) from None

    stdout = out.decode("utf-8", errors="replace")
    stderr = err.decode("utf-8", errors="replace")
    if stdout:
        sys.stdout.write(stdout)
    if stderr:
        sys.stderr.write(stderr)

    code = _exit_code(proc.returncode)
    if code != 0:
        raise CommandFailedError(code, stderr)
    return ShellResult(stdout=stdout, stderr=stderr, exit_code=code)


def _pump(stream: IO[str], sink: list[str], echo: Callable[[str], None]) -> None:
    for line in stream:
        line = line.rstrip("\n")
        echo(line)
        sink.append(line + "\n")


class ShellCommand:
    """Runs commands in a shell according to a ShellConfig."""

    def __init__(self, config: ShellConfig) -> None:
        self.config = config
        self.env_override: dict[str, str] = {}

    def env(self, key: str, value: str) -> ShellCommand:
        """Add an environment variable for this command only."""
        self.env_override[key] = value
        return self

    def _environment(self) -> dict[str, str]:
        return {**os.environ, **self.config.env, **self.env_override}

    def execute(self, command: str) -> ShellResult:
        """Expand variables in the command, run it, and return its result."""
        expanded = expand_variables(command, self.config.env)
        env = self._environment()
        start = time.monotonic()
        if self.config.streaming:
            result = self._execute_streaming(expanded, env)
        else:
            result = _run_captured(expanded, self.config, env)
        result.duration = time.monotonic() - start
        return result

    def _execute_streaming(self, command: str, env: Mapping[str, str]) -> ShellResult:
        try:
            proc = subprocess.Popen(
                [self.config.shell, "-c", command],
                cwd=self.config.cwd,
                env=dict(env),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise ShellIOError(str(exc)) from exc

        out_lines: list[str] = []
        err_lines: list[str] = []
        workers = [
            threading.Thread(
                target=_pump, args=(proc.stdout, out_lines, print), daemon=True
            ),
            threading.Thread(
                target=_pump,
                args=(
                    proc.stderr,
                    err_lines,
                    lambda line: print(f"WARN: {line}", file=sys.stderr),
                ),
                daemon=True,
            ),
        ]
        for worker in workers:
            worker.start()
        returncode = proc.wait()
        for worker in workers:
            worker.join()

        stdout = "".join(out_lines)
        stderr = "".join(err_lines)
        code = _exit_code(returncode)
        if code != 0:
            raise CommandFailedError(code, stderr)
        return ShellResult(stdout=stdout, stderr=stderr, exit_code=code)

    def execute_with_timeout(self, command: str, timeout: float) -> ShellResult:
        """Run a command, raising CommandTimeoutError if it exceeds ``timeout`` seconds."""
        expanded = expand_variables(command, self.config.env)
        return _run_captured(expanded, self.config, self._environment(), timeout)


def expand_variables(text: str, env: Mapping[str, str]) -> str:
    """Replace ``${NAME}`` with its value from env; unknown names stay as they are."""

    def replace(match: re.Match[str]) -> str:
        return env.get(match.group(1), match.group(0))

    return _VAR_PATTERN.sub(replace, text)


def expand_variables_with_info(
    text: str, env: Mapping[str, str]
) -> tuple[str, list[str]]:
    """Expand variables and list known names still referenced in the result."""
    expanded = expand_variables(text, env)
    found: list[str] = []
    for match in _VAR_PATTERN.finditer(expanded):
        name = match.group(1)
        if name in env and name not in found:
            found.append(name)
    return expanded, found


def jenkins_shell_config(
    workspace: str | os.PathLike[str],
    job_name: str,
    build_number: int,
    stage_name: str | None = None,
    extra_env: Mapping[str, str] | None = None,
) -> ShellConfig:
    """Build a ShellConfig carrying the Jenkins special variables."""
    env = {
        "WORKSPACE": os.fspath(workspace),
        "WORKSPACE_TMP": "@tmp",
        "BUILD_NUMBER": str(build_number),
        "BUILD_ID": str(uuid.uuid4()),
        "JOB_NAME": job_name,
        "STAGE_NAME": stage_name or "",
        "NODE_NAME": "local",
        "JENKINS_URL": "http://localhost:8080",
    }
    if extra_env:
        env.update(extra_env)
    return ShellConfig(cwd=Path(env.get("WORKSPACE", "")), env=env)