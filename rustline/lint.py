"""Static checks of pipeline scripts for common best-practice problems."""

from __future__ import annotations

import enum
import json
import os
import re
from dataclasses import dataclass
from pathlib import Path

_UNRELIABLE_COMMANDS = (
    "git clone",
    "git fetch",
    "docker pull",
    "curl ",
    "wget ",
    "scp ",
    "ssh ",
)

_AGENT_MACROS = (
    "agent_any!",
    "agent_none!",
    "agent_docker!",
    "agent_kubernetes!",
    "agent_label!",
)

_STAGE_NAME = re.compile(r'stage!\("([^"]+)"')
_STAGE_WITH_STEPS = re.compile(r'stage!\("([^"]+)"[\s\n]*,\s*steps!\(')
_EMPTY_STAGE = re.compile(r'stage!\("([^"]+)"\s*,\s*steps!\(\)')

_TIMEOUT_WINDOW = 500
_SECRET_LINE_MIN_BYTES = 20


class LintSeverity(enum.Enum):
    """How serious a lint finding is."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __str__(self) -> str:
        return self.value


_RANKS = {LintSeverity.INFO: 0, LintSeverity.WARNING: 1, LintSeverity.ERROR: 2}


class OutputFormat(enum.Enum):
    """How lint findings are printed."""

    TEXT = "text"
    JSON = "json"


@dataclass
class LintMessage:
    """One finding of the linter."""

    code: str
    message: str
    line: int
    severity: LintSeverity
    suggestion: str | None = None

    def to_dict(self) -> dict:
        data: dict = {
            "code": self.code,
            "message": self.message,
            "line": self.line,
            "severity": {"severity": self.severity.value},
        }
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class LintConfig:
    """Settings for a lint run."""

    min_severity: LintSeverity = LintSeverity.INFO
    show_suggestions: bool = False
    format: OutputFormat = OutputFormat.TEXT


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _check_missing_agent(content: str) -> list[LintMessage]:
    if "pipeline!" not in content:
        return []
    if any(macro in content for macro in _AGENT_MACROS):
        return []
    if not _STAGE_NAME.search(content):
        return []
    return [
        LintMessage(
            code="P001",
            message="No agent specification found in pipeline",
            line=1,
            severity=LintSeverity.WARNING,
            suggestion="Add agent_any!() or agent_docker!() to specify where stages run",
        )
    ]


def _check_timeouts(content: str) -> list[LintMessage]:
    messages = []
    for match in _STAGE_WITH_STEPS.finditer(content):
        start = match.start()
        block = content[start : start + _TIMEOUT_WINDOW]
        if "timeout!" not in block and "sh!" in block:
            messages.append(
                LintMessage(
                    code="P002",
                    message=f"Stage '{match.group(1)}' may need a timeout",
                    line=len(_lines(content[:start])),
                    severity=LintSeverity.INFO,
                    suggestion="Add timeout!(<minutes>, sh!(...)) to prevent hanging stages",
                )
            )
    return messages


def _check_retry(content: str) -> list[LintMessage]:
    messages = []
    for number, line in enumerate(_lines(content), start=1):
        if ('sh!("' not in line and "sh!('" not in line) or "retry!" in line:
            continue
        pattern = next((p for p in _UNRELIABLE_COMMANDS if p in line), None)
        if pattern is not None:
            messages.append(
                LintMessage(
                    code="P003",
                    message=f"Unreliable command '{pattern}' without retry",
                    line=number,
                    severity=LintSeverity.INFO,
                    suggestion="Consider wrapping with retry!(count, step)",
                )
            )
    return messages


def _check_empty_stages(content: str) -> list[LintMessage]:
    return [
        LintMessage(
            code="P004",
            message=f"Stage '{match.group(1)}' has no steps",
            line=1,
            severity=LintSeverity.ERROR,
            suggestion="Add at least one step to the stage",
        )
        for match in _EMPTY_STAGE.finditer(content)
    ]


def _check_hardcoded_secrets(content: str) -> list[LintMessage]:
    return [
        LintMessage(
            code="P005",
            message="Possible hardcoded password",
            line=number,
            severity=LintSeverity.ERROR,
            suggestion="Use environment variables or secrets management",
        )
        for number, line in enumerate(_lines(content), start=1)
        if "password" in line
        and '"' in line
        and len(line.encode("utf-8")) > _SECRET_LINE_MIN_BYTES
    ]


def _check_post_conditions(content: str) -> list[LintMessage]:
    if "pipeline!" in content and "post!" not in content:
        return [
            LintMessage(
                code="P007",
                message="No post-conditions defined",
                line=1,
                severity=LintSeverity.INFO,
                suggestion=(
                    "Add post!(always(...), success(...), failure(...)) "
                    "for cleanup and notifications"
                ),
            )
        ]
    return []


_CHECKS = (
    _check_missing_agent,
    _check_timeouts,
    _check_retry,
    _check_empty_stages,
    _check_hardcoded_secrets,
    _check_post_conditions,
)


def lint_content(content: str, config: LintConfig | None = None) -> list[LintMessage]:
    """Run every check on pipeline source text, keeping findings at or above the minimum severity."""
    config = config or LintConfig()
    threshold = config.min_severity.rank
    return [
        message
        for check in _CHECKS
        for message in check(content)
        if message.severity.rank >= threshold
    ]


def lint_pipeline(
    file: str | os.PathLike[str], config: LintConfig | None = None
) -> list[LintMessage]:
    """Read a pipeline script and lint it."""
    content = Path(file).read_text(encoding="utf-8")
    return lint_content(content, config)


def format_lint_messages(
    messages: list[LintMessage], format: OutputFormat = OutputFormat.TEXT
) -> str:
    """Render findings as text or pretty-printed JSON."""
    if format is OutputFormat.JSON:
        return json.dumps([m.to_dict() for m in messages], indent=2, ensure_ascii=False)
    if not messages:
        return "No lint issues found."
    return "".join(
        f"{m.code}: {m.message} (line {m.line}) [{m.severity}]\n  {m.suggestion or ''}\n"
        for m in messages
    )