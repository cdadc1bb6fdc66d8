"""Generate documentation from the comments and macros of a pipeline script."""

from __future__ import annotations

import enum
import json
import os
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path

_TITLE = re.compile(r'rustline:title\s*=\s*"([^"]+)"')
_DESCRIPTION = re.compile(r'rustline:description\s*=\s*"([^"]+)"')
_AUTHOR = re.compile(r'rustline:author\s*=\s*"([^"]+)"')
_TAGS = re.compile(r'rustline:tags\s*=\s*"?([^"\n]+)"?')
_STAGE = re.compile(r'stage!\(\s*"([^"]+)"[\s\n]*,[\s\n]*steps!\(')
_SH_STEP = re.compile(r'sh!\(\s*"([^"]+)"')
_PARAM = re.compile(r'//!\s*rustline:param\s+(\w+)\s*=\s*"([^"]+)"')
_ENVIRONMENT = re.compile(r'environment!\(\s*"([^"]+)"')


@dataclass
class StepDoc:
    step_type: str
    description: str | None = None


@dataclass
class StageDoc:
    name: str
    description: str | None = None
    steps: list[StepDoc] = field(default_factory=list)


@dataclass
class ParameterDoc:
    name: str
    description: str


@dataclass
class PipelineDoc:
    title: str | None = None
    description: str | None = None
    author: str | None = None
    tags: list[str] = field(default_factory=list)
    stages: list[StageDoc] = field(default_factory=list)
    parameters: list[ParameterDoc] = field(default_factory=list)
    environment: list[str] = field(default_factory=list)


class DocFormat(enum.Enum):
    MARKDOWN = "markdown"
    JSON = "json"
    HTML = "html"


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _first_group(pattern: re.Pattern[str], content: str) -> str | None:
    match = pattern.search(content)
    return match.group(1) if match else None


def _extract_stages(content: str) -> list[StageDoc]:
    stages = []
    for match in _STAGE.finditer(content):
        body_lines = []
        for line in _lines(content[match.end():]):
            if line.lstrip().startswith("))"):
                break
            body_lines.append(line)
        steps_content = " ".join(body_lines)
        steps = [
            StepDoc(step_type="sh", description=step.group(1))
            for step in _SH_STEP.finditer(steps_content)
        ]
        stages.append(StageDoc(name=match.group(1), steps=steps))
    return stages


def parse_pipeline_doc(content: str) -> PipelineDoc:
    """Collect metadata, stages, parameters and environment names from a script."""
    tags_text = _first_group(_TAGS, content)
    return PipelineDoc(
        title=_first_group(_TITLE, content),
        description=_first_group(_DESCRIPTION, content),
        author=_first_group(_AUTHOR, content),
        tags=[tag.strip() for tag in tags_text.split(",")] if tags_text is not None else [],
        stages=_extract_stages(content),
        parameters=[
            ParameterDoc(name=m.group(1), description=m.group(2))
            for m in _PARAM.finditer(content)
        ],
        environment=[m.group(1) for m in _ENVIRONMENT.finditer(content)],
    )


def render_markdown(doc: PipelineDoc) -> str:
    parts = [f"# {doc.title or 'Pipeline Documentation'}\n\n"]

    if doc.description is not None:
        parts.append(f"{doc.description}\n\n")

    if doc.author is not None or doc.tags:
        parts.append("## Metadata\n\n")
        if doc.author is not None:
            parts.append(f"- **Author**: {doc.author}\n")
        if doc.tags:
            parts.append(f"- **Tags**: {', '.join(doc.tags)}\n")
        parts.append("\n")

    if doc.stages:
        parts.append("## Stages\n\n")
        for stage in doc.stages:
            parts.append(f"### {stage.name}\n\n")
            if stage.steps:
                parts.append("#### Steps\n\n")
                for step in stage.steps:
                    parts.append(f"- `{step.step_type}`")
                    if step.description is not None:
                        parts.append(f": {step.description}")
                    parts.append("\n")
                parts.append("\n")

    if doc.environment:
        parts.append("## Environment Variables\n\n")
        parts.extend(f"- `{env}`\n" for env in doc.environment)
        parts.append("\n")

    return "".join(parts)


def render_json(doc: PipelineDoc) -> str:
    return json.dumps(asdict(doc), indent=2, ensure_ascii=False)


def render_html(doc: PipelineDoc) -> str:
    html = []
    for line in _lines(render_markdown(doc)):
        if line.startswith("# "):
            html.append(f"<h1>{line[2:]}</h1>\n")
        elif line.startswith("## "):
            html.append(f"<h2>{line[3:]}</h2>\n")
        elif line.startswith("### "):
            html.append(f"<h3>{line[4:]}</h3>\n")
        elif not line.strip():
            html.append("<br/>\n")
        else:
            html.append(f"<p>{line}</p>\n")
    return "".join(html)


_RENDERERS = {
    DocFormat.MARKDOWN: render_markdown,
    DocFormat.JSON: render_json,
    DocFormat.HTML: render_html,
}


def generate_doc(
    file: str | os.PathLike[str], format: DocFormat = DocFormat.MARKDOWN
) -> str:
    """Read a pipeline script and render its documentation."""
    content = Path(file).read_text(encoding="utf-8")
    return _RENDERERS[format](parse_pipeline_doc(content))


def save_doc(doc: str, output_path: str | os.PathLike[str]) -> None:
    with open(output_path, "w", encoding="utf-8", newline="") as handle:
        handle.write(doc)