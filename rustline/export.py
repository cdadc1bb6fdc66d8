"""Convert pipeline scripts into GitHub Actions, GitLab CI and Jenkinsfile formats."""

from __future__ import annotations

import enum
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

_NAME = re.compile(r'rustline:name\s*=\s*"([^"]+)"')
_AGENT_DOCKER = re.compile(r'agent_docker!\("([^"]+)"\)')
_AGENT_KUBERNETES = re.compile(r'agent_kubernetes!\("([^"]+)"\)')
_AGENT_LABEL = re.compile(r'agent_label!\("([^"]+)"\)')
_ENVIRONMENT = re.compile(r'environment!\(\s*"([^"]+)"\s*=>\s*"([^"]+)"\)')
_STAGE = re.compile(r'stage!\(\s*"([^"]+)"[\s\n]*,\s*steps!\(')

_JENKINS_POST = (
    "    }\n\n    post {\n"
    "        always {\n            echo 'Pipeline completed'\n        }\n"
    "        success {\n            echo 'Pipeline succeeded'\n        }\n"
    "        failure {\n            echo 'Pipeline failed'\n        }\n"
    "    }\n}\n"
)


class ExportFormat(enum.Enum):
    GITHUB_ACTIONS = "github"
    GITLAB_CI = "gitlab"
    JENKINSFILE = "jenkins"


@dataclass
class ExportConfig:
    format: ExportFormat
    output: Path | None = None
    name: str = "pipeline"


@dataclass
class StepExport:
    step_type: str = ""
    command: str = ""
    timeout: int | None = None
    retry: int | None = None
    environment: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class StageExport:
    name: str = ""
    steps: list[StepExport] = field(default_factory=list)
    needs: list[str] = field(default_factory=list)
    when: str | None = None


@dataclass
class EnvironmentExport:
    key: str = ""
    value: str = ""


@dataclass
class AgentExport:
    agent_type: str = ""
    image: str | None = None
    label: str | None = None


@dataclass
class PipelineExport:
    name: str = ""
    stages: list[StageExport] = field(default_factory=list)
    environment: list[EnvironmentExport] = field(default_factory=list)
    agent: AgentExport | None = None


def _extract_agent(content: str) -> AgentExport | None:
    if "agent_any!()" in content:
        return AgentExport(agent_type="any")
    if match := _AGENT_DOCKER.search(content):
        return AgentExport(agent_type="docker", image=match.group(1))
    if match := _AGENT_KUBERNETES.search(content):
        return AgentExport(agent_type="kubernetes", label=match.group(1))
    if match := _AGENT_LABEL.search(content):
        return AgentExport(agent_type="label", label=match.group(1))
    return None


def _extract_steps(content: str, stage_name: str) -> list[StepExport]:
    # Step bodies are not analysed; every stage exports one generic shell step.
    return [StepExport(step_type="shell", command="echo step")]


def _extract_stages(content: str) -> list[StageExport]:
    stages = [
        StageExport(name=match.group(1), steps=_extract_steps(content, match.group(1)))
        for match in _STAGE.finditer(content)
    ]
    for previous, stage in zip(stages, stages[1:]):
        stage.needs.append(previous.name)
    return stages


def parse_pipeline(content: str) -> PipelineExport:
    """Extract name, agent, environment and stages from pipeline source text."""
    name_match = _NAME.search(content)
    return PipelineExport(
        name=name_match.group(1) if name_match else "",
        agent=_extract_agent(content),
        environment=[
            EnvironmentExport(key=m.group(1), value=m.group(2))
            for m in _ENVIRONMENT.finditer(content)
        ],
        stages=_extract_stages(content),
    )


def _slug(text: str, separator: str) -> str:
    lowered = "".join(c if c.isalnum() else separator for c in text.lower())
    return lowered.replace(separator * 2, separator)


def _kebab(text: str) -> str:
    return _slug(text, "-")


def _snake(text: str) -> str:
    return _slug(text, "_")


def export_github_actions(pipeline: PipelineExport, config: ExportConfig) -> str:
    parts = [
        f"name: {config.name}\n\non:\n  push:\n    branches: [main]\n"
        "  pull_request:\n    branches: [main]\n\nenv:\n  CARGO_TERM_COLOR: always\n"
    ]
    parts.extend(f"  {env.key}: {env.value}\n" for env in pipeline.environment)
    parts.append("\njobs:\n")

    last = len(pipeline.stages) - 1
    for index, stage in enumerate(pipeline.stages):
        parts.append(f"  {_kebab(stage.name)}:\n")
        if stage.needs:
            parts.append(f"    needs: [{', '.join(_kebab(n) for n in stage.needs)}]\n")
        parts.append("    runs-on: ubuntu-latest\n")
        parts.append("    steps:\n")
        parts.append("      - uses: actions/checkout@v4\n")
        for step in stage.steps:
            if step.step_type == "shell":
                parts.append(f"      - name: {step.step_type}\n")
                parts.append(f"        run: {step.command}\n")
        if index < last:
            parts.append("\n")

    return "".join(parts)


def export_gitlab_ci(pipeline: PipelineExport, config: ExportConfig) -> str:
    parts = ["stages:\n"]
    parts.extend(f"  - {_snake(stage.name)}\n" for stage in pipeline.stages)
    parts.append("\n")

    for stage in pipeline.stages:
        parts.append(f"{_snake(stage.name)}:\n")
        agent = pipeline.agent
        if agent is not None:
            if agent.agent_type == "docker":
                if agent.image is not None:
                    parts.append(f"  image: {agent.image}\n")
            else:
                parts.append("  tags:\n    - rust\n")
        parts.append("  script:\n")
        parts.extend(
            f"    - {step.command}\n" for step in stage.steps if step.step_type == "shell"
        )
        parts.append("\n")

    return "".join(parts)


def export_jenkinsfile(pipeline: PipelineExport, config: ExportConfig) -> str:
    parts: list[str] = []
    agent = pipeline.agent
    if agent is not None and agent.agent_type == "docker":
        parts.append(f"        DOCKER_IMAGE = '{agent.image or 'rust:latest'}'\n")
        agent_str = "docker { image '${DOCKER_IMAGE}' }"
    elif agent is not None and agent.agent_type == "label":
        parts.append(f"        AGENT_LABEL = '{agent.label or 'rust'}'\n")
        agent_str = "label '${AGENT_LABEL}'"
    else:
        agent_str = "any"

    parts.append(f"pipeline {{\n    agent {agent_str}\n\n    environment {{\n")
    parts.extend(f"        {env.key} = '{env.value}'\n" for env in pipeline.environment)
    parts.append("    }\n\n    stages {\n")

    for stage in pipeline.stages:
        parts.append(f"        stage('{stage.name}') {{\n")
        if stage.when is not None:
            parts.append(f"            when {{ {stage.when} }}\n")
        parts.append("            steps {\n")
        parts.extend(
            f"                sh '{step.command}'\n"
            for step in stage.steps
            if step.step_type == "shell"
        )
        parts.append("            }\n")
        parts.append("        }\n\n")

    parts.append(_JENKINS_POST)
    return "".join(parts)


_EXPORTERS = {
    ExportFormat.GITHUB_ACTIONS: export_github_actions,
    ExportFormat.GITLAB_CI: export_gitlab_ci,
    ExportFormat.JENKINSFILE: export_jenkinsfile,
}


def export_pipeline(file: str | os.PathLike[str], config: ExportConfig) -> str:
    """Read a pipeline script and render it in the configured format."""
    content = Path(file).read_text(encoding="utf-8")
    return _EXPORTERS[config.format](parse_pipeline(content), config)


def save_export(content: str, output_path: str | os.PathLike[str]) -> None:
    with open(output_path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)