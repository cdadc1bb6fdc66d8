"""Executor capabilities, health status and per-run pipeline context."""

from __future__ import annotations

import enum
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ExecutorCapabilities:
    """What an executor is able to do."""

    can_execute_shell: bool = True
    can_run_docker: bool = False
    can_run_kubernetes: bool = False
    supports_parallel: bool = False
    supports_caching: bool = False
    supports_timeout: bool = True
    supports_retry: bool = True


class HealthState(enum.Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class HealthStatus:
    """Health of an executor, with a reason when it is not healthy."""

    state: HealthState
    reason: str | None = None

    @staticmethod
    def healthy() -> HealthStatus:
        return HealthStatus(HealthState.HEALTHY)

    @staticmethod
    def degraded(reason: str) -> HealthStatus:
        return HealthStatus(HealthState.DEGRADED, reason)

    @staticmethod
    def unhealthy(reason: str) -> HealthStatus:
        return HealthStatus(HealthState.UNHEALTHY, reason)

    def is_operational(self) -> bool:
        """True when healthy or degraded."""
        return self.state is not HealthState.UNHEALTHY


@dataclass
class PipelineContext:
    """Environment, working directory and stage results of one pipeline run."""

    env: dict[str, str] = field(default_factory=lambda: dict(os.environ))
    cwd: Path = field(default_factory=Path.cwd)
    pipeline_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    stage_results: dict[str, Any] = field(default_factory=dict)

    def set_env(self, key: str, value: str) -> None:
        self.env[key] = value

    def get_env(self, key: str) -> str | None:
        return self.env.get(key)

    def set_cwd(self, path: str | os.PathLike[str]) -> None:
        self.cwd = Path(path)

    def record_stage_result(self, stage_name: str, result: Any) -> None:
        self.stage_results[stage_name] = result

    def get_stage_result(self, stage_name: str) -> Any | None:
        return self.stage_results.get(stage_name)