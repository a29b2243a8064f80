"""Read-side status and health projection over the registry.

status: DISABLED if the manifest is disabled, INACTIVE if no engine is
loaded, ACTIVE otherwise.
health: UNKNOWN if not loaded; UNHEALTHY above a 0.5 error rate, DEGRADED
above 0.2; UNHEALTHY as well when the engine reports not running after at
least one error; HEALTHY otherwise.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .registry import ToolRegistry, ToolManifest, ToolMetrics
from .tool_base import EngineStatus

UNHEALTHY_ERROR_RATE = 0.5
DEGRADED_ERROR_RATE = 0.2


class ToolStatusState(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DISABLED = "disabled"


class ToolHealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class ToolStatus:
    tool_id: str
    name: str
    version: str
    status: ToolStatusState
    is_enabled: bool
    is_loaded: bool
    health: ToolHealthStatus
    metrics: ToolMetrics
    engine_status: Optional[EngineStatus] = None
    loaded_at: Optional[float] = None
    last_activity: Optional[float] = None
    permissions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tool_id": self.tool_id,
            "name": self.name,
            "version": self.version,
            "status": self.status.value,
            "is_enabled": self.is_enabled,
            "is_loaded": self.is_loaded,
            "loaded_at": self.loaded_at,
            "last_activity": self.last_activity,
            "engine_status": self.engine_status.to_dict() if self.engine_status else None,
            "health": self.health.value,
            "metrics": self.metrics.to_dict(),
            "permissions": list(self.permissions),
        }


def determine_status(manifest: ToolManifest, is_loaded: bool) -> ToolStatusState:
    if not manifest.enabled:
        return ToolStatusState.DISABLED
    if not is_loaded:
        return ToolStatusState.INACTIVE
    return ToolStatusState.ACTIVE


def determine_health(engine_status: Optional[EngineStatus], metrics: Optional[ToolMetrics]) -> ToolHealthStatus:
    if engine_status is None:
        return ToolHealthStatus.UNKNOWN
    error_rate = metrics.error_rate if metrics else 0.0
    if error_rate > UNHEALTHY_ERROR_RATE:
        return ToolHealthStatus.UNHEALTHY
    if error_rate > DEGRADED_ERROR_RATE:
        return ToolHealthStatus.DEGRADED
    if not engine_status.is_running and engine_status.error_count > 0:
        return ToolHealthStatus.UNHEALTHY
    return ToolHealthStatus.HEALTHY


class ToolStatusService:
    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    def get_tool_status(self, tool_id: str) -> Optional[ToolStatus]:
        manifest = self.registry.get_config(tool_id)
        if manifest is None:
            return None
        engine = self.registry.get_engine(tool_id)
        is_loaded = engine is not None
        engine_status = engine.get_status() if engine is not None else None
        metrics = self.registry.get_metrics(tool_id) or ToolMetrics(tool_id=tool_id)
        last_activity = max(
            (t for t in (metrics.last_executed, engine_status.last_execution if engine_status else None) if t),
            default=None,
        )
        return ToolStatus(
            tool_id=manifest.id,
            name=manifest.name,
            version=manifest.version,
            status=determine_status(manifest, is_loaded),
            is_enabled=manifest.enabled,
            is_loaded=is_loaded,
            health=determine_health(engine_status, metrics),
            metrics=metrics,
            engine_status=engine_status,
            loaded_at=self.registry.loaded_at(tool_id),
            last_activity=last_activity,
            permissions=list(manifest.permissions),
        )

    def get_all_tool_statuses(self) -> List[ToolStatus]:
        statuses = (self.get_tool_status(tid) for tid in self.registry.get_all_plugin_ids())
        return [s for s in statuses if s is not None]

    def get_active_tools(self) -> List[ToolStatus]:
        return [s for s in self.get_all_tool_statuses() if s.status == ToolStatusState.ACTIVE]

    def get_inactive_tools(self) -> List[ToolStatus]:
        return [
            s
            for s in self.get_all_tool_statuses()
            if s.status in (ToolStatusState.INACTIVE, ToolStatusState.DISABLED)
        ]

    def get_unhealthy_tools(self) -> List[ToolStatus]:
        return [
            s
            for s in self.get_all_tool_statuses()
            if s.health in (ToolHealthStatus.DEGRADED, ToolHealthStatus.UNHEALTHY)
        ]

    def get_status_summary(self) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            "total": 0,
            "active": 0,
            "inactive": 0,
            "disabled": 0,
            "healthy": 0,
            "degraded": 0,
            "unhealthy": 0,
            "unknown": 0,
            "error_rate": 0.0,
        }
        total_errors = 0.0
        total_executions = 0
        for s in self.get_all_tool_statuses():
            summary["total"] += 1
            if s.status.value in summary:
                summary[s.status.value] += 1
            summary[s.health.value] += 1
            # weighted by execution volume, not a mean of rates
            total_executions += s.metrics.execution_count
            total_errors += s.metrics.execution_count * s.metrics.error_rate
        summary["error_rate"] = total_errors / total_executions if total_executions else 0.0
        return summary


__all__ = [
    "ToolStatusService",
    "ToolStatus",
    "ToolStatusState",
    "ToolHealthStatus",
    "determine_status",
    "determine_health",
]
