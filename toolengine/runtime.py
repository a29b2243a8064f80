"""Process wiring: build every engine service once and hand out references.

Environment variables (see core.settings):
  TOOLENGINE_TOOLS_DIR, TOOLENGINE_AUTO_LOAD,
  TOOLENGINE_MAX_CONCURRENT_EXECUTIONS, TOOLENGINE_MAX_ACTIVITY_LOGS
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .core.activity import ActivityLogger
from .core.admin import ToolAdministration
from .core.loader import ToolLoader
from .core.orchestrator import ToolOrchestrator
from .core.registry import ToolRegistry
from .core.settings import EngineSettings
from .core.sources import DirectoryToolSource, ToolSource
from .core.status import ToolStatusService
from .core.logging import core_logger


@dataclass
class EngineRuntime:
    settings: EngineSettings
    source: ToolSource
    registry: ToolRegistry
    loader: ToolLoader
    orchestrator: ToolOrchestrator
    status: ToolStatusService
    activity: ActivityLogger
    admin: ToolAdministration

    async def start(self):
        await self.orchestrator.initialize()
        return self

    async def stop(self):
        await self.orchestrator.shutdown()


def create_runtime(settings: Optional[EngineSettings] = None, source: Optional[ToolSource] = None) -> EngineRuntime:
    settings = settings or EngineSettings.from_env()
    if source is None:
        source = DirectoryToolSource(settings.tools_dir)
        core_logger.info("[runtime] tool source dir=%s", settings.tools_dir)
    registry = ToolRegistry()
    loader = ToolLoader(registry, source)
    orchestrator = ToolOrchestrator(
        registry,
        loader,
        max_concurrent_executions=settings.max_concurrent_executions,
        auto_load=settings.auto_load,
    )
    status = ToolStatusService(registry)
    activity = ActivityLogger(max_logs=settings.max_activity_logs)
    admin = ToolAdministration(orchestrator, registry, source, status, activity)
    return EngineRuntime(
        settings=settings,
        source=source,
        registry=registry,
        loader=loader,
        orchestrator=orchestrator,
        status=status,
        activity=activity,
        admin=admin,
    )


__all__ = ["EngineRuntime", "create_runtime"]
