"""
toolengine

Multi-tenant execution engine for pluggable, independently versioned tools:
registry, loader, orchestrator, status/health projection and activity log.
"""

from .core.tool_base import (
    BaseEngine,
    ExecutionContext,
    ToolResult,
    ValidationResult,
    EngineStatus,
)
from .core.registry import ToolRegistry, ToolManifest, ToolMetrics
from .core.sources import DirectoryToolSource, StaticToolSource
from .core.loader import ToolLoader
from .core.orchestrator import ToolOrchestrator
from .core.status import ToolStatusService, ToolStatusState, ToolHealthStatus
from .core.activity import ActivityLogger, ToolAction
from .core.settings import EngineSettings
from .runtime import EngineRuntime, create_runtime

__version__ = "0.1.0"

__all__ = [
    "BaseEngine",
    "ExecutionContext",
    "ToolResult",
    "ValidationResult",
    "EngineStatus",
    "ToolRegistry",
    "ToolManifest",
    "ToolMetrics",
    "DirectoryToolSource",
    "StaticToolSource",
    "ToolLoader",
    "ToolOrchestrator",
    "ToolStatusService",
    "ToolStatusState",
    "ToolHealthStatus",
    "ActivityLogger",
    "ToolAction",
    "EngineSettings",
    "EngineRuntime",
    "create_runtime",
]
