"""In-memory tool registry: manifests, live engine instances and metrics.

Manifest and metrics records are created and destroyed together. All
mutations run under a single re-entrant lock so per-tool metric updates are
serialized even when callers run on worker threads.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field, asdict, replace
import copy
import threading
import time

from .errors import DuplicateToolError, MissingDependencyError, ToolNotFoundError
from .logging import core_logger
from .tool_base import BaseEngine


@dataclass
class ToolManifest:
    id: str
    name: str
    version: str = "0.1.0"
    description: str = ""
    enabled: bool = True
    author: Optional[str] = None
    dependencies: List[str] = field(default_factory=list)
    permissions: List[str] = field(default_factory=list)
    settings: Dict[str, Any] = field(default_factory=dict)
    entry: Optional[str] = None
    root_dir: Optional[str] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ToolManifest":
        return cls(
            id=config["id"],
            name=config.get("name") or config["id"],
            version=config.get("version", "0.1.0"),
            description=config.get("description", ""),
            enabled=config.get("enabled", True),
            author=config.get("author"),
            dependencies=list(config.get("dependencies") or []),
            permissions=list(config.get("permissions") or []),
            settings=dict(config.get("settings") or {}),
            entry=config.get("entry"),
            root_dir=config.get("root_dir"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ToolMetrics:
    tool_id: str
    execution_count: int = 0
    average_execution_time: float = 0.0
    error_rate: float = 0.0
    last_executed: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ToolRegistry:
    def __init__(self):
        self._lock = threading.RLock()
        self._plugins: Dict[str, ToolManifest] = {}
        self._engines: Dict[str, BaseEngine] = {}
        self._metrics: Dict[str, ToolMetrics] = {}
        self._loaded_at: Dict[str, float] = {}

    def register(self, manifest: ToolManifest):
        with self._lock:
            if manifest.id in self._plugins:
                raise DuplicateToolError(manifest.id)
            for dep in manifest.dependencies:
                if dep not in self._plugins:
                    raise MissingDependencyError(manifest.id, dep)
            self._plugins[manifest.id] = copy.deepcopy(manifest)
            self._metrics[manifest.id] = ToolMetrics(tool_id=manifest.id)
        core_logger.info("[registry] registered plugin: %s (%s)", manifest.name, manifest.id)

    def unregister(self, tool_id: str) -> bool:
        # engine cleanup is the loader's job; only drop the reference here
        with self._lock:
            self._engines.pop(tool_id, None)
            self._loaded_at.pop(tool_id, None)
            self._metrics.pop(tool_id, None)
            removed = self._plugins.pop(tool_id, None) is not None
        if removed:
            core_logger.info("[registry] unregistered plugin: %s", tool_id)
        return removed

    def register_engine(self, tool_id: str, engine: BaseEngine):
        with self._lock:
            if tool_id not in self._plugins:
                raise ToolNotFoundError(f"Cannot attach engine: tool {tool_id} is not registered")
            self._engines[tool_id] = engine
            self._loaded_at[tool_id] = time.time()

    def get_engine(self, tool_id: str) -> Optional[BaseEngine]:
        return self._engines.get(tool_id)

    def get_manifest(self, tool_id: str) -> Optional[ToolManifest]:
        # manifests are immutable once registered apart from set_enabled; hand out copies
        with self._lock:
            manifest = self._plugins.get(tool_id)
            return copy.deepcopy(manifest) if manifest else None

    def get_config(self, tool_id: str) -> Optional[ToolManifest]:
        return self.get_manifest(tool_id)

    def get_all_plugin_ids(self) -> List[str]:
        with self._lock:
            return list(self._plugins.keys())

    def get_all_plugins(self) -> List[ToolManifest]:
        with self._lock:
            return [copy.deepcopy(m) for m in self._plugins.values()]

    def get_enabled_plugins(self) -> List[ToolManifest]:
        return [m for m in self.get_all_plugins() if m.enabled]

    def is_registered(self, tool_id: str) -> bool:
        return tool_id in self._plugins

    def is_loaded(self, tool_id: str) -> bool:
        return tool_id in self._engines

    def loaded_at(self, tool_id: str) -> Optional[float]:
        return self._loaded_at.get(tool_id)

    def set_enabled(self, tool_id: str, enabled: bool) -> bool:
        """Flip the enabled flag of a registered manifest. Returns False if unknown."""
        with self._lock:
            manifest = self._plugins.get(tool_id)
            if manifest is None:
                return False
            manifest.enabled = enabled
            return True

    def update_metrics(self, tool_id: str, execution_time: float, success: bool):
        with self._lock:
            m = self._metrics.get(tool_id)
            if m is None:
                return
            n = m.execution_count + 1
            # recover the integral error count before folding in this call
            errors = round(m.error_rate * (n - 1))
            if not success:
                errors += 1
            m.average_execution_time = (m.average_execution_time * (n - 1) + execution_time) / n
            m.error_rate = errors / n
            m.execution_count = n
            m.last_executed = time.time()

    def get_metrics(self, tool_id: str) -> Optional[ToolMetrics]:
        with self._lock:
            m = self._metrics.get(tool_id)
            return replace(m) if m else None

    def get_all_metrics(self) -> Dict[str, ToolMetrics]:
        with self._lock:
            return {tid: replace(m) for tid, m in self._metrics.items()}

    def clear(self):
        with self._lock:
            self._plugins.clear()
            self._engines.clear()
            self._metrics.clear()
            self._loaded_at.clear()


__all__ = ["ToolRegistry", "ToolManifest", "ToolMetrics"]
