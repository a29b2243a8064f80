"""Tool sources: where the loader finds candidate tools, their configs and
their engine implementations.

A source answers three questions:
  list_tool_ids()            -> which tool ids exist
  read_config(tool_id)       -> normalized config dict for one tool
  resolve_engine(id, config) -> callable(tool_id) building a BaseEngine

DirectoryToolSource reads tool packages from disk (<root>/<tool_id>/config.*
plus the module named by `entry`). StaticToolSource is an in-memory
registration table mapping tool ids to configs and engine factories.
Both keep administrative enable/disable overrides in memory.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional
import functools
import importlib.util
import inspect
import sys
import threading

from .config_loader import find_config_file, parse_config_file, normalize_config
from .errors import ConfigError, LoadError, ToolNotFoundError
from .logging import core_logger
from .tool_base import BaseEngine

EngineFactory = Callable[[str], BaseEngine]


class ToolSource:
    def __init__(self, factories: Optional[Dict[str, EngineFactory]] = None):
        self.factories: Dict[str, EngineFactory] = dict(factories or {})
        self._enabled_overrides: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def list_tool_ids(self) -> List[str]:  # pragma: no cover - interface
        raise NotImplementedError

    def _read_raw_config(self, tool_id: str) -> Dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    def _resolve_entry(self, tool_id: str, config: Dict[str, Any]) -> EngineFactory:
        raise LoadError(f"No engine factory registered for tool {tool_id}")

    def read_config(self, tool_id: str) -> Dict[str, Any]:
        config = self._read_raw_config(tool_id)
        with self._lock:
            if tool_id in self._enabled_overrides:
                config["enabled"] = self._enabled_overrides[tool_id]
        return config

    def resolve_engine(self, tool_id: str, config: Dict[str, Any]) -> EngineFactory:
        factory = self.factories.get(tool_id)
        if factory is not None:
            return factory
        return self._resolve_entry(tool_id, config)

    def register_factory(self, tool_id: str, factory: EngineFactory):
        self.factories[tool_id] = factory

    def set_enabled(self, tool_id: str, enabled: bool) -> bool:
        """Record an administrative enable/disable. Returns False if the tool is unknown."""
        if tool_id not in self.list_tool_ids():
            return False
        with self._lock:
            self._enabled_overrides[tool_id] = enabled
        return True


class StaticToolSource(ToolSource):
    def __init__(
        self,
        configs: Iterable[Dict[str, Any]] = (),
        factories: Optional[Dict[str, EngineFactory]] = None,
    ):
        super().__init__(factories)
        self._configs: Dict[str, Dict[str, Any]] = {}
        for c in configs:
            self.add(c)

    def add(self, config: Dict[str, Any], factory: Optional[EngineFactory] = None):
        td = normalize_config(config)
        self._configs[td["id"]] = td
        if factory is not None:
            self.factories[td["id"]] = factory

    def list_tool_ids(self) -> List[str]:
        return list(self._configs.keys())

    def _read_raw_config(self, tool_id: str) -> Dict[str, Any]:
        if tool_id not in self._configs:
            raise ToolNotFoundError(f"Tool {tool_id} not found")
        cfg = dict(self._configs[tool_id])
        cfg["settings"] = dict(cfg.get("settings") or {})
        return cfg


class DirectoryToolSource(ToolSource):
    def __init__(self, root: Path | str, factories: Optional[Dict[str, EngineFactory]] = None):
        super().__init__(factories)
        self.root = Path(root)

    def list_tool_ids(self) -> List[str]:
        if not self.root.exists():
            core_logger.warning("[source] tools dir does not exist: %s", self.root)
            return []
        ids = []
        for child in sorted(self.root.iterdir()):
            if not child.is_dir() or child.name.startswith((".", "_")):
                continue
            if find_config_file(child) is not None:
                ids.append(child.name)
        return ids

    def _read_raw_config(self, tool_id: str) -> Dict[str, Any]:
        tool_dir = self.root / tool_id
        path = find_config_file(tool_dir)
        if path is None:
            raise ToolNotFoundError(f"No config found for tool {tool_id} in {tool_dir}")
        config = parse_config_file(path, default_id=tool_id)
        if config["id"] != tool_id:
            raise ConfigError(f"Config id {config['id']!r} does not match tool directory {tool_id!r}")
        return config

    def _resolve_entry(self, tool_id: str, config: Dict[str, Any]) -> EngineFactory:
        entry = config.get("entry")
        if not entry:
            raise LoadError(f"Tool {tool_id} declares no entry and has no registered factory")
        module_name, class_name = entry.split(":", 1)
        root = Path(config.get("root_dir") or self.root / tool_id)
        candidate = root / (module_name.replace(".", "/") + ".py")
        if not candidate.exists():
            candidate = root / module_name.replace(".", "/") / "__init__.py"
        if not candidate.exists():
            raise LoadError(f"Engine module {module_name} not found under {root}")
        # private module name avoids collisions between tools sharing a module filename
        safe_name = f"toolengine_dyn_{tool_id.replace('-', '_').replace('.', '_')}"
        spec = importlib.util.spec_from_file_location(safe_name, str(candidate))
        if spec is None or spec.loader is None:
            raise LoadError(f"Cannot import engine module {candidate}")
        mod = importlib.util.module_from_spec(spec)
        sys.modules[safe_name] = mod
        try:
            spec.loader.exec_module(mod)
        except Exception as e:
            sys.modules.pop(safe_name, None)
            raise LoadError(f"Failed to load engine module {candidate}: {e}") from e
        core_logger.debug("[source] imported %s for tool_id=%s", candidate, tool_id)
        engine_cls = getattr(mod, class_name, None)
        if engine_cls is None:
            raise LoadError(f"Engine class {class_name} not found in {candidate}")
        if not (inspect.isclass(engine_cls) and issubclass(engine_cls, BaseEngine)):
            raise LoadError(f"Engine class {class_name} does not inherit from BaseEngine")
        # manifest settings become constructor keyword arguments
        return functools.partial(engine_cls, **(config.get("settings") or {}))


__all__ = ["ToolSource", "StaticToolSource", "DirectoryToolSource", "EngineFactory"]
