"""Tool loader: bridges a ToolSource and the ToolRegistry.

Owns the only code path that instantiates engines. Lifecycle per tool id:
UNREGISTERED -> (config read, engine built, initialize()) -> REGISTERED+LOADED
-> (cleanup(), unregister) -> UNREGISTERED.

Failures never escape: every public coroutine reports a boolean and logs
the cause through the core logger.
"""
from __future__ import annotations
from typing import Dict, List
import asyncio

import networkx as nx

from .registry import ToolRegistry, ToolManifest
from .sources import ToolSource
from .logging import core_logger


class ToolLoader:
    def __init__(self, registry: ToolRegistry, source: ToolSource):
        self.registry = registry
        self.source = source
        self._load_locks: Dict[str, asyncio.Lock] = {}

    def discover(self) -> List[str]:
        try:
            ids = self.source.list_tool_ids()
        except Exception:  # noqa: BLE001
            core_logger.exception("[loader] error discovering plugins")
            return []
        core_logger.info("[loader] discovered %d potential plugins", len(ids))
        return ids

    async def load_plugin(self, tool_id: str) -> bool:
        # concurrent loads of one id wait for the first and then see it loaded
        lock = self._load_locks.setdefault(tool_id, asyncio.Lock())
        async with lock:
            return await self._load_locked(tool_id)

    async def _load_locked(self, tool_id: str) -> bool:
        if self.registry.is_loaded(tool_id):
            core_logger.debug("[loader] plugin %s is already loaded", tool_id)
            return True
        try:
            config = self.source.read_config(tool_id)
            if not config.get("enabled", True):
                core_logger.info("[loader] plugin %s is disabled", tool_id)
                return False
            factory = self.source.resolve_engine(tool_id, config)
            engine = factory(tool_id)
            await engine.initialize()
        except Exception as e:  # noqa: BLE001
            core_logger.error("[loader] error loading plugin %s: %s", tool_id, e)
            return False

        # a manifest registered without an engine (REGISTERED state) only gets its engine attached
        manifest = self.registry.get_manifest(tool_id)
        registered_here = False
        try:
            if manifest is None:
                manifest = ToolManifest.from_config(config)
                self.registry.register(manifest)
                registered_here = True
            self.registry.register_engine(tool_id, engine)
        except Exception as e:  # noqa: BLE001
            core_logger.error("[loader] error registering plugin %s: %s", tool_id, e)
            if registered_here:
                self.registry.unregister(tool_id)
            await self._cleanup_quietly(tool_id, engine)
            return False
        core_logger.info("[loader] successfully loaded plugin: %s", manifest.name)
        return True

    async def unload_plugin(self, tool_id: str) -> bool:
        engine = self.registry.get_engine(tool_id)
        if engine is not None:
            await self._cleanup_quietly(tool_id, engine)
        removed = self.registry.unregister(tool_id)
        if removed:
            core_logger.info("[loader] successfully unloaded plugin: %s", tool_id)
        return removed

    async def reload_plugin(self, tool_id: str) -> bool:
        # not atomic: the id is absent from the registry between the two phases
        await self.unload_plugin(tool_id)
        return await self.load_plugin(tool_id)

    async def load_all_plugins(self) -> Dict[str, bool]:
        ids = self._dependency_order(self.discover())
        core_logger.info("[loader] loading all plugins...")
        results: Dict[str, bool] = {}
        for tool_id in ids:
            results[tool_id] = await self.load_plugin(tool_id)
        core_logger.info(
            "[loader] all plugins processed loaded=%d failed=%d",
            sum(results.values()),
            len(results) - sum(results.values()),
        )
        return results

    def get_stats(self) -> Dict[str, int]:
        plugins = self.registry.get_all_plugins()
        return {
            "total": len(plugins),
            "loaded": sum(1 for p in plugins if self.registry.is_loaded(p.id)),
            "enabled": sum(1 for p in plugins if p.enabled),
        }

    async def _cleanup_quietly(self, tool_id: str, engine) -> None:
        try:
            await engine.cleanup()
        except Exception as e:  # noqa: BLE001
            core_logger.warning("[loader] cleanup failed tool_id=%s: %s", tool_id, e)

    def _dependency_order(self, ids: List[str]) -> List[str]:
        """Order candidates so that dependencies which are candidates too come first."""
        candidates = set(ids)
        graph: Dict[str, List[str]] = {}
        for tool_id in ids:
            try:
                deps = self.source.read_config(tool_id).get("dependencies") or []
            except Exception:  # noqa: BLE001
                deps = []  # load_plugin reports the unreadable config
            graph[tool_id] = [d for d in deps if d in candidates]
        dag = nx.DiGraph()
        dag.add_nodes_from(ids)
        for tool_id, deps in graph.items():
            dag.add_edges_from((dep, tool_id) for dep in deps)
        position = {tool_id: i for i, tool_id in enumerate(ids)}
        try:
            return list(nx.lexicographical_topological_sort(dag, key=position.get))
        except nx.NetworkXUnfeasible:
            core_logger.warning("[loader] dependency cycle detected, using discovery order")
            return list(ids)


__all__ = ["ToolLoader"]
