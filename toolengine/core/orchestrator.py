"""ToolOrchestrator: single facade for tool execution and lifecycle commands.

execute_tool pipeline (every failure comes back as a ToolResult, nothing is
raised to the caller):
  1. unknown id                 -> "Tool <id> is not registered"
  2. registered but not loaded  -> lazy load; failure -> "Failed to load tool <id>"
  3. no engine after loading    -> "Engine not found for tool <id>"
  4. engine.validate(input)     -> "Validation failed: ..." (tool not invoked)
  5. in-flight >= ceiling       -> "Maximum concurrent executions reached" (tool not invoked)
  6. dispatch under a synthetic execution id, always released afterwards
  7. registry metrics updated with the outcome, raised errors included
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
import asyncio
import inspect
import threading
import time
import uuid

from .errors import ExecutionError
from .loader import ToolLoader
from .registry import ToolRegistry, ToolManifest, ToolMetrics
from .settings import DEFAULT_MAX_CONCURRENT_EXECUTIONS
from .tool_base import ExecutionContext, ToolResult
from .logging import core_logger, summarize_for_log

MAX_CONCURRENCY_ERROR = "Maximum concurrent executions reached"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000.0, 3)


class ToolOrchestrator:
    def __init__(
        self,
        registry: ToolRegistry,
        loader: ToolLoader,
        max_concurrent_executions: int = DEFAULT_MAX_CONCURRENT_EXECUTIONS,
        auto_load: bool = True,
    ):
        self.registry = registry
        self.loader = loader
        self.max_concurrent_executions = max_concurrent_executions
        self.auto_load = auto_load
        self._initialized = False
        self._executions: Dict[str, asyncio.Future] = {}
        self._executions_lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def active_executions(self) -> int:
        return len(self._executions)

    async def initialize(self) -> None:
        if self._initialized:
            core_logger.debug("[orchestrator] already initialized")
            return
        core_logger.info("[orchestrator] initializing auto_load=%s", self.auto_load)
        if self.auto_load:
            await self.loader.load_all_plugins()
        self._initialized = True
        core_logger.info("[orchestrator] initialization complete")

    async def execute_tool(
        self, tool_id: str, context: Union[ExecutionContext, Dict[str, Any]]
    ) -> ToolResult:
        start = time.perf_counter()
        try:
            if isinstance(context, dict):
                context = ExecutionContext.from_dict(context)

            if not self.registry.is_registered(tool_id):
                return ToolResult(
                    success=False, error=f"Tool {tool_id} is not registered", execution_time=_elapsed_ms(start)
                )

            if not self.registry.is_loaded(tool_id):
                if not await self.loader.load_plugin(tool_id):
                    return ToolResult(
                        success=False, error=f"Failed to load tool {tool_id}", execution_time=_elapsed_ms(start)
                    )

            engine = self.registry.get_engine(tool_id)
            if engine is None:
                return ToolResult(
                    success=False, error=f"Engine not found for tool {tool_id}", execution_time=_elapsed_ms(start)
                )

            validation = engine.validate(context.input)
            if not validation.valid:
                return ToolResult(
                    success=False,
                    error=f"Validation failed: {', '.join(validation.errors or [])}",
                    execution_time=_elapsed_ms(start),
                )

            execution_id = f"{tool_id}-{uuid.uuid4().hex}"
            # check and registration must not be separated by a suspension point
            with self._executions_lock:
                if len(self._executions) >= self.max_concurrent_executions:
                    core_logger.warning(
                        "[orchestrator] concurrency ceiling reached tool_id=%s in_flight=%d",
                        tool_id,
                        len(self._executions),
                    )
                    return ToolResult(success=False, error=MAX_CONCURRENCY_ERROR, execution_time=_elapsed_ms(start))
                pending = asyncio.ensure_future(self._dispatch(engine, context))
                self._executions[execution_id] = pending

            core_logger.debug(
                "[orchestrator] execute tool_id=%s execution_id=%s tenant=%s input=%s",
                tool_id,
                execution_id,
                context.tenant_id,
                summarize_for_log(context.input),
            )
            try:
                result = await pending
            finally:
                with self._executions_lock:
                    self._executions.pop(execution_id, None)

            if not isinstance(result, ToolResult):
                raise ExecutionError(f"Tool {tool_id} returned {type(result).__name__}, expected ToolResult")
            self.registry.update_metrics(tool_id, result.execution_time, result.success)
            core_logger.debug(
                "[orchestrator] done tool_id=%s success=%s execution_time_ms=%.2f",
                tool_id,
                result.success,
                result.execution_time,
            )
            return result
        except Exception as e:  # noqa: BLE001
            execution_time = _elapsed_ms(start)
            core_logger.error("[orchestrator] execution failed tool_id=%s: %s", tool_id, e)
            self.registry.update_metrics(tool_id, execution_time, False)
            return ToolResult(success=False, error=str(e) or type(e).__name__, execution_time=execution_time)

    @staticmethod
    async def _dispatch(engine, context: ExecutionContext):
        result = engine.execute(context)
        if inspect.isawaitable(result):
            result = await result
        return result

    # Lifecycle delegation ----------------------------------------------
    async def load_tool(self, tool_id: str) -> bool:
        return await self.loader.load_plugin(tool_id)

    async def unload_tool(self, tool_id: str) -> bool:
        return await self.loader.unload_plugin(tool_id)

    async def reload_tool(self, tool_id: str) -> bool:
        return await self.loader.reload_plugin(tool_id)

    # Read-only projections ----------------------------------------------
    def get_tool_config(self, tool_id: str) -> Optional[ToolManifest]:
        return self.registry.get_config(tool_id)

    def get_all_tools(self) -> List[ToolManifest]:
        return self.registry.get_all_plugins()

    def get_enabled_tools(self) -> List[ToolManifest]:
        return self.registry.get_enabled_plugins()

    def get_tool_metrics(self, tool_id: str) -> Optional[ToolMetrics]:
        return self.registry.get_metrics(tool_id)

    def get_all_metrics(self) -> Dict[str, ToolMetrics]:
        return self.registry.get_all_metrics()

    def get_system_status(self) -> Dict[str, Any]:
        status: Dict[str, Any] = {
            "initialized": self._initialized,
            "active_executions": self.active_executions,
            "max_concurrent_executions": self.max_concurrent_executions,
        }
        status.update(self.loader.get_stats())
        return status

    async def shutdown(self) -> None:
        core_logger.info("[orchestrator] shutting down...")
        with self._executions_lock:
            pending = list(self._executions.values())
        if pending:
            core_logger.info("[orchestrator] waiting for %d executions to complete...", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
        for tool_id in self.registry.get_all_plugin_ids():
            await self.loader.unload_plugin(tool_id)
        self._initialized = False
        core_logger.info("[orchestrator] shutdown complete")


__all__ = ["ToolOrchestrator", "MAX_CONCURRENCY_ERROR"]
