"""Administrative operations over the engine, with activity logging policy.

This is the caller layer that decides which lifecycle action ends up in the
activity log: activate/deactivate, bulk operations, audited execution and a
combined per-tool detail view.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .activity import ActivityLogger, ToolAction
from .orchestrator import ToolOrchestrator
from .registry import ToolRegistry
from .sources import ToolSource
from .status import ToolStatusService
from .tool_base import ExecutionContext, ToolResult
from .logging import core_logger

BULK_ACTIONS = ("enable", "disable", "load", "unload", "reload")


@dataclass
class BulkOperationResult:
    action: str
    success: int = 0
    failed: int = 0
    results: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action, "success": self.success, "failed": self.failed, "results": list(self.results)}


class ToolAdministration:
    def __init__(
        self,
        orchestrator: ToolOrchestrator,
        registry: ToolRegistry,
        source: ToolSource,
        status: ToolStatusService,
        activity: ActivityLogger,
    ):
        self.orchestrator = orchestrator
        self.registry = registry
        self.source = source
        self.status = status
        self.activity = activity

    def _set_enabled(self, tool_id: str, enabled: bool) -> bool:
        known = self.source.set_enabled(tool_id, enabled)
        # registry-only tools (no source entry) still count as known
        return self.registry.set_enabled(tool_id, enabled) or known

    async def activate(self, tool_id: str, performed_by: str) -> Dict[str, Any]:
        if not self._set_enabled(tool_id, True):
            self.activity.log(tool_id, ToolAction.ENABLED, performed_by, False, error_message="Tool not found")
            return {"success": False, "error": "Tool not found"}
        if not await self.orchestrator.load_tool(tool_id):
            self.activity.log(tool_id, ToolAction.LOADED, performed_by, False, error_message="Failed to load tool")
            return {"success": False, "error": "Tool enabled but failed to load"}
        self.activity.log(tool_id, ToolAction.ENABLED, performed_by, True)
        self.activity.log(tool_id, ToolAction.LOADED, performed_by, True)
        return {"success": True, "message": f"Tool {tool_id} activated successfully", "tool": self._status_dict(tool_id)}

    async def deactivate(self, tool_id: str, performed_by: str) -> Dict[str, Any]:
        await self.orchestrator.unload_tool(tool_id)
        if not self._set_enabled(tool_id, False):
            self.activity.log(tool_id, ToolAction.DISABLED, performed_by, False, error_message="Tool not found")
            return {"success": False, "error": "Tool not found"}
        self.activity.log(tool_id, ToolAction.UNLOADED, performed_by, True)
        self.activity.log(tool_id, ToolAction.DISABLED, performed_by, True)
        return {"success": True, "message": f"Tool {tool_id} deactivated successfully", "tool": self._status_dict(tool_id)}

    async def bulk(self, tool_ids: Iterable[str], action: str, performed_by: str) -> BulkOperationResult:
        if action not in BULK_ACTIONS:
            raise ValueError(f"Unknown bulk action {action!r}; expected one of {', '.join(BULK_ACTIONS)}")
        result = BulkOperationResult(action=action)
        for tool_id in tool_ids:
            try:
                ok = await self._apply(tool_id, action, performed_by)
                message = None if ok else "Operation failed"
            except Exception as e:  # noqa: BLE001
                core_logger.error("[admin] bulk %s failed tool_id=%s: %s", action, tool_id, e)
                self.activity.log(tool_id, ToolAction.ERROR, performed_by, False, {"bulk": action}, str(e))
                ok, message = False, str(e)
            if ok:
                result.success += 1
                result.results.append({"tool_id": tool_id, "success": True})
            else:
                result.failed += 1
                result.results.append({"tool_id": tool_id, "success": False, "message": message})
        return result

    async def _apply(self, tool_id: str, action: str, performed_by: str) -> bool:
        if action == "enable":
            ok = self._set_enabled(tool_id, True)
            self.activity.log(tool_id, ToolAction.ENABLED, performed_by, ok)
        elif action == "disable":
            ok = self._set_enabled(tool_id, False)
            self.activity.log(tool_id, ToolAction.DISABLED, performed_by, ok)
        elif action == "load":
            ok = await self.orchestrator.load_tool(tool_id)
            self.activity.log(tool_id, ToolAction.LOADED, performed_by, ok)
        elif action == "unload":
            ok = await self.orchestrator.unload_tool(tool_id)
            self.activity.log(tool_id, ToolAction.UNLOADED, performed_by, ok)
        else:
            ok = await self.orchestrator.reload_tool(tool_id)
            self.activity.log(tool_id, ToolAction.LOADED, performed_by, ok, {"reload": True})
        return ok

    async def execute(
        self, tool_id: str, context: Union[ExecutionContext, Dict[str, Any]]
    ) -> ToolResult:
        result = await self.orchestrator.execute_tool(tool_id, context)
        performed_by = context.user_id if isinstance(context, ExecutionContext) else (
            context.get("user_id") or context.get("userId") or "anonymous"
        )
        self.activity.log(
            tool_id,
            ToolAction.EXECUTED,
            performed_by,
            result.success,
            {"execution_time": result.execution_time},
            result.error,
        )
        return result

    def tool_details(self, tool_id: str, log_limit: int = 20) -> Optional[Dict[str, Any]]:
        status = self.status.get_tool_status(tool_id)
        if status is None:
            return None
        return {
            "tool": status.to_dict(),
            "recent_activity": [e.to_dict() for e in self.activity.get_tool_logs(tool_id, log_limit)],
        }

    def _status_dict(self, tool_id: str) -> Optional[Dict[str, Any]]:
        status = self.status.get_tool_status(tool_id)
        return status.to_dict() if status else None


__all__ = ["ToolAdministration", "BulkOperationResult", "BULK_ACTIONS"]
