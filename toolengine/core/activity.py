"""Append-only, capacity-bounded activity log of tool lifecycle/execution actions.

Entries live in memory only. Once the cap is exceeded the oldest entries
(by timestamp) are evicted down to the cap. Every query returns entries
newest-first.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Union
import bisect
import threading
import time
import uuid

from .logging import core_logger
from .settings import DEFAULT_MAX_ACTIVITY_LOGS


RECENT_WINDOW_S = 60 * 60


class ToolAction(str, Enum):
    REGISTERED = "registered"
    LOADED = "loaded"
    UNLOADED = "unloaded"
    ENABLED = "enabled"
    DISABLED = "disabled"
    EXECUTED = "executed"
    UPDATED = "updated"
    ERROR = "error"


@dataclass
class ActivityLogEntry:
    id: str
    tool_id: str
    action: ToolAction
    performed_by: str
    timestamp: float
    success: bool
    details: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["action"] = self.action.value
        return out


class ActivityLogger:
    def __init__(self, max_logs: int = DEFAULT_MAX_ACTIVITY_LOGS):
        if max_logs < 1:
            raise ValueError("max_logs must be >= 1")
        self.max_logs = max_logs
        self._logs: List[ActivityLogEntry] = []
        self._lock = threading.Lock()

    def log(
        self,
        tool_id: str,
        action: Union[ToolAction, str],
        performed_by: str,
        success: bool = True,
        details: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> ActivityLogEntry:
        entry = ActivityLogEntry(
            id=str(uuid.uuid4()),
            tool_id=tool_id,
            action=ToolAction(action),
            performed_by=performed_by,
            timestamp=time.time(),
            success=success,
            details=details,
            error_message=error_message,
        )
        with self._lock:
            bisect.insort(self._logs, entry, key=lambda e: e.timestamp)
            if len(self._logs) > self.max_logs:
                self._evict_oldest()
        core_logger.info(
            "[activity] %s on %s by %s - %s",
            entry.action.value,
            tool_id,
            performed_by,
            "SUCCESS" if success else "FAILED",
        )
        return entry

    def _evict_oldest(self):
        # _logs is kept ordered by timestamp, ties in insertion order
        dropped = len(self._logs) - self.max_logs
        del self._logs[:dropped]
        core_logger.debug("[activity] cleaned up %d old logs", dropped)

    @staticmethod
    def _newest_first(entries: List[ActivityLogEntry], limit: Optional[int]) -> List[ActivityLogEntry]:
        ordered = entries[::-1]
        return ordered if limit is None else ordered[: max(limit, 0)]

    def _snapshot(self) -> List[ActivityLogEntry]:
        with self._lock:
            return list(self._logs)

    def __len__(self) -> int:
        return len(self._logs)

    def get_tool_logs(self, tool_id: str, limit: int = 100) -> List[ActivityLogEntry]:
        return self._newest_first([e for e in self._snapshot() if e.tool_id == tool_id], limit)

    def get_all_logs(self, filters: Optional[Dict[str, Any]] = None, limit: int = 100) -> List[ActivityLogEntry]:
        entries = self._snapshot()
        filters = filters or {}
        if filters.get("tool_id"):
            entries = [e for e in entries if e.tool_id == filters["tool_id"]]
        if filters.get("action"):
            action = ToolAction(filters["action"])
            entries = [e for e in entries if e.action == action]
        if filters.get("performed_by"):
            entries = [e for e in entries if e.performed_by == filters["performed_by"]]
        if filters.get("success") is not None:
            entries = [e for e in entries if e.success == filters["success"]]
        if filters.get("from_timestamp") is not None:
            entries = [e for e in entries if e.timestamp >= filters["from_timestamp"]]
        if filters.get("to_timestamp") is not None:
            entries = [e for e in entries if e.timestamp <= filters["to_timestamp"]]
        return self._newest_first(entries, limit)

    def get_recent_logs(self, limit: int = 50) -> List[ActivityLogEntry]:
        return self._newest_first(self._snapshot(), limit)

    def get_logs_by_action(self, action: Union[ToolAction, str], limit: int = 100) -> List[ActivityLogEntry]:
        action = ToolAction(action)
        return self._newest_first([e for e in self._snapshot() if e.action == action], limit)

    def get_error_logs(self, tool_id: Optional[str] = None, limit: int = 100) -> List[ActivityLogEntry]:
        entries = [e for e in self._snapshot() if not e.success]
        if tool_id:
            entries = [e for e in entries if e.tool_id == tool_id]
        return self._newest_first(entries, limit)

    def get_statistics(self, tool_id: Optional[str] = None) -> Dict[str, Any]:
        entries = self._snapshot()
        if tool_id:
            entries = [e for e in entries if e.tool_id == tool_id]
        action_counts = {a.value: 0 for a in ToolAction}
        for e in entries:
            action_counts[e.action.value] += 1
        one_hour_ago = time.time() - RECENT_WINDOW_S
        success_count = sum(1 for e in entries if e.success)
        return {
            "total_logs": len(entries),
            "success_count": success_count,
            "error_count": len(entries) - success_count,
            "action_counts": action_counts,
            "recent_activity_count": sum(1 for e in entries if e.timestamp > one_hour_ago),
        }

    def clear_logs(self):
        with self._lock:
            self._logs.clear()
        core_logger.info("[activity] all logs cleared")

    def clear_tool_logs(self, tool_id: str) -> int:
        with self._lock:
            before = len(self._logs)
            self._logs = [e for e in self._logs if e.tool_id != tool_id]
            removed = before - len(self._logs)
        core_logger.info("[activity] cleared %d logs for tool %s", removed, tool_id)
        return removed


__all__ = ["ActivityLogger", "ActivityLogEntry", "ToolAction"]
