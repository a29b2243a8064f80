"""BaseEngine abstraction every tool implementation extends.

The orchestrator only talks to engines through this capability set:
initialize / execute / cleanup / validate / get_status. The base class owns
the EngineStatus bookkeeping; concrete tools build their results through
create_success_result / create_error_result so every execution is recorded.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict, List, Optional
import time


@dataclass
class ExecutionContext:
    user_id: str
    tenant_id: str
    input: Any = None
    metadata: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecutionContext":
        return cls(
            user_id=data.get("user_id") or data.get("userId") or "anonymous",
            tenant_id=data.get("tenant_id") or data.get("tenantId") or "default",
            input=data.get("input"),
            metadata=data.get("metadata"),
            timestamp=data.get("timestamp") or time.time(),
        )


@dataclass
class ToolResult:
    success: bool
    execution_time: float = 0.0
    data: Any = None
    error: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success, "execution_time": self.execution_time}
        if self.success:
            out["data"] = self.data
        else:
            out["error"] = self.error
        if self.metadata:
            out["metadata"] = self.metadata
        return out


@dataclass
class ValidationResult:
    valid: bool
    errors: Optional[List[str]] = None


@dataclass
class EngineStatus:
    is_running: bool = False
    last_execution: Optional[float] = None
    error_count: int = 0
    success_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BaseEngine(ABC):
    def __init__(self, tool_id: str):
        self.tool_id = tool_id
        self._status = EngineStatus()

    # Lifecycle hooks -------------------------------------------------
    @abstractmethod
    async def initialize(self) -> None:
        """Load resources, connect to services. Raising aborts the load."""

    @abstractmethod
    async def execute(self, context: ExecutionContext) -> ToolResult:
        ...

    @abstractmethod
    async def cleanup(self) -> None:
        """Release resources before unloading."""

    @abstractmethod
    def validate(self, input_data: Any) -> ValidationResult:
        ...

    def get_status(self) -> EngineStatus:
        return replace(self._status)

    # Helper wrappers -------------------------------------------------
    def update_status(self, **changes: Any) -> None:
        self._status = replace(self._status, **changes)

    def record_execution(self, success: bool) -> None:
        self._status.last_execution = time.time()
        if success:
            self._status.success_count += 1
        else:
            self._status.error_count += 1

    def create_success_result(
        self, data: Any, execution_time: float, metadata: Optional[Dict[str, Any]] = None
    ) -> ToolResult:
        self.record_execution(True)
        return ToolResult(success=True, data=data, execution_time=execution_time, metadata=metadata)

    def create_error_result(self, error: str, execution_time: float) -> ToolResult:
        self.record_execution(False)
        return ToolResult(success=False, error=error, execution_time=execution_time)

    @staticmethod
    def create_validation_result(valid: bool, errors: Optional[List[str]] = None) -> ValidationResult:
        return ValidationResult(valid=valid, errors=errors)

    @staticmethod
    def timed() -> float:
        return time.perf_counter()

    @staticmethod
    def elapsed_ms(start: float) -> float:
        return round((time.perf_counter() - start) * 1000.0, 3)


__all__ = [
    "BaseEngine",
    "ExecutionContext",
    "ToolResult",
    "ValidationResult",
    "EngineStatus",
]
