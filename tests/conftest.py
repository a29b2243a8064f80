from pathlib import Path

import pytest

from toolengine import (
    ActivityLogger,
    BaseEngine,
    StaticToolSource,
    ToolLoader,
    ToolOrchestrator,
    ToolRegistry,
    ToolStatusService,
)
from toolengine.core.admin import ToolAdministration

TOOLS_ROOT = Path(__file__).resolve().parent.parent / "tools"


class SpyEngine(BaseEngine):
    """Records every call; behavior is switched by constructor flags."""

    def __init__(
        self,
        tool_id,
        fail_init=False,
        fail_cleanup=False,
        fail_execute=False,
        succeed=True,
        execution_time=10.0,
        errors=None,
        gate=None,
        init_gate=None,
    ):
        super().__init__(tool_id)
        self.fail_init = fail_init
        self.fail_cleanup = fail_cleanup
        self.fail_execute = fail_execute
        self.succeed = succeed
        self.execution_time = execution_time
        self.errors = errors
        self.gate = gate
        self.init_gate = init_gate
        self.calls = []

    async def initialize(self):
        self.calls.append("initialize")
        if self.init_gate is not None:
            await self.init_gate.wait()
        if self.fail_init:
            raise RuntimeError(f"{self.tool_id} failed to initialize")
        self.update_status(is_running=True)

    async def execute(self, context):
        self.calls.append("execute")
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_execute:
            raise RuntimeError("engine exploded")
        if self.succeed:
            return self.create_success_result({"input": context.input}, self.execution_time)
        return self.create_error_result("tool reported failure", self.execution_time)

    async def cleanup(self):
        self.calls.append("cleanup")
        self.update_status(is_running=False)
        if self.fail_cleanup:
            raise RuntimeError("cleanup boom")

    def validate(self, input_data):
        self.calls.append("validate")
        if self.errors:
            return self.create_validation_result(False, list(self.errors))
        return self.create_validation_result(True)


class Harness:
    """Engine services wired over an in-memory StaticToolSource."""

    def __init__(self, max_concurrent=100, auto_load=False, source=None):
        self.source = source if source is not None else StaticToolSource()
        self.registry = ToolRegistry()
        self.loader = ToolLoader(self.registry, self.source)
        self.orchestrator = ToolOrchestrator(
            self.registry, self.loader, max_concurrent_executions=max_concurrent, auto_load=auto_load
        )
        self.status = ToolStatusService(self.registry)
        self.activity = ActivityLogger(max_logs=100)
        self.admin = ToolAdministration(self.orchestrator, self.registry, self.source, self.status, self.activity)
        self.engines = {}

    def add_tool(self, tool_id, config=None, **engine_kwargs):
        def factory(tid):
            engine = SpyEngine(tid, **engine_kwargs)
            self.engines.setdefault(tid, []).append(engine)
            return engine

        self.source.add({"id": tool_id, **(config or {})}, factory)

    def engine(self, tool_id):
        """Most recently built engine for tool_id."""
        return self.engines[tool_id][-1]


@pytest.fixture
def make_harness():
    return Harness


@pytest.fixture
def harness():
    return Harness()


@pytest.fixture
def spy_engine_cls():
    return SpyEngine


@pytest.fixture
def tools_root():
    return TOOLS_ROOT


@pytest.fixture
def ctx():
    return {"user_id": "alice", "tenant_id": "acme", "input": {"text": "hello"}}
