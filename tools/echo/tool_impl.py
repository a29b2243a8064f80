from typing import Any

from toolengine import BaseEngine, ExecutionContext, ToolResult, ValidationResult


class EchoEngine(BaseEngine):
    """Echoes the input back; strings are upper-cased when settings.uppercase is set."""

    def __init__(self, tool_id: str, uppercase: bool = False):
        super().__init__(tool_id)
        self.uppercase = uppercase

    async def initialize(self) -> None:
        self.update_status(is_running=True)

    async def execute(self, context: ExecutionContext) -> ToolResult:
        start = self.timed()
        data = context.input
        if self.uppercase and isinstance(data, str):
            data = data.upper()
        return self.create_success_result(
            {"echo": data, "tenant_id": context.tenant_id},
            self.elapsed_ms(start),
        )

    async def cleanup(self) -> None:
        self.update_status(is_running=False)

    def validate(self, input_data: Any) -> ValidationResult:
        return self.create_validation_result(True)


__all__ = ["EchoEngine"]
