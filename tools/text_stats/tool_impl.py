"""Character / word / line counts for a text payload."""
from typing import Any

from toolengine import BaseEngine, ExecutionContext, ToolResult, ValidationResult

DEFAULT_MAX_CHARS = 100000


class TextStatsEngine(BaseEngine):
    def __init__(self, tool_id: str, max_chars: int = DEFAULT_MAX_CHARS):
        super().__init__(tool_id)
        self.max_chars = max_chars

    async def initialize(self) -> None:
        self.update_status(is_running=True)

    async def execute(self, context: ExecutionContext) -> ToolResult:
        start = self.timed()
        text = context.input["text"]
        words = text.split()
        stats = {
            "chars": len(text),
            "words": len(words),
            "lines": len(text.splitlines()) if text else 0,
            "unique_words": len({w.lower() for w in words}),
        }
        return self.create_success_result(stats, self.elapsed_ms(start))

    async def cleanup(self) -> None:
        self.update_status(is_running=False)

    def validate(self, input_data: Any) -> ValidationResult:
        if not isinstance(input_data, dict) or not isinstance(input_data.get("text"), str):
            return self.create_validation_result(False, ["input.text must be a string"])
        if len(input_data["text"]) > self.max_chars:
            return self.create_validation_result(False, [f"input.text exceeds {self.max_chars} characters"])
        return self.create_validation_result(True)


__all__ = ["TextStatsEngine"]
