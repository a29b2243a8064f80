from collections import Counter
from typing import Any
import re

from toolengine import BaseEngine, ExecutionContext, ToolResult, ValidationResult

STOPWORDS = frozenset(
    "a an and are as at be by for from has he in is it its of on or that the to was were will with".split()
)
_WORD = re.compile(r"[A-Za-z][A-Za-z'-]+")


class KeywordExtractorEngine(BaseEngine):
    def __init__(self, tool_id: str, top_k: int = 5):
        super().__init__(tool_id)
        self.top_k = top_k

    async def initialize(self) -> None:
        self.update_status(is_running=True)

    async def execute(self, context: ExecutionContext) -> ToolResult:
        start = self.timed()
        top_k = context.input.get("top_k", self.top_k)
        terms = [w.lower() for w in _WORD.findall(context.input["text"])]
        counts = Counter(t for t in terms if t not in STOPWORDS)
        if not counts:
            return self.create_error_result("No keywords found", self.elapsed_ms(start))
        keywords = [{"term": t, "count": c} for t, c in counts.most_common(top_k)]
        return self.create_success_result({"keywords": keywords}, self.elapsed_ms(start), {"top_k": top_k})

    async def cleanup(self) -> None:
        self.update_status(is_running=False)

    def validate(self, input_data: Any) -> ValidationResult:
        errors = []
        if not isinstance(input_data, dict):
            return self.create_validation_result(False, ["input must be an object"])
        if not isinstance(input_data.get("text"), str):
            errors.append("input.text must be a string")
        top_k = input_data.get("top_k", self.top_k)
        if not isinstance(top_k, int) or top_k < 1:
            errors.append("input.top_k must be a positive integer")
        return self.create_validation_result(not errors, errors or None)


__all__ = ["KeywordExtractorEngine"]
