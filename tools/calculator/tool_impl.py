from typing import Any
import operator

from toolengine import BaseEngine, ExecutionContext, ToolResult, ValidationResult

OPERATIONS = {
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "div": operator.truediv,
}


class CalculatorEngine(BaseEngine):
    def __init__(self, tool_id: str, precision: int = 6):
        super().__init__(tool_id)
        self.precision = precision

    async def initialize(self) -> None:
        self.update_status(is_running=True)

    async def execute(self, context: ExecutionContext) -> ToolResult:
        start = self.timed()
        op, a, b = context.input["op"], context.input["a"], context.input["b"]
        if op == "div" and b == 0:
            return self.create_error_result("Division by zero", self.elapsed_ms(start))
        value = round(OPERATIONS[op](a, b), self.precision)
        return self.create_success_result({"result": value}, self.elapsed_ms(start))

    async def cleanup(self) -> None:
        self.update_status(is_running=False)

    def validate(self, input_data: Any) -> ValidationResult:
        if not isinstance(input_data, dict):
            return self.create_validation_result(False, ["input must be an object"])
        errors = []
        if input_data.get("op") not in OPERATIONS:
            errors.append(f"input.op must be one of {', '.join(OPERATIONS)}")
        for key in ("a", "b"):
            value = input_data.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"input.{key} must be a number")
        return self.create_validation_result(not errors, errors or None)


__all__ = ["CalculatorEngine"]
