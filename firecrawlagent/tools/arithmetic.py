from typing import Any

from firecrawlagent.errors import InvalidArgumentError
from .base import Tool, ToolCallResult, format_number

CALCULATE_OPERATIONS = ("add", "subtract", "multiply", "divide")


class AddTool(Tool):
    name = "add"

    async def run(self, args: dict[str, Any]) -> ToolCallResult:
        return ToolCallResult.text(format_number(args["a"] + args["b"]))


class CalculateTool(Tool):
    name = "calculate"

    async def run(self, args: dict[str, Any]) -> ToolCallResult:
        operation = args["operation"]
        a = args["a"]
        b = args["b"]
        if operation == "add":
            result = a + b
        elif operation == "subtract":
            result = a - b
        elif operation == "multiply":
            result = a * b
        elif operation == "divide":
            # Returned as result data, not raised: callers read the error field.
            if b == 0:
                return ToolCallResult.fail("invalid_argument", "Cannot divide by zero")
            result = a / b
        else:
            raise InvalidArgumentError(
                f"Tool 'calculate' arg 'operation' must be one of: {', '.join(CALCULATE_OPERATIONS)}.",
                field="operation",
            )
        return ToolCallResult.text(format_number(result))
