class ToolError(RuntimeError):
    """Base class for failures raised out of a tool call."""

    kind = "tool_error"


class ConfigurationError(ToolError):
    kind = "configuration_error"


class InvalidArgumentError(ToolError, ValueError):
    kind = "invalid_argument"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class RemoteServiceError(ToolError):
    kind = "remote_service_error"


class EmptyResultError(ToolError):
    kind = "empty_result"


class UnknownToolError(ToolError, LookupError):
    kind = "unknown_tool"


class DuplicateToolError(ToolError):
    kind = "duplicate_tool"
