from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server

from firecrawlagent.errors import InvalidArgumentError, ToolError
from firecrawlagent.tools.base import ToolCallResult
from .session import SERVER_NAME, SERVER_VERSION, ToolSession

logger = logging.getLogger(__name__)


def to_call_tool_result(result: ToolCallResult) -> types.CallToolResult:
    if result.error is not None:
        # Domain errors travel as result data next to an empty content list.
        return types.CallToolResult(
            content=[],
            error={"code": result.error.code, "message": result.error.message},
        )
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=block.text) for block in result.content]
    )


def tool_error_result(exc: ToolError) -> types.CallToolResult:
    detail: dict[str, Any] = {"type": exc.kind, "message": str(exc)}
    if isinstance(exc, InvalidArgumentError) and exc.field:
        detail["field"] = exc.field
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=str(exc))],
        structuredContent={"error": detail},
        isError=True,
    )


def build_mcp_server(resolve_session: Callable[[], ToolSession]) -> Server:
    """Protocol handlers for every transport; each call resolves the shared session."""
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        described = await resolve_session().list_tools()
        return [
            types.Tool(
                name=str(tool["name"]),
                description=str(tool["description"]),
                inputSchema=tool["inputSchema"],
            )
            for tool in described
        ]

    # Arguments are checked by the tool registry so errors name the offending field.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        try:
            result = await resolve_session().call_tool(name, arguments)
        except ToolError as exc:
            logger.error("Tool %s failed: %s", name, exc)
            return tool_error_result(exc)
        return to_call_tool_result(result)

    return server
