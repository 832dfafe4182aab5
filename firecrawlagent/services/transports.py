from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.responses import PlainTextResponse
from starlette.types import Receive, Scope, Send

from firecrawlagent.router.transport_router import (
    SSE_MESSAGE_PATH,
    TRANSPORT_DIRECT,
    TRANSPORT_SSE,
    TRANSPORT_SSE_MESSAGE,
    decide_transport,
)

logger = logging.getLogger(__name__)


class McpTransports:
    """ASGI app that hands each request to the transport its path selects.

    The streaming transport (``/sse`` and ``/sse/message``) and the direct
    transport (``/mcp``) drive the same protocol server.
    """

    def __init__(self, server: Server, *, json_response: bool = True) -> None:
        self.server = server
        self.sse = SseServerTransport(SSE_MESSAGE_PATH)
        self._json_response = json_response
        self._http_manager: StreamableHTTPSessionManager | None = None

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        # A session manager can only run once, so each app lifespan gets a new one.
        manager = StreamableHTTPSessionManager(
            app=self.server,
            json_response=self._json_response,
            stateless=True,
        )
        async with manager.run():
            self._http_manager = manager
            logger.info("Direct transport ready")
            try:
                yield
            finally:
                self._http_manager = None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return
        decision = decide_transport(scope["path"])
        if decision.transport == TRANSPORT_SSE:
            if scope["method"] != "GET":
                response = PlainTextResponse(
                    "Method not allowed", status_code=405, headers={"Allow": "GET"}
                )
                await response(scope, receive, send)
                return
            await self._serve_stream(scope, receive, send)
        elif decision.transport == TRANSPORT_SSE_MESSAGE:
            await self.sse.handle_post_message(scope, receive, send)
        elif decision.transport == TRANSPORT_DIRECT:
            if self._http_manager is None:
                response = PlainTextResponse("Direct transport is not running", status_code=503)
                await response(scope, receive, send)
                return
            await self._http_manager.handle_request(scope, receive, send)
        else:
            await PlainTextResponse("Not found", status_code=404)(scope, receive, send)

    async def _serve_stream(self, scope: Scope, receive: Receive, send: Send) -> None:
        logger.info("Streaming channel opened")
        async with self.sse.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await self.server.run(
                read_stream, write_stream, self.server.create_initialization_options()
            )
        logger.info("Streaming channel closed")
