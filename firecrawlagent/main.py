from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from firecrawlagent.config import configure_logging, settings
from firecrawlagent.services.mcp_server import build_mcp_server
from firecrawlagent.services.session import SERVER_VERSION, SessionDirectory, ToolSession
from firecrawlagent.services.transports import McpTransports

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

sessions = SessionDirectory(settings.firecrawl())


def shared_session() -> ToolSession:
    return sessions.get(settings.session_name)


mcp_server = build_mcp_server(shared_session)
transports = McpTransports(mcp_server)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    async with transports.run():
        logger.info("Tool server ready (session %s)", settings.session_name)
        yield


# No docs routes: every path other than the transport paths answers 404.
app = FastAPI(
    title="Firecrawl MCP Agent",
    version=SERVER_VERSION,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)
app.mount("/", transports)
