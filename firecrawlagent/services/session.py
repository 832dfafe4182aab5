from __future__ import annotations

import logging
import threading
from typing import Any

from firecrawlagent.config import FirecrawlConfig
from firecrawlagent.tools import (
    AddTool,
    CalculateTool,
    FirecrawlScrapeTool,
    FirecrawlSearchTool,
    ToolCallResult,
    ToolDescriptor,
    ToolRegistry,
)
from firecrawlagent.tools.arithmetic import CALCULATE_OPERATIONS
from firecrawlagent.tools.firecrawl_scrape import SCRAPE_FORMATS
from .firecrawl_client import FirecrawlClient

logger = logging.getLogger(__name__)

SERVER_NAME = "Authless MCP with Firecrawl"
SERVER_VERSION = "1.0.0"


def _build_tool_descriptors(client: FirecrawlClient) -> list[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="add",
            description="Add two numbers.",
            tool=AddTool(),
            schema={
                "type": "object",
                "required": ["a", "b"],
                "properties": {
                    "a": {"type": "number"},
                    "b": {"type": "number"},
                },
            },
        ),
        ToolDescriptor(
            name="calculate",
            description="Apply add, subtract, multiply or divide to two numbers.",
            tool=CalculateTool(),
            schema={
                "type": "object",
                "required": ["operation", "a", "b"],
                "properties": {
                    "operation": {"type": "string", "enum": list(CALCULATE_OPERATIONS)},
                    "a": {"type": "number"},
                    "b": {"type": "number"},
                },
            },
        ),
        ToolDescriptor(
            name="firecrawl_scrape",
            description="Scrape a web page with Firecrawl and return its markdown and/or links.",
            tool=FirecrawlScrapeTool(client),
            schema={
                "type": "object",
                "required": ["url"],
                "properties": {
                    "url": {
                        "type": "string",
                        "format": "uri",
                        "description": "The URL to scrape",
                    },
                    "formats": {
                        "type": "array",
                        "items": {"type": "string", "enum": list(SCRAPE_FORMATS)},
                        "description": "Content formats to request. Defaults to markdown.",
                    },
                },
            },
        ),
        ToolDescriptor(
            name="firecrawl_search",
            description="Search the web with Firecrawl and return the raw result records.",
            tool=FirecrawlSearchTool(client),
            schema={
                "type": "object",
                "required": ["query"],
                "properties": {
                    "query": {"type": "string", "description": "The search query"},
                },
            },
        ),
    ]


class ToolSession:
    """The long-lived owner of the tool registry and the Firecrawl client.

    Tools are registered lazily on first use. Registration happens into a
    private registry under a lock and is only published once complete, so a
    concurrent caller either waits for initialization or sees every tool.
    """

    def __init__(self, name: str, firecrawl: FirecrawlConfig) -> None:
        self.name = name
        if not firecrawl.has_credential:
            logger.warning(
                "FIRECRAWL_API_KEY is not set; Firecrawl tools will fail until it is configured."
            )
        self.firecrawl_client = FirecrawlClient(firecrawl)
        self._registry = ToolRegistry()
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def ensure_initialized(self) -> None:
        self._initialize()

    def _initialize(self) -> None:
        if self._initialized:
            logger.debug("Tools already initialized, skipping.")
            return
        with self._init_lock:
            if self._initialized:
                logger.debug("Tools already initialized, skipping.")
                return
            logger.info("Initializing tools for session %s", self.name)
            registry = ToolRegistry()
            for descriptor in _build_tool_descriptors(self.firecrawl_client):
                registry.register(descriptor)
            self._registry = registry
            self._initialized = True
            logger.info("Tools initialization complete (%d tools).", len(registry))

    async def call_tool(self, name: str, args: dict[str, Any] | None) -> ToolCallResult:
        await self.ensure_initialized()
        return await self._registry.invoke(name, args)

    async def list_tools(self) -> list[dict[str, object]]:
        await self.ensure_initialized()
        return [descriptor.describe() for descriptor in self._registry.list_tools()]


class SessionDirectory:
    """Resolves a logical session name to its single ToolSession."""

    def __init__(self, firecrawl: FirecrawlConfig) -> None:
        self._firecrawl = firecrawl
        self._sessions: dict[str, ToolSession] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> ToolSession:
        session = self._sessions.get(name)
        if session is not None:
            return session
        with self._lock:
            session = self._sessions.get(name)
            if session is None:
                logger.info("Creating tool session %s", name)
                session = ToolSession(name=name, firecrawl=self._firecrawl)
                self._sessions[name] = session
            return session
