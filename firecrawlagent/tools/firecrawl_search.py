import asyncio
import json
import logging
from typing import Any

from firecrawlagent.errors import (
    ConfigurationError,
    EmptyResultError,
    RemoteServiceError,
    ToolError,
)
from firecrawlagent.services.firecrawl_client import FirecrawlClient
from .base import Tool, ToolCallResult

logger = logging.getLogger(__name__)


class FirecrawlSearchTool(Tool):
    name = "firecrawl_search"

    def __init__(self, client: FirecrawlClient) -> None:
        self._client = client

    async def run(self, args: dict[str, Any]) -> ToolCallResult:
        query = args["query"]
        if not self._client.is_configured:
            raise ConfigurationError(
                "Firecrawl search is unavailable: FIRECRAWL_API_KEY is not configured."
            )
        logger.info("Searching with Firecrawl: %s", query)

        try:
            search_result = await asyncio.to_thread(self._client.search, query)
        except ToolError:
            raise
        except Exception as exc:
            logger.error("Firecrawl search call failed for %r: %s", query, exc)
            raise RemoteServiceError(f"Firecrawl search failed: {exc}") from exc

        if search_result.success and search_result.data:
            return ToolCallResult.text(json.dumps(search_result.data, indent=2))

        logger.warning(
            "Firecrawl search returned no usable data for %r: %s",
            query,
            search_result.error or "empty",
        )
        raise EmptyResultError(
            f"Firecrawl search failed or returned empty/unexpected results for query: {query}"
        )
