import asyncio
import logging
from typing import Any

from firecrawlagent.errors import EmptyResultError, RemoteServiceError, ToolError
from firecrawlagent.services.firecrawl_client import FirecrawlClient, RemoteScrapeResult
from .base import TextContent, Tool, ToolCallResult

logger = logging.getLogger(__name__)

SCRAPE_FORMATS = (
    "markdown",
    "html",
    "rawHtml",
    "links",
    "screenshot",
    "screenshotFullPage",
    "json",
    "changeTracking",
)
DEFAULT_SCRAPE_FORMATS = ["markdown"]


class FirecrawlScrapeTool(Tool):
    name = "firecrawl_scrape"

    def __init__(self, client: FirecrawlClient) -> None:
        self._client = client

    async def run(self, args: dict[str, Any]) -> ToolCallResult:
        url = args["url"]
        formats = _dedupe(args.get("formats") or DEFAULT_SCRAPE_FORMATS)
        logger.info("Scraping URL: %s formats=%s", url, ",".join(formats))

        try:
            scrape_result = await asyncio.to_thread(self._client.scrape, url, formats)
        except ToolError:
            raise
        except Exception as exc:
            logger.error("Firecrawl scrape call failed for %s: %s", url, exc)
            raise RemoteServiceError(f"Firecrawl scrape call failed for {url}: {exc}") from exc

        if not scrape_result.success:
            error_msg = scrape_result.error or "Unknown error during scraping execution on Firecrawl"
            logger.error("Firecrawl scrape failed for %s: %s", url, error_msg)
            raise RemoteServiceError(f"Firecrawl scrape failed: {error_msg}")

        blocks = render_scrape_content(scrape_result, formats)
        if not blocks:
            raise EmptyResultError(
                "Firecrawl scrape succeeded but returned no requested content "
                f"(formats: {', '.join(formats)})."
            )
        return ToolCallResult.ok(*blocks)


def render_scrape_content(result: RemoteScrapeResult, formats: list[str]) -> list[TextContent]:
    # Only markdown and links are rendered; other formats are passed through to
    # the remote call but produce no content block.
    blocks: list[TextContent] = []
    if "markdown" in formats and result.markdown:
        blocks.append(TextContent(text=result.markdown))
    if "links" in formats and result.links:
        lines = ["Links found on page:"] + [f"- {link}" for link in result.links]
        blocks.append(TextContent(text="\n".join(lines)))
    return blocks


def _dedupe(formats: list[str]) -> list[str]:
    out: list[str] = []
    for fmt in formats:
        if fmt not in out:
            out.append(fmt)
    return out
