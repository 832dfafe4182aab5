from .firecrawl_client import FirecrawlClient, RemoteScrapeResult, RemoteSearchResult

__all__ = [
    "FirecrawlClient",
    "RemoteScrapeResult",
    "RemoteSearchResult",
    "McpTransports",
    "SessionDirectory",
    "ToolSession",
    "build_mcp_server",
]


def __getattr__(name: str):
    if name in {"SessionDirectory", "ToolSession"}:
        from .session import SessionDirectory, ToolSession

        return {
            "SessionDirectory": SessionDirectory,
            "ToolSession": ToolSession,
        }[name]
    if name == "build_mcp_server":
        from .mcp_server import build_mcp_server

        return build_mcp_server
    if name == "McpTransports":
        from .transports import McpTransports

        return McpTransports
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
