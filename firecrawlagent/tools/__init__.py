from .arithmetic import AddTool, CalculateTool
from .base import TextContent, Tool, ToolCallResult, ToolErrorInfo
from .firecrawl_scrape import FirecrawlScrapeTool
from .firecrawl_search import FirecrawlSearchTool
from .registry import ToolDescriptor, ToolRegistry

__all__ = [
    "AddTool",
    "CalculateTool",
    "FirecrawlScrapeTool",
    "FirecrawlSearchTool",
    "TextContent",
    "Tool",
    "ToolCallResult",
    "ToolDescriptor",
    "ToolErrorInfo",
    "ToolRegistry",
]
