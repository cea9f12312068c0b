"""Tool framework — capabilities the model may call while answering."""

from portfolio_chat.tools.base import BaseTool, ToolParams, ToolResult
from portfolio_chat.tools.registry import ToolRegistry
from portfolio_chat.tools.web_search import WebSearch, WebSearchTool

__all__ = [
    "BaseTool",
    "ToolParams",
    "ToolRegistry",
    "ToolResult",
    "WebSearch",
    "WebSearchTool",
]
