"""Agent tool layer and MCP server."""

from .exceptions import MCPServerError, ResourceNotFoundError, ValidationError
from .tools import SCHEMA_TOOL, SEARCH_TOOL, OpenApiTools

__all__ = [
    "MCPServerError",
    "ResourceNotFoundError",
    "ValidationError",
    "OpenApiTools",
    "SCHEMA_TOOL",
    "SEARCH_TOOL",
]
