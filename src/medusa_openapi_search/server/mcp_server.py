"""MCP server exposing the operation search tools over stdio."""

import json
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from ..config.logging import get_logger
from ..config.settings import Settings
from ..search.registry import OpenApiRegistry
from .exceptions import (
    ErrorLogger,
    MCPServerError,
    ValidationError,
    create_mcp_error_response,
    sanitize_error_data,
)
from .tools import OpenApiTools

logger = get_logger(__name__)


class OpenApiSearchMcpServer:
    """Tool server over a single OpenAPI registry."""

    def __init__(self, registry: OpenApiRegistry, settings: Optional[Settings] = None):
        """Initialize the server.

        Args:
            registry: Registry whose catalog the tools query
            settings: Application settings, defaults to ``Settings()``
        """
        self.settings = settings or Settings()
        self.registry = registry
        self.tools = OpenApiTools(registry, self.settings.search)
        self.logger = get_logger(__name__, server=self.settings.server.name)
        self.error_logger = ErrorLogger(self.logger)

        self.server = Server(self.settings.server.name)
        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> List[types.Tool]:
            return await self.handle_list_tools()

        @self.server.call_tool()
        async def call_tool(
            name: str, arguments: Dict[str, Any]
        ) -> List[types.TextContent]:
            return await self.handle_call_tool(name, arguments)

    async def handle_list_tools(self) -> List[types.Tool]:
        """List available tools."""
        return self.tools.tool_definitions()

    async def handle_call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]]
    ) -> List[types.TextContent]:
        """Run a tool and wrap its result, or its error envelope, as JSON text."""
        request_id = str(uuid.uuid4())
        arguments = arguments or {}

        try:
            handler = self.tools.handlers.get(name)
            if handler is None:
                raise ValidationError(
                    parameter="name",
                    message=f"Unknown tool '{name}'",
                    value=name,
                    suggestions=sorted(self.tools.handlers),
                )

            self.logger.info(
                "Processing tool request",
                request_id=request_id,
                tool=name,
                arguments=sanitize_error_data(arguments),
            )
            result = handler(arguments)
            self.logger.info(
                "Tool request completed", request_id=request_id, tool=name
            )
            return [types.TextContent(type="text", text=json.dumps(result, default=str))]

        except MCPServerError as e:
            self.error_logger.log_error(
                e,
                context={"tool": name, "arguments": sanitize_error_data(arguments)},
                request_id=request_id,
            )
            return [
                types.TextContent(
                    type="text",
                    text=json.dumps(create_mcp_error_response(e, request_id)),
                )
            ]

        except Exception as e:
            self.error_logger.log_operation_error(
                operation=f"call_tool_{name}",
                error=e,
                context={"tool": name},
                request_id=request_id,
            )
            server_error = MCPServerError(
                code=-32603,
                message="Internal server error",
                data={"error_type": "internal_error", "request_id": request_id},
            )
            return [
                types.TextContent(
                    type="text",
                    text=json.dumps(create_mcp_error_response(server_error, request_id)),
                )
            ]

    async def run_stdio(self) -> None:
        """Run the server with stdio transport."""
        self.logger.info(
            "Starting MCP server with stdio transport",
            operations=len(self.registry.catalog),
        )
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def create_server(
    settings: Optional[Settings] = None,
    document: Optional[Mapping[str, Any]] = None,
    openapi_path: Optional[Union[str, Path]] = None,
) -> OpenApiSearchMcpServer:
    """Create a tool server from a document or a document path.

    Args:
        settings: Application settings, uses default if None
        document: In-memory OpenAPI document; takes precedence over paths
        openapi_path: Document file, defaults to ``settings.server.openapi_path``

    Returns:
        Configured server instance

    Raises:
        ValueError: If neither a document nor a document path is available
    """
    settings = settings or Settings()
    if document is not None:
        registry = OpenApiRegistry.from_document(document, settings.search)
    else:
        path = openapi_path or settings.get_openapi_path()
        if path is None:
            raise ValueError("An OpenAPI document or document path is required")
        registry = OpenApiRegistry.from_file(path, settings.search)

    return OpenApiSearchMcpServer(registry, settings)
