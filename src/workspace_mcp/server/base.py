"""
Base MCP adapter server.

An adapter exposes a fixed table of tools. Each tool is bound to a request
mapper (argument validation) and an invoker (the remote call); the server
routes calls by tool name and shapes the result as a single JSON text block.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from workspace_mcp.config import configure_logging, preview_env
from workspace_mcp.server.exceptions import UnknownToolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolBinding:
    """A tool descriptor and the pipeline that serves it.

    Attributes:
        tool: Descriptor returned by ``tools/list``.
        operation: Label used in failure messages ("<operation> fetch failed: ...").
        map_arguments: Validates the call arguments into a request object.
        invoke: Performs the remote call for a validated request.
    """

    tool: types.Tool
    operation: str
    map_arguments: Callable[[Mapping[str, Any]], Any]
    invoke: Callable[[Any], Awaitable[Any]]


class AdapterServer:
    """MCP server exposing a fixed set of tool bindings over stdio.

    Unknown tool names are protocol errors. Failures inside a known tool's
    pipeline come back as error-flagged results so the calling agent always
    gets an answer.
    """

    def __init__(self, name: str, version: str, bindings: list[ToolBinding]):
        self.name = name
        self.version = version
        self.bindings = {binding.tool.name: binding for binding in bindings}
        self.server = Server(name, version=version)
        self.setup_handlers()
        logger.debug(f"Initialized MCP server {name} v{version} with tools: {list(self.bindings)}")

    def setup_handlers(self) -> None:
        """Register MCP request handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[types.Tool]:
            return self.list_tools()

        # Registered directly: the SDK's call_tool decorator would turn
        # UnknownToolError into an error-flagged result.
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool_request

    def list_tools(self) -> list[types.Tool]:
        """Return the static tool descriptors."""
        return [binding.tool for binding in self.bindings.values()]

    async def _handle_call_tool_request(self, request: types.CallToolRequest) -> types.ServerResult:
        result = await self.call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(result)

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None) -> types.CallToolResult:
        """Route a tool call by name.

        Args:
            name: Tool name from the request.
            arguments: Tool arguments; None is treated as empty.

        Returns:
            A result holding one text block.

        Raises:
            UnknownToolError: If no tool with that name is registered.
        """
        binding = self.bindings.get(name)
        if binding is None:
            logger.warning(f"Rejected call to unknown tool: {name}")
            raise UnknownToolError(name)

        try:
            request = binding.map_arguments(arguments or {})
            data = await binding.invoke(request)
        except Exception as e:
            logger.warning(f"{name} failed: {e}")
            return self.create_error_result(f"{binding.operation} fetch failed: {e}")

        return self.create_json_result(data)

    def create_json_result(self, data: Any) -> types.CallToolResult:
        """Wrap a response body as a JSON text result."""
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=json.dumps(data, ensure_ascii=False))],
        )

    def create_error_result(self, message: str) -> types.CallToolResult:
        """Wrap a failure message as an error-flagged result."""
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=message)],
            isError=True,
        )

    async def run_stdio(self) -> None:
        """Serve over stdin/stdout until the client closes the stream."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"{self.name} running over stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )

    def main(self) -> int:
        """Console entry point.

        Returns:
            Process exit status.
        """
        configure_logging()
        preview_env()
        try:
            asyncio.run(self.run_stdio())
        except KeyboardInterrupt:
            return 0
        except Exception:
            logger.exception("Fatal error in main()")
            return 1
        return 0
