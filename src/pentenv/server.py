"""MCP server exposing a workspace's vars as tools."""

from __future__ import annotations

import json
import logging
from typing import Any

# MCP imports are optional - only needed when running the server
try:
    from mcp.server import Server  # pragma: no cover
    from mcp.server.stdio import stdio_server  # pragma: no cover
    from mcp.types import Tool, TextContent  # pragma: no cover
    HAS_MCP = True  # pragma: no cover
except ImportError:
    HAS_MCP = False
    Server = None  # type: ignore
    Tool = None  # type: ignore
    TextContent = None  # type: ignore

from .engine import VarsEngine
from .tools import execute_tool, make_tools

logger = logging.getLogger(__name__)

MISSING_MCP_MESSAGE = "MCP package not installed. Install with: pip install pentenv[mcp]"


def create_server(engine: VarsEngine) -> "Server":
    """Create and configure the MCP server.

    Args:
        engine: Engine bound to the workspace the server serves

    Returns:
        Configured MCP Server instance

    Raises:
        ImportError: If MCP package is not installed
    """
    if not HAS_MCP:
        raise ImportError(MISSING_MCP_MESSAGE)

    server = Server("pentenv")
    tool_defs = make_tools(engine)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """Return list of available tools."""
        return [
            Tool(
                name=t["name"],
                description=t["description"],
                inputSchema=t["inputSchema"],
            )
            for t in tool_defs.values()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool invocation."""
        logger.debug("tool call %s", name)
        result = await execute_tool(engine, name, arguments or {})
        return [TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False))]

    return server


async def run_server(engine: VarsEngine) -> None:
    """Run the MCP server with stdio transport."""
    if not HAS_MCP:
        raise ImportError(MISSING_MCP_MESSAGE)

    server = create_server(engine)  # pragma: no cover
    logger.info("serving %s", engine.workspace.vars_path)  # pragma: no cover

    async with stdio_server() as (read_stream, write_stream):  # pragma: no cover
        await server.run(  # pragma: no cover
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
