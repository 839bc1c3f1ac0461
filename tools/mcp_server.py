# =============================================================================
# tools/mcp_server.py  —  MCP front-end (stdio)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Connects the navigation core (core/navigation.py) to the Model Context
#   Protocol.  It answers two requests:
#
#     tools/list  →  NavigationSession.list_tools()  →  mcp.types.Tool[]
#     tools/call  →  NavigationSession.call_tool()   →  mcp.types.CallToolResult
#
# WHY THE LOW-LEVEL SERVER:
#   The visible tool set changes with navigation state, per connected
#   session.  A decorator-registered tool table is fixed per process, so this
#   module uses mcp.server.lowlevel.Server and answers tools/list itself.
#
# SESSIONS:
#   Each MCP connection (ServerSession) gets its own NavigationSession,
#   looked up in a WeakKeyDictionary.  All sessions share the process-wide
#   DomainRegistry and ClientCache (core/registry.py, core/client_cache.py);
#   build_registry() applies ServerSettings to that cache.
#
# RUNNING THIS SERVER:
#     a) python main.py
#     b) python -m tools.mcp_server
#   Both speak MCP over stdin/stdout; logs go to stderr.
# =============================================================================

import asyncio
import functools
import logging
import weakref
from typing import Any, Optional

from dotenv import load_dotenv
from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.stdio import stdio_server

from core.client_cache import default_cache
from core.config import SERVER_NAME, SERVER_VERSION, ServerSettings
from core.logging_utils import configure_logging, log_request, log_response
from core.models import ToolDescriptor, ToolResult
from core.navigation import NavigationSession
from core.ninjaone import NinjaOneClient
from core.registry import DomainRegistry, default_registry

logger = logging.getLogger(__name__)


def to_mcp_tool(descriptor: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema,
    )


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=block.text) for block in result.content],
        isError=result.is_error,
    )


def build_registry(settings: ServerSettings) -> DomainRegistry:
    """Apply `settings` to the process-wide client cache and return the
    process-wide registry, whose handlers all share that cache."""
    factory = functools.partial(NinjaOneClient.from_credentials, timeout=settings.http_timeout)
    default_cache().configure(factory)
    return default_registry()


def create_server(registry: Optional[DomainRegistry] = None) -> Server:
    """Build the MCP server.  Every connection gets its own NavigationSession."""
    registry = registry or build_registry(ServerSettings())
    server = Server(SERVER_NAME, version=SERVER_VERSION)
    sessions: "weakref.WeakKeyDictionary[Any, NavigationSession]" = weakref.WeakKeyDictionary()

    def navigation() -> NavigationSession:
        session = server.request_context.session
        nav = sessions.get(session)
        if nav is None:
            nav = sessions[session] = NavigationSession(registry)
            logger.info("New MCP session, starting at main menu")
        return nav

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        nav = navigation()
        return [to_mcp_tool(tool) for tool in await nav.list_tools()]

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[dict[str, Any]]) -> types.CallToolResult:
        log_request(name, arguments)
        nav = navigation()
        result = await nav.call_tool(name, arguments)
        log_response(name, result.first_text, result.is_error)

        if not result.is_error and nav.changes_tool_list(name):
            await _notify_tool_list_changed(server)
        return to_call_tool_result(result)

    return server


async def _notify_tool_list_changed(server: Server) -> None:
    try:
        await server.request_context.session.send_tool_list_changed()
    except Exception:
        # The tool call already succeeded; the next tools/list still reflects it.
        logger.warning("Could not send tools/list_changed notification", exc_info=True)


def initialization_options(server: Server):
    return server.create_initialization_options(
        notification_options=NotificationOptions(tools_changed=True),
    )


async def serve(settings: Optional[ServerSettings] = None) -> None:
    """Run the server over stdio until the client disconnects."""
    settings = settings or ServerSettings.from_env()
    registry = build_registry(settings)
    server = create_server(registry)

    logger.info("NinjaOne MCP server running on stdio (decision tree mode)")
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, initialization_options(server))
    finally:
        await registry.client_cache.aclose()
        logger.info("NinjaOne MCP server stopped")


def main() -> None:
    load_dotenv()
    settings = ServerSettings.from_env()
    configure_logging(settings.log_level)
    logger.info("Starting NinjaOne MCP server (transport: stdio, log level: %s)", settings.log_level)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
