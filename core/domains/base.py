# =============================================================================
# core/domains/base.py  —  What every domain handler looks like
# =============================================================================
#
# A domain handler is a plugin with exactly two capabilities:
#
#   get_tools()                    → the ToolDescriptors it advertises (pure)
#   await handle_call(name, args)  → run one of those tools, return ToolResult
#
# Subclasses declare TOOLS (a tuple of descriptors) and ROUTES (tool name →
# coroutine method taking (client, args)).  handle_call() does the lookup and
# fetches the API client from the handler's ClientCache.
#
# Exceptions from the API client are NOT caught here.  The navigation layer
# converts them into error results.
# =============================================================================

from collections.abc import Mapping
from typing import Any, Optional

from core.client_cache import ClientCache, default_cache
from core.models import ToolDescriptor, ToolResult

DEFAULT_LIMIT = 50

DEVICE_CLASSES = ["WINDOWS_WORKSTATION", "WINDOWS_SERVER", "MAC", "LINUX", "VMWARE_VM"]
SEVERITIES = ["CRITICAL", "MAJOR", "MINOR", "NONE"]


def object_schema(properties: dict[str, Any], required: Optional[list[str]] = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    return schema


def limit_property() -> dict[str, Any]:
    return {"type": "number", "description": f"Maximum number of results (default: {DEFAULT_LIMIT})"}


def cursor_property() -> dict[str, Any]:
    return {"type": "string", "description": "Pagination cursor for next page of results"}


def require(args: Mapping[str, Any], key: str) -> Any:
    value = args.get(key)
    if value is None or value == "":
        raise ValueError(f"Missing required argument: {key}")
    return value


def limit_of(args: Mapping[str, Any]) -> int:
    """Page size from the `limit` argument: unset or 0 → default, never below 1."""
    return max(1, int(args.get("limit") or DEFAULT_LIMIT))


class DomainHandler:
    """Base class for the four NinjaOne domain handlers."""

    name = ""
    noun = ""
    TOOLS: tuple[ToolDescriptor, ...] = ()
    ROUTES: dict[str, str] = {}

    def __init__(self, client_cache: Optional[ClientCache] = None):
        self.client_cache = client_cache or default_cache()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} domain={self.name!r}>"

    def get_tools(self) -> list[ToolDescriptor]:
        return list(self.TOOLS)

    def tool_names(self) -> list[str]:
        return [tool.name for tool in self.TOOLS]

    async def handle_call(self, tool_name: str, args: Optional[Mapping[str, Any]] = None) -> ToolResult:
        method_name = self.ROUTES.get(tool_name)
        if method_name is None:
            return ToolResult.error(f"Unknown {self.noun} tool: {tool_name}")

        client = await self.client_cache.get_client()
        return await getattr(self, method_name)(client, dict(args or {}))
