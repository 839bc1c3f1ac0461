# =============================================================================
# core/navigation.py  —  Navigation State Machine (decision-tree tools)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Decides which tools the agent can see and where each tool call goes.
#
#   State:  Root                   (current_domain is None)
#           InDomain(d)            (current_domain == "devices", ...)
#
#   ┌──────────┐   ninjaone_navigate(d)   ┌───────────────┐
#   │   Root   │ ───────────────────────▶ │  InDomain(d)  │
#   │ navigate │ ◀─────────────────────── │ back, status, │
#   │ status   │      ninjaone_back       │ d's tools     │
#   └──────────┘                          └───────────────┘
#
#   Three meta-tools are handled here.  Every other tool name is forwarded to
#   the current domain's handler, but only if that handler declares it: there
#   is no fallback lookup in other domains.
#
# ONE SESSION, ONE LOCK:
#   A NavigationSession belongs to one connected MCP client.  Every
#   list_tools()/call_tool() takes the session's lock, so a dispatch can
#   never run against a domain that a concurrent navigate already left.
#
# ERRORS NEVER ESCAPE call_tool():
#   Anything raised below this layer (missing credentials, API errors,
#   network errors, bad arguments) comes back as ToolResult(is_error=True)
#   and the session stays where it was.
# =============================================================================

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Optional

from core.client_cache import ClientCache
from core.credentials import describe_credentials
from core.errors import CREDENTIALS_HINT, CredentialsError
from core.logging_utils import log_status
from core.models import ToolDescriptor, ToolResult
from core.registry import DomainRegistry, default_registry

logger = logging.getLogger(__name__)

NAVIGATE_TOOL = "ninjaone_navigate"
BACK_TOOL = "ninjaone_back"
STATUS_TOOL = "ninjaone_status"

META_TOOLS = frozenset({NAVIGATE_TOOL, BACK_TOOL, STATUS_TOOL})

_DOMAIN_BLURBS = {
    "devices": "manage endpoints",
    "organizations": "manage customers",
    "alerts": "view and reset alerts",
    "tickets": "manage service tickets",
}


def navigate_tool(domains: list[str]) -> ToolDescriptor:
    listing = ", ".join(
        f"{d} ({_DOMAIN_BLURBS[d]})" if d in _DOMAIN_BLURBS else d for d in domains
    )
    return ToolDescriptor(
        name=NAVIGATE_TOOL,
        description=f"Navigate to a NinjaOne domain to access its tools. Available domains: {listing}.",
        input_schema={
            "type": "object",
            "properties": {
                "domain": {
                    "type": "string",
                    "enum": list(domains),
                    "description": f"The domain to navigate to. Choose: {', '.join(domains)}",
                },
            },
            "required": ["domain"],
        },
    )


BACK_DESCRIPTOR = ToolDescriptor(
    name=BACK_TOOL,
    description="Navigate back to the main menu to select a different domain",
)

STATUS_DESCRIPTOR = ToolDescriptor(
    name=STATUS_TOOL,
    description=(
        "Show current navigation state and available domains. "
        "Also verifies API credentials are configured."
    ),
)


class NavigationSession:
    """Navigation state and tool routing for one MCP session."""

    def __init__(
        self,
        registry: Optional[DomainRegistry] = None,
        client_cache: Optional[ClientCache] = None,
    ):
        self.registry = registry or default_registry()
        self.client_cache = client_cache or self.registry.client_cache
        self.current_domain: Optional[str] = None
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"<NavigationSession domain={self.current_domain!r}>"

    @property
    def at_root(self) -> bool:
        return self.current_domain is None

    @staticmethod
    def changes_tool_list(tool_name: str) -> bool:
        """True for the tools whose success changes the visible tool set."""
        return tool_name in (NAVIGATE_TOOL, BACK_TOOL)

    # -------------------------------------------------------------------------
    # list-tools
    # -------------------------------------------------------------------------
    async def list_tools(self) -> list[ToolDescriptor]:
        async with self._lock:
            return self._tools_for_state()

    def _tools_for_state(self) -> list[ToolDescriptor]:
        if self.current_domain is None:
            return [navigate_tool(self.registry.list_domains()), STATUS_DESCRIPTOR]
        handler = self.registry.get(self.current_domain)
        return [BACK_DESCRIPTOR, STATUS_DESCRIPTOR, *handler.get_tools()]

    # -------------------------------------------------------------------------
    # call-tool
    # -------------------------------------------------------------------------
    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        args = dict(arguments or {})
        async with self._lock:
            try:
                if name == NAVIGATE_TOOL:
                    return self._navigate(args.get("domain"))
                if name == BACK_TOOL:
                    return self._back()
                if name == STATUS_TOOL:
                    return self._status()
                return await self._dispatch(name, args)
            except Exception as exc:
                logger.exception("Tool call failed: %s", name)
                return ToolResult.error(f"Error: {exc}")

    def _navigate(self, domain: Any) -> ToolResult:
        domains = self.registry.list_domains()
        if not self.registry.is_domain(domain):
            return ToolResult.error(
                f"Invalid domain: {domain}. Available domains: {', '.join(domains)}"
            )

        try:
            self.client_cache.resolve_credentials()
        except CredentialsError as exc:
            return ToolResult.error(f"Error: No API credentials configured ({exc}). {CREDENTIALS_HINT}")

        handler = self.registry.get(domain)
        tools = handler.get_tools()
        self.current_domain = domain
        log_status("Navigated to domain", domain=domain, toolCount=len(tools))

        listing = "\n".join(f"- {t.name}: {t.description}" for t in tools)
        return ToolResult.text(
            f"Navigated to {domain} domain.\n\n"
            f"Available tools:\n{listing}\n\n"
            f"Use {BACK_TOOL} to return to the main menu."
        )

    def _back(self) -> ToolResult:
        previous = self.current_domain
        self.current_domain = None
        log_status("Navigated back to main menu", previous=previous)
        return ToolResult.text(
            f"Navigated back from {previous or 'root'} to the main menu.\n\n"
            f"Available domains: {', '.join(self.registry.list_domains())}\n\n"
            f"Use {NAVIGATE_TOOL} to select a domain."
        )

    def _status(self) -> ToolResult:
        credentials = describe_credentials(self.client_cache.environ)
        return ToolResult.text(
            "NinjaOne MCP Server Status\n\n"
            f"Current domain: {self.current_domain or '(none - at main menu)'}\n"
            f"Credentials: {credentials}\n"
            f"Available domains: {', '.join(self.registry.list_domains())}"
        )

    async def _dispatch(self, name: str, args: dict[str, Any]) -> ToolResult:
        if self.current_domain is None:
            return ToolResult.error(
                f"Unknown tool: {name}. Use {NAVIGATE_TOOL} to select a domain first."
            )

        handler = self.registry.get(self.current_domain)
        if name not in {tool.name for tool in handler.get_tools()}:
            return ToolResult.error(
                f"Unknown tool: {name}. You are currently in the {self.current_domain} domain. "
                f"Use {BACK_TOOL} to return to the main menu."
            )

        return await handler.handle_call(name, args)
