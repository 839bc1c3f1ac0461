# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every value that flows between the
# navigation layer, the domain handlers and the MCP front-end.
#
# NOTHING here imports the MCP SDK.  The front-end (tools/mcp_server.py)
# converts ToolDescriptor → mcp.types.Tool and ToolResult →
# mcp.types.CallToolResult at the edge.
# =============================================================================

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# -----------------------------------------------------------------------------
# Region — the NinjaOne data centres we can talk to
# -----------------------------------------------------------------------------
class Region(str, Enum):
    """Supported NinjaOne regions.  Each maps to one fixed API host."""

    US = "us"
    EU = "eu"
    OC = "oc"

    @property
    def base_url(self) -> str:
        return _REGION_BASE_URLS[self]


_REGION_BASE_URLS: dict[Region, str] = {
    Region.US: "https://app.ninjarmm.com",
    Region.EU: "https://eu.ninjarmm.com",
    Region.OC: "https://oc.ninjarmm.com",
}

DEFAULT_REGION = Region.US


# -----------------------------------------------------------------------------
# Credentials — one resolved set of connection parameters
# -----------------------------------------------------------------------------
# Two records are equal iff client_id, client_secret and region are equal.
# base_url is derived from region, so it is left out of the comparison.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Credentials:
    """Immutable NinjaOne connection parameters."""

    client_id: str
    client_secret: str = field(repr=False)
    region: Region = DEFAULT_REGION
    base_url: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.base_url:
            object.__setattr__(self, "base_url", self.region.base_url)


# -----------------------------------------------------------------------------
# ToolDescriptor — what the agent sees for one callable tool
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    """Name / description / JSON-schema triple advertised to the agent."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))


# -----------------------------------------------------------------------------
# ToolResult — what every tool call returns
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"


@dataclass
class ToolResult:
    """Ordered text blocks plus an error flag.

    Error results are ordinary values: the agent reads the text and decides
    what to do next.  Nothing above the navigation layer ever sees an
    exception from a tool call.
    """

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls.text(message, is_error=True)

    @classmethod
    def json(cls, data: Any) -> "ToolResult":
        """Pretty-print `data` as JSON (indent=2) in a single text block."""
        return cls.text(json.dumps(data, indent=2, default=str))

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""


# -----------------------------------------------------------------------------
# Page — the ONE shape every paginated list call returns
# -----------------------------------------------------------------------------
# The NinjaOne API answers list calls with bare arrays on some endpoints and
# wrapped objects on others.  The API client normalizes all of them into a
# Page so the domain handlers never branch on response shape.
# -----------------------------------------------------------------------------
@dataclass
class Page:
    items: list[Any] = field(default_factory=list)
    cursor: Optional[str] = None

    def __len__(self) -> int:
        return len(self.items)
