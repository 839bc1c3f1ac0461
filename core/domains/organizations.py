# =============================================================================
# core/domains/organizations.py  —  Organizations domain
# =============================================================================
# Organizations are NinjaOne's customer accounts.
# =============================================================================

from typing import Any

from core.domains.base import (
    DEVICE_CLASSES,
    DomainHandler,
    cursor_property,
    limit_of,
    limit_property,
    object_schema,
    require,
)
from core.logging_utils import log_api_call, log_api_response
from core.models import ToolDescriptor, ToolResult
from core.ninjaone import NinjaOneClient

_ORG_ID = {"type": "number", "description": "The organization ID"}

TOOLS = (
    ToolDescriptor(
        name="ninjaone_organizations_list",
        description="List organizations in NinjaOne. Organizations represent customer accounts.",
        input_schema=object_schema({"limit": limit_property(), "cursor": cursor_property()}),
    ),
    ToolDescriptor(
        name="ninjaone_organizations_get",
        description="Get details for a specific organization by its ID",
        input_schema=object_schema({"organization_id": _ORG_ID}, required=["organization_id"]),
    ),
    ToolDescriptor(
        name="ninjaone_organizations_create",
        description="Create a new organization in NinjaOne",
        input_schema=object_schema(
            {
                "name": {"type": "string", "description": "Organization name"},
                "description": {"type": "string", "description": "Organization description"},
                "node_approval_mode": {
                    "type": "string",
                    "enum": ["AUTOMATIC", "MANUAL", "REJECT"],
                    "description": "How to handle new device registrations",
                },
                "policy_id": {"type": "number", "description": "Default policy ID for devices"},
            },
            required=["name"],
        ),
    ),
    ToolDescriptor(
        name="ninjaone_organizations_locations",
        description="List locations for an organization",
        input_schema=object_schema({"organization_id": _ORG_ID}, required=["organization_id"]),
    ),
    ToolDescriptor(
        name="ninjaone_organizations_devices",
        description="List all devices for an organization",
        input_schema=object_schema(
            {
                "organization_id": _ORG_ID,
                "device_class": {
                    "type": "string",
                    "enum": DEVICE_CLASSES,
                    "description": "Filter by device class",
                },
                "limit": limit_property(),
            },
            required=["organization_id"],
        ),
    ),
)


class OrganizationsHandler(DomainHandler):
    name = "organizations"
    noun = "organization"
    TOOLS = TOOLS
    ROUTES = {
        "ninjaone_organizations_list": "_list",
        "ninjaone_organizations_get": "_get",
        "ninjaone_organizations_create": "_create",
        "ninjaone_organizations_locations": "_locations",
        "ninjaone_organizations_devices": "_devices",
    }

    async def _list(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        limit = limit_of(args)
        log_api_call("organizations.list", limit=limit, cursor=args.get("cursor"))
        page = await client.organizations.list(page_size=limit, cursor=args.get("cursor"))
        log_api_response("organizations.list", {"count": len(page)})
        return ToolResult.json({"organizations": page.items, "cursor": page.cursor})

    async def _get(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        org_id = require(args, "organization_id")
        log_api_call("organizations.get", organizationId=org_id)
        return ToolResult.json(await client.organizations.get(org_id))

    async def _create(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        name = require(args, "name")
        log_api_call("organizations.create", name=name)
        organization = await client.organizations.create(
            name,
            description=args.get("description"),
            node_approval_mode=args.get("node_approval_mode"),
            policy_id=args.get("policy_id"),
        )
        log_api_response("organizations.create", organization)
        return ToolResult.json(organization)

    async def _locations(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        org_id = require(args, "organization_id")
        log_api_call("organizations.locations", organizationId=org_id)
        return ToolResult.json(await client.organizations.locations(org_id))

    async def _devices(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        org_id = require(args, "organization_id")
        limit = limit_of(args)
        log_api_call(
            "organizations.devices",
            organizationId=org_id,
            deviceClass=args.get("device_class"),
            limit=limit,
        )
        page = await client.organizations.devices(
            org_id, device_class=args.get("device_class"), page_size=limit
        )
        return ToolResult.json({"devices": page.items, "cursor": page.cursor})
