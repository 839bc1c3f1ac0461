# =============================================================================
# core/domains/devices.py  —  Devices domain
# =============================================================================
# Endpoint management: list/get devices, schedule reboots, and read a
# device's Windows services, alerts and activity log.
# =============================================================================

from typing import Any

from core.domains.base import (
    DEVICE_CLASSES,
    SEVERITIES,
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

_DEVICE_ID = {"type": "number", "description": "The device ID"}

TOOLS = (
    ToolDescriptor(
        name="ninjaone_devices_list",
        description=(
            "List devices in NinjaOne. Can filter by organization, device class, "
            "or online status."
        ),
        input_schema=object_schema({
            "organization_id": {"type": "number", "description": "Filter devices by organization ID"},
            "device_class": {
                "type": "string",
                "enum": DEVICE_CLASSES,
                "description": "Filter by device class",
            },
            "online": {
                "type": "boolean",
                "description": "Filter by online status (true for online, false for offline)",
            },
            "limit": limit_property(),
            "cursor": cursor_property(),
        }),
    ),
    ToolDescriptor(
        name="ninjaone_devices_get",
        description="Get details for a specific device by its ID",
        input_schema=object_schema({"device_id": _DEVICE_ID}, required=["device_id"]),
    ),
    ToolDescriptor(
        name="ninjaone_devices_reboot",
        description="Schedule a reboot for a device",
        input_schema=object_schema(
            {
                "device_id": {"type": "number", "description": "The device ID to reboot"},
                "reason": {"type": "string", "description": "Reason for the reboot"},
            },
            required=["device_id"],
        ),
    ),
    ToolDescriptor(
        name="ninjaone_devices_services",
        description="List Windows services on a device",
        input_schema=object_schema(
            {
                "device_id": _DEVICE_ID,
                "state": {
                    "type": "string",
                    "enum": ["RUNNING", "STOPPED", "PAUSED"],
                    "description": "Filter by service state",
                },
            },
            required=["device_id"],
        ),
    ),
    ToolDescriptor(
        name="ninjaone_devices_alerts",
        description="Get active alerts for a specific device",
        input_schema=object_schema(
            {
                "device_id": _DEVICE_ID,
                "severity": {"type": "string", "enum": SEVERITIES, "description": "Filter by alert severity"},
            },
            required=["device_id"],
        ),
    ),
    ToolDescriptor(
        name="ninjaone_devices_activities",
        description="Get activity log for a device",
        input_schema=object_schema(
            {
                "device_id": _DEVICE_ID,
                "activity_type": {"type": "string", "description": "Filter by activity type"},
                "limit": limit_property(),
            },
            required=["device_id"],
        ),
    ),
)


class DevicesHandler(DomainHandler):
    name = "devices"
    noun = "device"
    TOOLS = TOOLS
    ROUTES = {
        "ninjaone_devices_list": "_list",
        "ninjaone_devices_get": "_get",
        "ninjaone_devices_reboot": "_reboot",
        "ninjaone_devices_services": "_services",
        "ninjaone_devices_alerts": "_alerts",
        "ninjaone_devices_activities": "_activities",
    }

    async def _list(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        limit = limit_of(args)
        log_api_call(
            "devices.list",
            organizationId=args.get("organization_id"),
            deviceClass=args.get("device_class"),
            online=args.get("online"),
            limit=limit,
            cursor=args.get("cursor"),
        )
        page = await client.devices.list(
            organization_id=args.get("organization_id"),
            device_class=args.get("device_class"),
            online=args.get("online"),
            page_size=limit,
            cursor=args.get("cursor"),
        )
        log_api_response("devices.list", {"count": len(page)})
        return ToolResult.json({"devices": page.items, "cursor": page.cursor})

    async def _get(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        device_id = require(args, "device_id")
        log_api_call("devices.get", deviceId=device_id)
        device = await client.devices.get(device_id)
        log_api_response("devices.get", device)
        return ToolResult.json(device)

    async def _reboot(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        device_id = require(args, "device_id")
        reason = args.get("reason")
        log_api_call("devices.reboot", deviceId=device_id, reason=reason)
        result = await client.devices.reboot(device_id, reason=reason)
        log_api_response("devices.reboot", result)
        return ToolResult.json({"success": True, "message": "Reboot scheduled", "result": result})

    async def _services(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        device_id = require(args, "device_id")
        log_api_call("devices.services", deviceId=device_id, state=args.get("state"))
        services = await client.devices.services(device_id, state=args.get("state"))
        log_api_response("devices.services", services)
        return ToolResult.json(services)

    async def _alerts(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        device_id = require(args, "device_id")
        log_api_call("devices.alerts", deviceId=device_id, severity=args.get("severity"))
        alerts = await client.devices.alerts(device_id, severity=args.get("severity"))
        log_api_response("devices.alerts", {"count": len(alerts)})
        return ToolResult.json(alerts)

    async def _activities(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        device_id = require(args, "device_id")
        limit = limit_of(args)
        log_api_call(
            "devices.activities",
            deviceId=device_id,
            activityType=args.get("activity_type"),
            limit=limit,
        )
        page = await client.devices.activities(
            device_id, activity_type=args.get("activity_type"), page_size=limit
        )
        log_api_response("devices.activities", {"count": len(page)})
        return ToolResult.json({"activities": page.items, "cursor": page.cursor})
