# =============================================================================
# core/domains/alerts.py  —  Alerts domain
# =============================================================================
# View, reset and summarize active alerts.
# =============================================================================

from collections import Counter
from typing import Any

from core.domains.base import (
    SEVERITIES,
    DomainHandler,
    limit_of,
    limit_property,
    object_schema,
    require,
)
from core.logging_utils import log_api_call, log_api_response
from core.models import ToolDescriptor, ToolResult
from core.ninjaone import NinjaOneClient

GROUP_BY_CHOICES = ("severity", "organization", "both")

TOOLS = (
    ToolDescriptor(
        name="ninjaone_alerts_list",
        description="List active alerts in NinjaOne. Can filter by severity, organization, or device.",
        input_schema=object_schema({
            "severity": {"type": "string", "enum": SEVERITIES, "description": "Filter by alert severity"},
            "organization_id": {"type": "number", "description": "Filter alerts by organization ID"},
            "device_id": {"type": "number", "description": "Filter alerts by device ID"},
            "source_type": {
                "type": "string",
                "description": "Filter by alert source type (e.g., CONDITION, ACTIVITY)",
            },
            "limit": limit_property(),
        }),
    ),
    ToolDescriptor(
        name="ninjaone_alerts_reset",
        description="Reset (dismiss) an alert. This acknowledges the alert and marks it as handled.",
        input_schema=object_schema(
            {"alert_uid": {"type": "string", "description": "The unique identifier of the alert to reset"}},
            required=["alert_uid"],
        ),
    ),
    ToolDescriptor(
        name="ninjaone_alerts_reset_all",
        description="Reset (dismiss) all alerts for a device or organization. Use with caution.",
        input_schema=object_schema({
            "device_id": {"type": "number", "description": "Reset all alerts for this device ID"},
            "organization_id": {"type": "number", "description": "Reset all alerts for this organization ID"},
            "severity": {"type": "string", "enum": SEVERITIES, "description": "Only reset alerts of this severity"},
        }),
    ),
    ToolDescriptor(
        name="ninjaone_alerts_summary",
        description="Get a summary count of alerts grouped by severity and/or organization",
        input_schema=object_schema({
            "group_by": {
                "type": "string",
                "enum": list(GROUP_BY_CHOICES),
                "description": "How to group the alert counts (default: severity)",
            },
        }),
    ),
)


def summarize(alerts: list, group_by: str = "severity") -> dict:
    """Count alerts by severity and/or organization.

    Missing keys count as "UNKNOWN".  Organization ids become strings so the
    result is stable JSON.  With no alerts there is nothing to group, so only
    "total" is returned.
    """
    summary: dict = {"total": len(alerts)}
    if not alerts:
        return summary
    if group_by in ("severity", "both"):
        summary["bySeverity"] = dict(Counter(a.get("severity") or "UNKNOWN" for a in alerts))
    if group_by in ("organization", "both"):
        summary["byOrganization"] = dict(
            Counter(str(a.get("organizationId") or "UNKNOWN") for a in alerts)
        )
    return summary


class AlertsHandler(DomainHandler):
    name = "alerts"
    noun = "alert"
    TOOLS = TOOLS
    ROUTES = {
        "ninjaone_alerts_list": "_list",
        "ninjaone_alerts_reset": "_reset",
        "ninjaone_alerts_reset_all": "_reset_all",
        "ninjaone_alerts_summary": "_summary",
    }

    async def _list(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        limit = limit_of(args)
        log_api_call(
            "alerts.list",
            severity=args.get("severity"),
            organizationId=args.get("organization_id"),
            deviceId=args.get("device_id"),
            sourceType=args.get("source_type"),
            limit=limit,
        )
        page = await client.alerts.list(
            severity=args.get("severity"),
            organization_id=args.get("organization_id"),
            device_id=args.get("device_id"),
            source_type=args.get("source_type"),
            page_size=limit,
        )
        log_api_response("alerts.list", {"count": len(page)})
        return ToolResult.json({"alerts": page.items, "cursor": page.cursor})

    async def _reset(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        alert_uid = require(args, "alert_uid")
        log_api_call("alerts.reset", alertUid=alert_uid)
        result = await client.alerts.reset(alert_uid)
        return ToolResult.json({"success": True, "message": "Alert reset successfully", "result": result})

    async def _reset_all(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        device_id = args.get("device_id")
        organization_id = args.get("organization_id")
        if not device_id and not organization_id:
            return ToolResult.error(
                "Error: Must specify either device_id or organization_id to reset alerts"
            )

        log_api_call(
            "alerts.reset_many",
            deviceId=device_id,
            organizationId=organization_id,
            severity=args.get("severity"),
        )
        # A device is narrower than its organization; it wins when both are given.
        if device_id:
            reset = await client.alerts.reset_many(device_id=device_id, severity=args.get("severity"))
        else:
            reset = await client.alerts.reset_many(
                organization_id=organization_id, severity=args.get("severity")
            )
        return ToolResult.json({
            "success": True,
            "message": "Alerts reset successfully",
            "result": {"count": len(reset), "reset": reset},
        })

    async def _summary(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        group_by = args.get("group_by") or "severity"
        if group_by not in GROUP_BY_CHOICES:
            return ToolResult.error(
                f"Error: group_by must be one of: {', '.join(GROUP_BY_CHOICES)}"
            )
        log_api_call("alerts.list (for summary)", groupBy=group_by)
        page = await client.alerts.list()
        summary = summarize(page.items, group_by)
        log_api_response("alerts.summary", summary)
        return ToolResult.json(summary)
