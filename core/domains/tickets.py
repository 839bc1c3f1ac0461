# =============================================================================
# core/domains/tickets.py  —  Tickets domain
# =============================================================================
# Service tickets: list, read, create, update, and comment.
# =============================================================================

from typing import Any

from core.domains.base import (
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

TICKET_STATUSES = ["OPEN", "IN_PROGRESS", "WAITING", "CLOSED"]
TICKET_PRIORITIES = ["LOW", "MEDIUM", "HIGH", "CRITICAL"]
TICKET_TYPES = ["PROBLEM", "QUESTION", "INCIDENT", "TASK"]

_TICKET_ID = {"type": "number", "description": "The ticket ID"}

TOOLS = (
    ToolDescriptor(
        name="ninjaone_tickets_list",
        description="List tickets in NinjaOne. Can filter by status, organization, or device.",
        input_schema=object_schema({
            "status": {"type": "string", "enum": TICKET_STATUSES, "description": "Filter by ticket status"},
            "organization_id": {"type": "number", "description": "Filter tickets by organization ID"},
            "device_id": {"type": "number", "description": "Filter tickets by device ID"},
            "board_id": {"type": "number", "description": "Ticket board to run (default: 1)"},
            "limit": limit_property(),
            "cursor": cursor_property(),
        }),
    ),
    ToolDescriptor(
        name="ninjaone_tickets_get",
        description="Get details for a specific ticket by its ID",
        input_schema=object_schema({"ticket_id": _TICKET_ID}, required=["ticket_id"]),
    ),
    ToolDescriptor(
        name="ninjaone_tickets_create",
        description="Create a new ticket in NinjaOne",
        input_schema=object_schema(
            {
                "subject": {"type": "string", "description": "Ticket subject/title"},
                "description": {"type": "string", "description": "Ticket description/details"},
                "organization_id": {"type": "number", "description": "Organization ID for the ticket"},
                "device_id": {"type": "number", "description": "Device ID to associate with the ticket"},
                "priority": {"type": "string", "enum": TICKET_PRIORITIES, "description": "Ticket priority"},
                "type": {"type": "string", "enum": TICKET_TYPES, "description": "Ticket type"},
            },
            required=["subject", "organization_id"],
        ),
    ),
    ToolDescriptor(
        name="ninjaone_tickets_update",
        description="Update an existing ticket in NinjaOne",
        input_schema=object_schema(
            {
                "ticket_id": {"type": "number", "description": "The ticket ID to update"},
                "subject": {"type": "string", "description": "New ticket subject"},
                "description": {"type": "string", "description": "New ticket description"},
                "status": {"type": "string", "enum": TICKET_STATUSES, "description": "New ticket status"},
                "priority": {"type": "string", "enum": TICKET_PRIORITIES, "description": "New ticket priority"},
                "assignee_id": {"type": "number", "description": "New assignee user ID"},
            },
            required=["ticket_id"],
        ),
    ),
    ToolDescriptor(
        name="ninjaone_tickets_add_comment",
        description="Add a comment to a ticket",
        input_schema=object_schema(
            {
                "ticket_id": {"type": "number", "description": "The ticket ID to add the comment to"},
                "body": {"type": "string", "description": "The comment text"},
                "public": {
                    "type": "boolean",
                    "description": "Whether the comment is visible to customers (default: true)",
                },
            },
            required=["ticket_id", "body"],
        ),
    ),
    ToolDescriptor(
        name="ninjaone_tickets_comments",
        description="Get comments/activity for a ticket",
        input_schema=object_schema({"ticket_id": _TICKET_ID}, required=["ticket_id"]),
    ),
)


class TicketsHandler(DomainHandler):
    name = "tickets"
    noun = "ticket"
    TOOLS = TOOLS
    ROUTES = {
        "ninjaone_tickets_list": "_list",
        "ninjaone_tickets_get": "_get",
        "ninjaone_tickets_create": "_create",
        "ninjaone_tickets_update": "_update",
        "ninjaone_tickets_add_comment": "_add_comment",
        "ninjaone_tickets_comments": "_comments",
    }

    async def _list(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        limit = limit_of(args)
        log_api_call(
            "tickets.list",
            status=args.get("status"),
            organizationId=args.get("organization_id"),
            deviceId=args.get("device_id"),
            boardId=args.get("board_id"),
            limit=limit,
            cursor=args.get("cursor"),
        )
        page = await client.tickets.list(
            status=args.get("status"),
            organization_id=args.get("organization_id"),
            device_id=args.get("device_id"),
            board_id=args.get("board_id"),
            page_size=limit,
            cursor=args.get("cursor"),
        )
        log_api_response("tickets.list", {"count": len(page)})
        return ToolResult.json({"tickets": page.items, "cursor": page.cursor})

    async def _get(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        ticket_id = require(args, "ticket_id")
        log_api_call("tickets.get", ticketId=ticket_id)
        return ToolResult.json(await client.tickets.get(ticket_id))

    async def _create(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        subject = require(args, "subject")
        organization_id = require(args, "organization_id")
        log_api_call("tickets.create", subject=subject, organizationId=organization_id)
        ticket = await client.tickets.create(
            subject,
            organization_id,
            description=args.get("description"),
            device_id=args.get("device_id"),
            priority=args.get("priority"),
            ticket_type=args.get("type"),
        )
        log_api_response("tickets.create", ticket)
        return ToolResult.json(ticket)

    async def _update(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        ticket_id = require(args, "ticket_id")
        log_api_call("tickets.update", ticketId=ticket_id)
        ticket = await client.tickets.update(
            ticket_id,
            subject=args.get("subject"),
            description=args.get("description"),
            status=args.get("status"),
            priority=args.get("priority"),
            assignedAppUserId=args.get("assignee_id"),
        )
        log_api_response("tickets.update", ticket)
        return ToolResult.json(ticket)

    async def _add_comment(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        ticket_id = require(args, "ticket_id")
        body = require(args, "body")
        public = args.get("public")
        log_api_call("tickets.add_comment", ticketId=ticket_id)
        comment = await client.tickets.add_comment(
            ticket_id, body, public=True if public is None else bool(public)
        )
        return ToolResult.json(comment)

    async def _comments(self, client: NinjaOneClient, args: dict[str, Any]) -> ToolResult:
        ticket_id = require(args, "ticket_id")
        log_api_call("tickets.comments", ticketId=ticket_id)
        return ToolResult.json(await client.tickets.comments(ticket_id))
