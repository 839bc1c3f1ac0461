# =============================================================================
# core/ninjaone.py  —  NinjaOne REST API client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   A small async client for the NinjaOne public API (v2), built on
#   httpx.AsyncClient.  It owns the OAuth2 client-credentials token and
#   exposes four sub-resources: devices, organizations, alerts, tickets.
#
# CONSTRUCTION IS NETWORK-FREE:
#   Building a NinjaOneClient only builds an httpx.AsyncClient.  The first
#   token request happens on the first API call.  The client cache depends
#   on this: replacing a client on credential rotation is cheap.
#
# ONE LIST SHAPE:
#   NinjaOne answers list calls with bare arrays ("/v2/organizations"),
#   wrapped objects ("/v2/device/{id}/activities") or ticket-board run
#   results ({"data": [...], "metadata": {...}}).  Every list method here
#   returns a core.models.Page instead.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional

import httpx

from core.config import DEFAULT_HTTP_TIMEOUT
from core.errors import NinjaOneAPIError
from core.models import Credentials, Page

logger = logging.getLogger(__name__)

TOKEN_PATH = "/ws/oauth/token"
TOKEN_SCOPES = "monitoring management control"

# Refresh the token this many seconds before NinjaOne says it expires.
_TOKEN_EXPIRY_SKEW = 60.0


def _clean(params: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if params is None:
        return None
    return {k: v for k, v in params.items() if v is not None}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:500] or response.reason_phrase
    if isinstance(body, dict):
        for key in ("errorMessage", "error_description", "message", "error", "resultCode"):
            if body.get(key):
                return str(body[key])
    return str(body)[:500]


def device_filter(
    organization_id: Optional[int] = None,
    device_id: Optional[int] = None,
    device_class: Optional[str] = None,
    online: Optional[bool] = None,
) -> Optional[str]:
    """Build a NinjaOne device filter ("df") expression, or None if empty."""
    parts = []
    if organization_id is not None:
        parts.append(f"org = {organization_id}")
    if device_id is not None:
        parts.append(f"id = {device_id}")
    if device_class:
        parts.append(f"class = {device_class}")
    if online is True:
        parts.append("online")
    elif online is False:
        parts.append("offline")
    return " AND ".join(parts) or None


def to_page(payload: Any, key: str, page_size: Optional[int] = None) -> Page:
    """Normalize any NinjaOne list response into a Page.

    Bare arrays are paged by id: when a full page came back, the id of the
    last item is the cursor for the next request ("after").
    """
    if payload is None:
        return Page()

    if isinstance(payload, list):
        items = payload
        cursor = None
        if page_size and len(items) >= page_size:
            last = items[-1]
            if isinstance(last, dict) and last.get("id") is not None:
                cursor = str(last["id"])
        return Page(items=items, cursor=cursor)

    if isinstance(payload, dict):
        items = payload.get(key)
        if items is None:
            items = payload.get("data", [])
        cursor = payload.get("cursor")
        metadata = payload.get("metadata")
        if cursor is None and isinstance(metadata, dict):
            cursor = metadata.get("lastCursorId")
        return Page(items=list(items or []), cursor=str(cursor) if cursor is not None else None)

    logger.warning("Unexpected list response shape for %s: %s", key, type(payload).__name__)
    return Page()


class NinjaOneClient:
    """Async NinjaOne API client bound to one set of credentials."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

        self.devices = DevicesResource(self)
        self.organizations = OrganizationsResource(self)
        self.alerts = AlertsResource(self)
        self.tickets = TicketsResource(self)

    @classmethod
    def from_credentials(cls, credentials: Credentials, **kwargs: Any) -> "NinjaOneClient":
        return cls(
            credentials.client_id,
            credentials.client_secret,
            credentials.base_url,
            **kwargs,
        )

    async def __aenter__(self) -> "NinjaOneClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------
    async def _access_token(self) -> str:
        async with self._token_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            logger.debug("Requesting NinjaOne access token from %s", self.base_url)
            response = await self._http.post(
                TOKEN_PATH,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "scope": TOKEN_SCOPES,
                },
            )
            if response.is_error:
                raise NinjaOneAPIError(response.status_code, _error_message(response), TOKEN_PATH)

            body = response.json()
            expires_in = float(body.get("expires_in", 3600))
            self._token = body["access_token"]
            self._token_expires_at = time.monotonic() + max(expires_in - _TOKEN_EXPIRY_SKEW, 0.0)
            return self._token

    def _invalidate_token(self) -> None:
        self._token = None
        self._token_expires_at = 0.0

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------
    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Send one authenticated request and return the decoded JSON body.

        A 401 on a cached token drops the token and retries once.
        """
        for attempt in (1, 2):
            token = await self._access_token()
            response = await self._http.request(
                method,
                path,
                params=_clean(params),
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )
            if response.status_code == 401 and attempt == 1:
                logger.info("NinjaOne rejected the access token, refreshing")
                self._invalidate_token()
                continue
            break

        if response.is_error:
            raise NinjaOneAPIError(response.status_code, _error_message(response), path)
        if not response.content:
            return None
        return response.json()


class _Resource:
    def __init__(self, client: NinjaOneClient):
        self._client = client


class DevicesResource(_Resource):
    async def list(
        self,
        organization_id: Optional[int] = None,
        device_class: Optional[str] = None,
        online: Optional[bool] = None,
        page_size: int = 50,
        cursor: Optional[str] = None,
    ) -> Page:
        payload = await self._client.request(
            "GET",
            "/v2/devices-detailed",
            params={
                "df": device_filter(organization_id, device_class=device_class, online=online),
                "pageSize": page_size,
                "after": cursor,
            },
        )
        return to_page(payload, "devices", page_size)

    async def get(self, device_id: int) -> Any:
        return await self._client.request("GET", f"/v2/device/{device_id}")

    async def reboot(self, device_id: int, reason: Optional[str] = None, mode: str = "NORMAL") -> Any:
        body = {"reason": reason} if reason else None
        return await self._client.request("POST", f"/v2/device/{device_id}/reboot/{mode}", json=body)

    async def services(self, device_id: int, state: Optional[str] = None) -> Any:
        return await self._client.request(
            "GET", f"/v2/device/{device_id}/windows-services", params={"state": state}
        )

    async def alerts(self, device_id: int, severity: Optional[str] = None) -> list[Any]:
        payload = await self._client.request("GET", f"/v2/device/{device_id}/alerts")
        alerts = to_page(payload, "alerts").items
        if severity:
            alerts = [a for a in alerts if a.get("severity") == severity]
        return alerts

    async def activities(
        self,
        device_id: int,
        activity_type: Optional[str] = None,
        page_size: int = 50,
    ) -> Page:
        payload = await self._client.request(
            "GET",
            f"/v2/device/{device_id}/activities",
            params={"activityType": activity_type, "pageSize": page_size},
        )
        return to_page(payload, "activities", page_size)


class OrganizationsResource(_Resource):
    async def list(self, page_size: int = 50, cursor: Optional[str] = None) -> Page:
        payload = await self._client.request(
            "GET", "/v2/organizations", params={"pageSize": page_size, "after": cursor}
        )
        return to_page(payload, "organizations", page_size)

    async def get(self, organization_id: int) -> Any:
        return await self._client.request("GET", f"/v2/organization/{organization_id}")

    async def create(
        self,
        name: str,
        description: Optional[str] = None,
        node_approval_mode: Optional[str] = None,
        policy_id: Optional[int] = None,
    ) -> Any:
        body = _clean({
            "name": name,
            "description": description,
            "nodeApprovalMode": node_approval_mode,
            "policyId": policy_id,
        })
        return await self._client.request("POST", "/v2/organizations", json=body)

    async def locations(self, organization_id: int) -> Any:
        return await self._client.request("GET", f"/v2/organization/{organization_id}/locations")

    async def devices(
        self,
        organization_id: int,
        device_class: Optional[str] = None,
        page_size: int = 50,
    ) -> Page:
        payload = await self._client.request(
            "GET",
            f"/v2/organization/{organization_id}/devices",
            params={"pageSize": page_size},
        )
        page = to_page(payload, "devices", page_size)
        if device_class:
            page.items = [d for d in page.items if d.get("nodeClass") == device_class]
        return page


class AlertsResource(_Resource):
    async def list(
        self,
        severity: Optional[str] = None,
        organization_id: Optional[int] = None,
        device_id: Optional[int] = None,
        source_type: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> Page:
        """List active alerts.  /v2/alerts is not paged; page_size truncates."""
        payload = await self._client.request(
            "GET",
            "/v2/alerts",
            params={
                "df": device_filter(organization_id, device_id),
                "sourceType": source_type,
            },
        )
        alerts = to_page(payload, "alerts").items
        if severity:
            alerts = [a for a in alerts if a.get("severity") == severity]
        if page_size is not None and page_size > 0:
            alerts = alerts[:page_size]
        return Page(items=alerts)

    async def reset(self, alert_uid: str) -> Any:
        return await self._client.request("DELETE", f"/v2/alert/{alert_uid}")

    async def reset_many(
        self,
        device_id: Optional[int] = None,
        organization_id: Optional[int] = None,
        severity: Optional[str] = None,
    ) -> list[str]:
        """Reset every active alert matching the filters; returns the reset uids."""
        page = await self.list(
            severity=severity, organization_id=organization_id, device_id=device_id
        )
        reset = []
        for alert in page.items:
            uid = alert.get("uid")
            if uid:
                await self.reset(uid)
                reset.append(uid)
        return reset


DEFAULT_TICKET_BOARD = 1


class TicketsResource(_Resource):
    async def list(
        self,
        status: Optional[str] = None,
        organization_id: Optional[int] = None,
        device_id: Optional[int] = None,
        board_id: Optional[int] = None,
        page_size: int = 50,
        cursor: Optional[str] = None,
    ) -> Page:
        filters = []
        for field, value in (
            ("status", status),
            ("organizationId", organization_id),
            ("nodeId", device_id),
        ):
            if value is not None:
                filters.append({"field": field, "operator": "in", "value": [value]})

        body = _clean({
            "filters": filters,
            "pageSize": page_size,
            "lastCursorId": cursor,
        })
        board = board_id if board_id is not None else DEFAULT_TICKET_BOARD
        payload = await self._client.request(
            "POST", f"/v2/ticketing/trigger/board/{board}/run", json=body
        )
        return to_page(payload, "tickets", page_size)

    async def get(self, ticket_id: int) -> Any:
        return await self._client.request("GET", f"/v2/ticketing/ticket/{ticket_id}")

    async def create(
        self,
        subject: str,
        organization_id: int,
        description: Optional[str] = None,
        device_id: Optional[int] = None,
        priority: Optional[str] = None,
        ticket_type: Optional[str] = None,
    ) -> Any:
        body = _clean({
            "subject": subject,
            "clientId": organization_id,
            "nodeId": device_id,
            "priority": priority,
            "type": ticket_type,
            "description": {"public": True, "body": description} if description else None,
        })
        return await self._client.request("POST", "/v2/ticketing/ticket", json=body)

    async def update(self, ticket_id: int, **fields: Any) -> Any:
        return await self._client.request(
            "PUT", f"/v2/ticketing/ticket/{ticket_id}", json=_clean(fields)
        )

    async def add_comment(self, ticket_id: int, body: str, public: bool = True) -> Any:
        return await self._client.request(
            "POST",
            f"/v2/ticketing/ticket/{ticket_id}/comment",
            json={"body": body, "public": public},
        )

    async def comments(self, ticket_id: int) -> Any:
        return await self._client.request("GET", f"/v2/ticketing/ticket/{ticket_id}/log-entry")
