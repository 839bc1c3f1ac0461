"""NinjaOne domain handlers: devices, organizations, alerts, tickets."""

from core.domains.alerts import AlertsHandler
from core.domains.base import DomainHandler
from core.domains.devices import DevicesHandler
from core.domains.organizations import OrganizationsHandler
from core.domains.tickets import TicketsHandler

__all__ = [
    "DomainHandler",
    "DevicesHandler",
    "OrganizationsHandler",
    "AlertsHandler",
    "TicketsHandler",
]
