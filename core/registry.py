# =============================================================================
# core/registry.py  —  Domain Module Registry
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Maps the four domain names to their handler classes through a static
#   registration table.  A handler is built the first time its domain is
#   requested and the same instance is returned afterwards.
#
# The domain set is closed.  Asking for anything else raises
# UnknownDomainError: that is a programming error, not a transient one.
# =============================================================================

from collections.abc import Callable
from typing import Optional

from core.client_cache import ClientCache, default_cache
from core.domains import (
    AlertsHandler,
    DevicesHandler,
    DomainHandler,
    OrganizationsHandler,
    TicketsHandler,
)
from core.errors import UnknownDomainError

HandlerFactory = Callable[[ClientCache], DomainHandler]

# Order matters: it is the order shown to the agent.
DOMAIN_FACTORIES: dict[str, HandlerFactory] = {
    "devices": DevicesHandler,
    "organizations": OrganizationsHandler,
    "alerts": AlertsHandler,
    "tickets": TicketsHandler,
}


class DomainRegistry:
    """Load-once cache of domain handlers over a fixed registration table."""

    def __init__(
        self,
        factories: Optional[dict[str, HandlerFactory]] = None,
        client_cache: Optional[ClientCache] = None,
    ):
        self._factories = dict(DOMAIN_FACTORIES if factories is None else factories)
        self.client_cache = client_cache or default_cache()
        self._handlers: dict[str, DomainHandler] = {}

    def list_domains(self) -> list[str]:
        return list(self._factories)

    def is_domain(self, name: object) -> bool:
        return isinstance(name, str) and name in self._factories

    def get(self, domain: str) -> DomainHandler:
        handler = self._handlers.get(domain)
        if handler is not None:
            return handler

        factory = self._factories.get(domain) if isinstance(domain, str) else None
        if factory is None:
            raise UnknownDomainError(domain)

        handler = factory(self.client_cache)
        self._handlers[domain] = handler
        return handler

    def loaded_domains(self) -> list[str]:
        return list(self._handlers)

    def clear(self) -> None:
        self._handlers.clear()


# -----------------------------------------------------------------------------
# The process-wide registry
# -----------------------------------------------------------------------------
_default_registry = DomainRegistry()


def default_registry() -> DomainRegistry:
    return _default_registry


def get_domain_handler(domain: str) -> DomainHandler:
    return _default_registry.get(domain)


def available_domains() -> list[str]:
    return _default_registry.list_domains()


def is_domain_name(name: object) -> bool:
    return _default_registry.is_domain(name)


def clear_domain_cache() -> None:
    _default_registry.clear()
