# =============================================================================
# core/client_cache.py  —  Backing-Client Cache
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Owns at most one NinjaOneClient at a time, together with the credentials
#   it was built from.  Every domain handler reaches the API through here.
#
# THE ALGORITHM (get_client):
#   1. Resolve credentials.  Failure → NoCredentialsError, no retry.
#   2. If the cached client was built from different credentials, drop it
#      (credential rotation: the client binds id/secret/base URL at
#      construction and cannot be reconfigured).
#   3. If the slot is empty, build a client and store it.
#   4. Return the client.
#
#   Steps 2-3 run under an asyncio.Lock, so concurrent first calls share one
#   construction.  The rotated-out client is closed after the lock is
#   released.
# =============================================================================

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from core.credentials import resolve_credentials
from core.errors import CredentialsError, NoCredentialsError
from core.models import Credentials
from core.ninjaone import NinjaOneClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Credentials], Any]


@dataclass(frozen=True)
class CachedClient:
    client: Any
    credentials: Credentials


class ClientCache:
    """Single-slot, credential-keyed cache for the NinjaOne API client.

    Args:
        environ: Where credentials are read from on every call.  None means
            os.environ, read live.
        client_factory: Builds a client from Credentials.  Must not do
            network I/O.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.environ = environ
        self._client_factory = client_factory or NinjaOneClient.from_credentials
        self._handle: Optional[CachedClient] = None
        self._lock = asyncio.Lock()

    @property
    def cached_credentials(self) -> Optional[Credentials]:
        return self._handle.credentials if self._handle else None

    def configure(self, client_factory: ClientFactory) -> None:
        """Replace the client factory.  Takes effect for the next client built."""
        self._client_factory = client_factory

    def resolve_credentials(self) -> Credentials:
        return resolve_credentials(self.environ)

    async def get_client(self) -> Any:
        try:
            credentials = self.resolve_credentials()
        except CredentialsError as exc:
            raise NoCredentialsError(str(exc)) from exc

        stale = None
        async with self._lock:
            handle = self._handle
            if handle is not None and handle.credentials != credentials:
                logger.info(
                    "NinjaOne credentials changed (region %s → %s), replacing cached client",
                    handle.credentials.region.value,
                    credentials.region.value,
                )
                stale = handle.client
                self._handle = handle = None

            if handle is None:
                logger.debug("Creating NinjaOne client for %s", credentials.base_url)
                handle = CachedClient(self._client_factory(credentials), credentials)
                self._handle = handle

        if stale is not None:
            await _close(stale)
        return handle.client

    def clear(self) -> None:
        """Empty the slot.  The dropped client is not closed."""
        self._handle = None

    async def aclose(self) -> None:
        """Empty the slot and close the dropped client."""
        handle, self._handle = self._handle, None
        if handle is not None:
            await _close(handle.client)


async def _close(client: Any) -> None:
    aclose = getattr(client, "aclose", None)
    if aclose is not None:
        await aclose()


# -----------------------------------------------------------------------------
# The process-wide cache
# -----------------------------------------------------------------------------
_default_cache = ClientCache()


def default_cache() -> ClientCache:
    return _default_cache


async def get_client() -> Any:
    """Get (or lazily create) the process-wide NinjaOne client."""
    return await _default_cache.get_client()


def clear_client() -> None:
    _default_cache.clear()
