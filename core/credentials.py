# =============================================================================
# core/credentials.py  —  Credential Resolver
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads NINJAONE_CLIENT_ID / NINJAONE_CLIENT_SECRET / NINJAONE_REGION and
#   turns them into an immutable Credentials record, or raises.
#
# There is no caching here: every call re-reads its source.  The client
# cache (core/client_cache.py) relies on that to notice rotated credentials.
# =============================================================================

import os
from collections.abc import Mapping
from typing import Optional

from core.config import ENV_CLIENT_ID, ENV_CLIENT_SECRET, ENV_REGION
from core.errors import CredentialsError, InvalidRegionError, MissingCredentialsError
from core.models import DEFAULT_REGION, Credentials, Region


def supported_regions() -> list[str]:
    return [region.value for region in Region]


def parse_region(token: Optional[str]) -> Region:
    """Map a region token to a Region (case-insensitive, blank → default)."""
    value = (token or "").strip().lower()
    if not value:
        return DEFAULT_REGION
    try:
        return Region(value)
    except ValueError:
        raise InvalidRegionError(token, supported_regions()) from None


def resolve_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """Resolve credentials from `environ` (default: os.environ).

    Raises:
        MissingCredentialsError: client id or secret is empty or unset.
        InvalidRegionError: NINJAONE_REGION is set to an unsupported value.
    """
    env = os.environ if environ is None else environ

    client_id = (env.get(ENV_CLIENT_ID) or "").strip()
    client_secret = (env.get(ENV_CLIENT_SECRET) or "").strip()

    missing = [
        name
        for name, value in ((ENV_CLIENT_ID, client_id), (ENV_CLIENT_SECRET, client_secret))
        if not value
    ]
    if missing:
        raise MissingCredentialsError(missing)

    region = parse_region(env.get(ENV_REGION))
    return Credentials(client_id=client_id, client_secret=client_secret, region=region)


def describe_credentials(environ: Optional[Mapping[str, str]] = None) -> str:
    """One-line credential status for humans.  Never constructs a client."""
    try:
        creds = resolve_credentials(environ)
    except CredentialsError as exc:
        return f"NOT CONFIGURED - {exc}"
    return f"Configured (region: {creds.region.value}, base URL: {creds.base_url})"
