# =============================================================================
# core/errors.py  —  Error taxonomy
# =============================================================================
#
# Every failure the core knows about is a NinjaOneMCPError.  The navigation
# layer catches them (and anything else) at the tool-call boundary and turns
# them into error results, so these never reach the MCP transport.
# =============================================================================

CREDENTIALS_HINT = (
    "Please set NINJAONE_CLIENT_ID, NINJAONE_CLIENT_SECRET, "
    "and optionally NINJAONE_REGION (us, eu, oc) environment variables."
)


class NinjaOneMCPError(Exception):
    """Base class for all errors raised by this package."""


class CredentialsError(NinjaOneMCPError):
    """The configured credentials cannot be used."""


class MissingCredentialsError(CredentialsError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required setting(s): {', '.join(missing)}")


class InvalidRegionError(CredentialsError):
    def __init__(self, region: str, allowed: list[str]):
        self.region = region
        self.allowed = allowed
        super().__init__(
            f"Invalid NINJAONE_REGION '{region}'. Supported regions: {', '.join(allowed)}"
        )


class NoCredentialsError(NinjaOneMCPError):
    """Raised by the client cache when no usable credentials resolve."""

    def __init__(self, reason: str = ""):
        message = f"No API credentials provided. {CREDENTIALS_HINT}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnknownDomainError(NinjaOneMCPError):
    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"Unknown domain: {domain}")


class NinjaOneAPIError(NinjaOneMCPError):
    """The NinjaOne API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, path: str = ""):
        self.status_code = status_code
        self.path = path
        location = f" {path}" if path else ""
        super().__init__(f"NinjaOne API error {status_code}{location}: {message}")
