# =============================================================================
# core/config.py  —  Server-wide settings
# =============================================================================
#
# All configuration comes from environment variables.  main.py calls
# load_dotenv() first, so a local .env file works the same way.
#
# Credentials are NOT part of ServerSettings: they are re-read on every
# resolution (core/credentials.py) so that rotating them takes effect without
# a restart.
#
#   LOG_LEVEL               debug | info | warning | error   (default: info)
#   NINJAONE_HTTP_TIMEOUT   seconds per API request          (default: 30)
# =============================================================================

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

SERVER_NAME = "ninjaone-mcp"
SERVER_VERSION = "1.0.0"

ENV_CLIENT_ID = "NINJAONE_CLIENT_ID"
ENV_CLIENT_SECRET = "NINJAONE_CLIENT_SECRET"
ENV_REGION = "NINJAONE_REGION"
ENV_HTTP_TIMEOUT = "NINJAONE_HTTP_TIMEOUT"
ENV_LOG_LEVEL = "LOG_LEVEL"

_LOG_LEVELS = ("debug", "info", "warning", "error")
# "warn" is accepted as a spelling of "warning".
_LOG_LEVEL_ALIASES = {"warn": "warning"}

DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class ServerSettings:
    log_level: str = "info"
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        """Build settings from `environ` (default: os.environ).

        Unknown log levels fall back to "info".  A timeout that is not a
        positive number raises ValueError: a typo there should stop start-up.
        """
        env = os.environ if environ is None else environ

        level = env.get(ENV_LOG_LEVEL, "info").strip().lower()
        level = _LOG_LEVEL_ALIASES.get(level, level)
        if level not in _LOG_LEVELS:
            level = "info"

        raw_timeout = env.get(ENV_HTTP_TIMEOUT, "").strip()
        timeout = DEFAULT_HTTP_TIMEOUT
        if raw_timeout:
            timeout = float(raw_timeout)
            if timeout <= 0:
                raise ValueError(f"{ENV_HTTP_TIMEOUT} must be positive, got {raw_timeout!r}")

        return cls(log_level=level, http_timeout=timeout)
