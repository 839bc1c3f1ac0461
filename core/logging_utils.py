# =============================================================================
# core/logging_utils.py  —  Logging helpers
# =============================================================================
# We log to STDERR because the MCP server talks to its client over STDOUT
# (stdio transport).  Anything written to stdout would corrupt the JSON-RPC
# stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming tool calls (tool name + arguments)
#     - GREEN for responses
#     - YELLOW for intermediate status messages (API calls, transitions)
# =============================================================================

import json
import logging
import sys
from typing import Any, Optional

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

LOGGER_NAME = "ninjaone_mcp"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(level: str = "info") -> None:
    """Send all log output to stderr at `level`.  Safe to call twice."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def _context(context: dict[str, Any]) -> str:
    # None values are noise in every call site (unset optional filters).
    cleaned = {k: v for k, v in context.items() if v is not None}
    if not cleaned:
        return ""
    return " " + json.dumps(cleaned, default=str, separators=(",", ":"))


def log_request(tool_name: str, params: Optional[dict[str, Any]] = None) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in (params or {}).items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def log_status(message: str, **context: Any) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_context(context)}{_RESET}")


def log_response(tool_name: str, text: str, is_error: bool = False) -> None:
    """Log the size (and error flag) of a tool response in GREEN."""
    flag = " (error)" if is_error else ""
    logger.info(f"{_GREEN}  ← {tool_name} response{flag}: {len(text)} chars{_RESET}")
    logger.debug("%s response body: %s", tool_name, text)


def log_api_call(operation: str, **context: Any) -> None:
    """Log an outbound NinjaOne API call ("API call: devices.list {...}")."""
    log_status(f"API call: {operation}", **context)


def log_api_response(operation: str, payload: Any) -> None:
    logger.debug("API response: %s%s", operation, _context({"response": payload}))
