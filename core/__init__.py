# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains everything the NinjaOne MCP server does that is not
# protocol plumbing: credential resolution, the API client and its cache,
# the domain handlers, the registry and the navigation state machine.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports the MCP SDK.  tools/mcp_server.py is the
#   only module that converts core values into MCP protocol types.
# =============================================================================
