# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the MCP front-end.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the MCP protocol and core/:
#     1. It receives tools/list and tools/call requests
#     2. It routes them to the caller's NavigationSession
#     3. It converts core ToolDescriptor / ToolResult values into
#        mcp.types.Tool / mcp.types.CallToolResult
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT decide which tools are visible (core/navigation.py does)
#   - They do NOT call the NinjaOne API (core/domains/ does)
# =============================================================================
