# =============================================================================
# main.py  —  Entry Point for the NinjaOne MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads a .env file if there is one (NINJAONE_CLIENT_ID, ...)
#   2. Configures logging to stderr at LOG_LEVEL
#   3. Serves MCP over stdin/stdout until the client disconnects
#
# THE DECISION TREE:
#   A freshly connected agent sees only two tools: ninjaone_navigate and
#   ninjaone_status.  After ninjaone_navigate(domain="devices") it sees
#   ninjaone_back, ninjaone_status and the six device tools, and so on for
#   organizations, alerts and tickets.
#
# CREDENTIALS (environment):
#   NINJAONE_CLIENT_ID       OAuth client id       (required)
#   NINJAONE_CLIENT_SECRET   OAuth client secret   (required)
#   NINJAONE_REGION          us | eu | oc          (default: us)
#
#   The server starts without them; ninjaone_status reports what is missing
#   and ninjaone_navigate refuses to enter a domain until they are set.
# =============================================================================

from tools.mcp_server import main

if __name__ == "__main__":
    main()
