"""
Environment-driven defaults for the gradebook engine and the surfaces that expose it.

The engine functions themselves take every reference value as an argument; these
settings are only consulted for defaults (URLs baked into deep links, the timezone
a surface uses when the caller does not pass one).
"""
import os


# IANA timezone used by the CLI, the REST service and the MCP tools when none is given
DEFAULT_TIMEZONE = os.getenv("GRADEBOOK_TIMEZONE", "America/Los_Angeles")

# Canvas instance used to build assignment/course links when the tree carries none
CANVAS_BASE_URL = os.getenv("CANVAS_BASE_URL", "https://djusd.instructure.com")

# Dashboard origin used for "no due date" and progress-table deep links
DASHBOARD_BASE_URL = os.getenv("DASHBOARD_BASE_URL", "https://app")

GRADEBOOK_SERVICE_PORT = int(os.getenv("GRADEBOOK_SERVICE_PORT", "8004"))
