"""Constants for the SciX MCP server."""

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "scix-mcp"
JSONRPC_VERSION = "2.0"

# Client notifications that never get a response.
NOTIFICATION_METHODS = frozenset({"notifications/initialized", "notifications/cancelled"})

DEFAULT_SEARCH_ROWS = 10
DEFAULT_NETWORK_TYPE = "author"

LIBRARY_ACTIONS = (
    "list",
    "get",
    "create",
    "edit",
    "delete",
    "permissions",
    "update_permissions",
    "transfer",
)
DOCUMENT_ACTIONS = (
    "add",
    "remove",
    "get_notes",
    "add_note",
    "edit_note",
    "delete_note",
    "union",
    "intersection",
    "difference",
    "copy",
    "empty",
    "add_by_query",
)
SET_OPERATION_ACTIONS = frozenset({"union", "intersection", "difference", "copy", "empty"})
PERMISSION_LEVELS = ("owner", "admin", "write", "read")
LINK_TYPES = ("esource", "data", "citation", "reference", "coreads")
NETWORK_TYPES = ("author", "paper")
