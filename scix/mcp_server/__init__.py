"""SciX MCP server: tool catalog, dispatch and the JSON-RPC protocol loop."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scix.mcp_server.dispatch import ToolDispatcher
    from scix.mcp_server.server import ProtocolLoop


def __getattr__(name: str) -> Any:
    if name == "ProtocolLoop":
        from scix.mcp_server.server import ProtocolLoop

        return ProtocolLoop
    if name == "ToolDispatcher":
        from scix.mcp_server.dispatch import ToolDispatcher

        return ToolDispatcher
    raise AttributeError(f"module 'scix.mcp_server' has no attribute '{name}'")


__all__ = ["ProtocolLoop", "ToolDispatcher"]
