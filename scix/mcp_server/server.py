"""SciX MCP server: line-delimited JSON-RPC over stdin/stdout."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Callable
from typing import IO, Any, TextIO

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, PARSE_ERROR

from scix.client.client import SciXClient
from scix.core.errors import SciXError
from scix.mcp_server.catalog import RESOURCE_CATALOG, RESOURCE_TEXT, TOOL_CATALOG
from scix.mcp_server.constants import (
    JSONRPC_VERSION,
    NOTIFICATION_METHODS,
    PROTOCOL_VERSION,
    SERVER_NAME,
)
from scix.mcp_server.dispatch import ToolDispatcher
from scix.version import __version__

_server_log = logging.getLogger("scix.mcp_server")


class ProtocolError(Exception):
    """Raised by a method handler to produce a JSON-RPC error response."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def _result_response(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def _error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": {"code": code, "message": message}}


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and could not be echoed back as an id.
    raise ValueError(f"invalid constant {name!r}")


def _request_id(message: dict[str, Any]) -> Any:
    request_id = message.get("id")
    if request_id is None or isinstance(request_id, (str, int, float, bool)):
        return request_id
    return None


class ProtocolLoop:
    """Reads requests one line at a time and writes one response line per request.

    ``tools/call`` requests run as separate tasks when ``concurrent`` is set,
    so a slow tool never holds up ``initialize`` or ``tools/list``. All other
    methods are answered inline, in arrival order.
    """

    def __init__(self, dispatcher: ToolDispatcher, *, concurrent: bool = True) -> None:
        self.dispatcher = dispatcher
        self.concurrent = concurrent
        self._write_lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()
        self._handlers: dict[str, Callable[[dict[str, Any]], Any]] = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "resources/list": self._resources_list,
            "resources/read": self._resources_read,
        }

    async def run(self, reader: IO[Any], writer: TextIO) -> None:
        """Serve until end of input, then wait for in-flight tool calls.

        ``reader`` may be a text or a binary stream. Binary lines are decoded
        one at a time, so invalid UTF-8 costs only the line it appears on.
        """
        while True:
            line = await asyncio.to_thread(reader.readline)
            if not line:
                break
            await self.handle_line(line, writer)
        if self._pending:
            await asyncio.gather(*list(self._pending))
        _server_log.debug("protocol_loop_eof")

    async def handle_line(self, line: str | bytes, writer: TextIO) -> None:
        if not line.strip():
            return
        try:
            text = line.decode("utf-8") if isinstance(line, bytes) else line
            message = json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            await self._write(writer, _error_response(None, PARSE_ERROR, f"Parse error: {e}"))
            return

        if not isinstance(message, dict):
            message = {}
        method = message.get("method")
        method = method if isinstance(method, str) else ""
        request_id = _request_id(message)
        params = message.get("params")
        params = params if isinstance(params, dict) else {}

        if method in NOTIFICATION_METHODS:
            return

        if method == "tools/call":
            if self.concurrent:
                task = asyncio.create_task(self._respond_tool_call(request_id, params, writer))
                self._pending.add(task)
                task.add_done_callback(self._pending.discard)
            else:
                await self._respond_tool_call(request_id, params, writer)
            return

        await self._write(writer, self._respond(method, request_id, params))

    def _respond(self, method: str, request_id: Any, params: dict[str, Any]) -> dict[str, Any]:
        handler = self._handlers.get(method)
        if handler is None:
            return _error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        try:
            return _result_response(request_id, handler(params))
        except ProtocolError as e:
            return _error_response(request_id, e.code, e.message)
        except Exception as e:
            _server_log.exception("method_failed method=%s", method, extra={"method": method})
            return _error_response(request_id, INTERNAL_ERROR, f"Internal error: {e}")

    async def _respond_tool_call(self, request_id: Any, params: dict[str, Any], writer: TextIO) -> None:
        name = params.get("name")
        try:
            result = await self.dispatcher.invoke(name if isinstance(name, str) else "", params.get("arguments"))
            response = _result_response(request_id, result)
        except Exception as e:
            _server_log.exception("tool_call_failed tool=%s", name, extra={"tool": name})
            response = _error_response(request_id, INTERNAL_ERROR, f"Internal error: {e}")
        await self._write(writer, response)

    async def _write(self, writer: TextIO, payload: dict[str, Any]) -> None:
        line = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        async with self._write_lock:
            writer.write(line + "\n")
            writer.flush()

    def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client_info = params.get("clientInfo")
        if isinstance(client_info, dict):
            _server_log.info(
                "client_initialize client=%s",
                client_info.get("name"),
                extra={"client": client_info.get("name")},
            )
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "resources": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": TOOL_CATALOG}

    def _resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"resources": RESOURCE_CATALOG}

    def _resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        uri = params.get("uri")
        uri = uri if isinstance(uri, str) else ""
        text = RESOURCE_TEXT.get(uri)
        if text is None:
            raise ProtocolError(INVALID_PARAMS, f"Unknown resource: {uri}")
        return {"contents": [{"uri": uri, "mimeType": "text/plain", "text": text}]}


async def serve(
    client: SciXClient,
    reader: IO[Any] | None = None,
    writer: TextIO | None = None,
    *,
    concurrent: bool = True,
) -> None:
    """Run the protocol loop over the given streams (stdin/stdout by default)."""
    loop = ProtocolLoop(ToolDispatcher(client), concurrent=concurrent)
    try:
        await loop.run(reader or sys.stdin.buffer, writer or sys.stdout)
    finally:
        client.close()


def main(argv: list[str] | None = None) -> None:
    """Entry point for ``scix-mcp``."""
    from scix.cli import configure_logging

    parser = argparse.ArgumentParser(description="SciX MCP server (JSON-RPC over stdio)")
    parser.add_argument("--token", help="API token (default: SCIX_API_TOKEN or ADS_API_TOKEN)")
    parser.add_argument(
        "--serial",
        action="store_true",
        help="Handle tool calls one at a time, preserving response order",
    )
    parser.add_argument("--log-level", help="Logging level for stderr (default: SCIX_LOG_LEVEL or WARNING)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    try:
        client = SciXClient.from_env(args.token)
    except SciXError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    asyncio.run(serve(client, concurrent=not args.serial))


if __name__ == "__main__":
    main()
