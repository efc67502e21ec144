"""Tests for the line-delimited JSON-RPC protocol loop."""

import asyncio
import io
import json
from typing import Any

import pytest

from scix.mcp_server.constants import PROTOCOL_VERSION, SERVER_NAME
from scix.mcp_server.dispatch import ToolDispatcher, content_envelope
from scix.mcp_server.server import ProtocolLoop
from scix.version import __version__
from stub_transport import make_client


def _run(lines: list[Any], loop: ProtocolLoop | None = None) -> list[str]:
    if loop is None:
        client, _ = make_client()
        loop = ProtocolLoop(ToolDispatcher(client))
    source = "".join((line if isinstance(line, str) else json.dumps(line)) + "\n" for line in lines)
    writer = io.StringIO()
    asyncio.run(loop.run(io.StringIO(source), writer))
    return writer.getvalue().splitlines()


def _responses(lines: list[Any], loop: ProtocolLoop | None = None) -> list[dict[str, Any]]:
    return [json.loads(line) for line in _run(lines, loop)]


def _request(request_id: Any, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    message: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


class SlowDispatcher:
    """Dispatcher stand-in whose first tool call is slow."""

    def __init__(self) -> None:
        self.calls = 0

    async def invoke(self, name: str, arguments: Any) -> dict[str, Any]:
        self.calls += 1
        if name == "slow":
            await asyncio.sleep(0.3)
        return content_envelope(name)


class ExplodingDispatcher:
    async def invoke(self, name: str, arguments: Any) -> dict[str, Any]:
        raise RuntimeError("dispatcher broke")


class TestProtocolMethods:
    def test_initialize(self) -> None:
        (response,) = _responses([_request(1, "initialize", {"clientInfo": {"name": "test"}})])

        assert response["jsonrpc"] == "2.0"
        assert response["id"] == 1
        assert response["result"] == {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "resources": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    def test_tools_list_is_byte_identical_across_calls(self) -> None:
        first, second = _run([_request(7, "tools/list"), _request(7, "tools/list")])

        assert first == second
        tools = json.loads(first)["result"]["tools"]
        assert len(tools) == 12

    def test_resources_list(self) -> None:
        (response,) = _responses([_request("r", "resources/list")])

        uris = [resource["uri"] for resource in response["result"]["resources"]]
        assert uris == ["scix://fields", "scix://syntax"]
        assert all(r["mimeType"] == "text/plain" for r in response["result"]["resources"])

    def test_resources_read(self) -> None:
        (response,) = _responses([_request(2, "resources/read", {"uri": "scix://syntax"})])

        content = response["result"]["contents"][0]
        assert content["uri"] == "scix://syntax"
        assert content["mimeType"] == "text/plain"
        assert content["text"].startswith("SciX Query Syntax Guide")

    def test_unknown_resource(self) -> None:
        (response,) = _responses([_request(3, "resources/read", {"uri": "scix://nope"})])

        assert response["id"] == 3
        assert response["error"] == {"code": -32602, "message": "Unknown resource: scix://nope"}

    def test_tools_call_returns_content_envelope(self) -> None:
        (response,) = _responses(
            [_request(4, "tools/call", {"name": "scix_search", "arguments": {}})]
        )

        assert response["id"] == 4
        assert response["result"]["isError"] is True
        assert response["result"]["content"][0]["text"].startswith("Error: Invalid input:")


class TestProtocolRobustness:
    def test_parse_error_then_recovery(self) -> None:
        responses = _responses(["{not json", _request(5, "initialize")])

        assert responses[0]["id"] is None
        assert responses[0]["error"]["code"] == -32700
        assert responses[0]["error"]["message"].startswith("Parse error: ")
        assert responses[1]["id"] == 5
        assert "result" in responses[1]

    def test_invalid_utf8_line_then_recovery(self) -> None:
        client, _ = make_client()
        loop = ProtocolLoop(ToolDispatcher(client))
        source = b'\xff\xfe bad\n' + json.dumps(_request(6, "initialize")).encode("utf-8") + b"\n"
        writer = io.StringIO()

        asyncio.run(loop.run(io.BytesIO(source), writer))

        first, second = [json.loads(line) for line in writer.getvalue().splitlines()]
        assert first["id"] is None
        assert first["error"]["code"] == -32700
        assert second["id"] == 6
        assert "result" in second

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_constants_are_parse_errors(self, constant: str) -> None:
        lines = _run([f'{{"jsonrpc":"2.0","id":{constant},"method":"initialize"}}'])

        (line,) = lines
        response = json.loads(line)
        assert response["id"] is None
        assert response["error"]["code"] == -32700

    def test_unknown_method(self) -> None:
        (response,) = _responses([_request("abc", "prompts/list")])

        assert response == {
            "jsonrpc": "2.0",
            "id": "abc",
            "error": {"code": -32601, "message": "Method not found: prompts/list"},
        }

    def test_notifications_get_no_response(self) -> None:
        lines = _run(
            [
                {"jsonrpc": "2.0", "method": "notifications/initialized"},
                {"jsonrpc": "2.0", "method": "notifications/cancelled", "params": {"requestId": 1}},
            ]
        )

        assert lines == []

    def test_blank_lines_are_skipped(self) -> None:
        assert _run(["", "   "]) == []

    def test_non_object_message(self) -> None:
        (response,) = _responses(["[1, 2, 3]"])

        assert response["id"] is None
        assert response["error"]["code"] == -32601

    def test_non_scalar_id_becomes_null(self) -> None:
        (response,) = _responses([_request({"nested": 1}, "initialize")])

        assert response["id"] is None

    def test_responses_are_compact_single_lines(self) -> None:
        (line,) = _run([_request(1, "resources/read", {"uri": "scix://fields"})])

        assert ": " not in line.split('"text"')[0]
        assert "\n" not in line

    def test_dispatcher_crash_is_internal_error(self) -> None:
        loop = ProtocolLoop(ExplodingDispatcher())  # type: ignore[arg-type]

        (response,) = _responses([_request(9, "tools/call", {"name": "x"})], loop)

        assert response["id"] == 9
        assert response["error"]["code"] == -32603


class TestProtocolConcurrency:
    def test_slow_tool_does_not_block_other_methods(self) -> None:
        loop = ProtocolLoop(SlowDispatcher())  # type: ignore[arg-type]

        responses = _responses(
            [_request(1, "tools/call", {"name": "slow"}), _request(2, "initialize")], loop
        )

        assert [r["id"] for r in responses] == [2, 1]

    def test_every_pending_call_answered_at_end_of_input(self) -> None:
        dispatcher = SlowDispatcher()
        loop = ProtocolLoop(dispatcher)  # type: ignore[arg-type]

        responses = _responses(
            [_request(i, "tools/call", {"name": "fast"}) for i in range(5)], loop
        )

        assert sorted(r["id"] for r in responses) == [0, 1, 2, 3, 4]
        assert dispatcher.calls == 5

    def test_serial_mode_preserves_order(self) -> None:
        loop = ProtocolLoop(SlowDispatcher(), concurrent=False)  # type: ignore[arg-type]

        responses = _responses(
            [_request(1, "tools/call", {"name": "slow"}), _request(2, "initialize")], loop
        )

        assert [r["id"] for r in responses] == [1, 2]
