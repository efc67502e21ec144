"""Tests for the HTTP transport and status classification."""

import asyncio
import threading
import time
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from scix.client.transport import Transport, classify_response
from scix.core.constants import USER_AGENT
from scix.core.errors import (
    ConfigurationError,
    NotFoundError,
    RateLimitedError,
    TransportError,
    UnauthorizedError,
    UpstreamError,
)
from scix.core.rate_limit import RateLimiter


async def _no_sleep(seconds: float) -> None:
    return None


def _response(status: int, body: str = "", headers: dict[str, str] | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict(headers or {})
    return response


def _transport(session: MagicMock, limiter: RateLimiter | None = None) -> Transport:
    return Transport(
        "test-token",
        base_url="https://api.example.org/v1/",
        rate_limiter=limiter or RateLimiter(1000.0, sleep=_no_sleep),
        timeout=12.0,
        session=session,
    )


class TestClassifyResponse:
    def test_success_returns_body_verbatim(self) -> None:
        assert classify_response(200, {}, '{"ok": true}') == '{"ok": true}'
        assert classify_response(204, {}, "") == ""

    def test_404_is_not_found(self) -> None:
        with pytest.raises(NotFoundError):
            classify_response(404, {}, "")

    def test_401_is_unauthorized(self) -> None:
        with pytest.raises(UnauthorizedError):
            classify_response(401, {}, "")

    def test_429_carries_retry_after(self) -> None:
        with pytest.raises(RateLimitedError) as exc_info:
            classify_response(429, {"Retry-After": "7"}, "")

        assert exc_info.value.retry_after == 7.0
        assert str(exc_info.value) == "Rate limited, retry after 7s"

    def test_429_without_retry_after(self) -> None:
        with pytest.raises(RateLimitedError) as exc_info:
            classify_response(429, {"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}, "")

        assert exc_info.value.retry_after is None

    def test_other_status_is_upstream_error_with_body(self) -> None:
        with pytest.raises(UpstreamError) as exc_info:
            classify_response(500, {}, "oops")

        assert exc_info.value.status == 500
        assert exc_info.value.body == "oops"
        assert str(exc_info.value) == "API error (HTTP 500): oops"


class TestTransportExecute:
    def test_get_sends_auth_headers_and_params(self) -> None:
        session = MagicMock()
        session.request.return_value = _response(200, '{"response": {}}')
        transport = _transport(session)

        body = asyncio.run(transport.get("/search/query", {"q": "star", "rows": "5"}))

        assert body == '{"response": {}}'
        args, kwargs = session.request.call_args
        assert args == ("GET", "https://api.example.org/v1/search/query")
        assert kwargs["params"] == {"q": "star", "rows": "5"}
        assert kwargs["headers"]["Authorization"] == "Bearer test-token"
        assert kwargs["headers"]["User-Agent"] == USER_AGENT
        assert kwargs["timeout"] == 12.0

    def test_post_json_sends_body(self) -> None:
        session = MagicMock()
        session.request.return_value = _response(200, "{}")
        transport = _transport(session)

        asyncio.run(transport.post_json("/metrics", {"bibcodes": ["X"]}))

        args, kwargs = session.request.call_args
        assert args[0] == "POST"
        assert kwargs["json"] == {"bibcodes": ["X"]}

    def test_post_text_sets_content_type(self) -> None:
        session = MagicMock()
        session.request.return_value = _response(200, "{}")
        transport = _transport(session)

        asyncio.run(transport.post_text("/reference/text", "ref one\nref two"))

        _, kwargs = session.request.call_args
        assert kwargs["data"] == b"ref one\nref two"
        assert kwargs["headers"]["Content-Type"] == "text/plain"

    def test_put_and_delete_methods(self) -> None:
        session = MagicMock()
        session.request.return_value = _response(200, "{}")
        transport = _transport(session)

        asyncio.run(transport.put_json("/biblib/documents/abc", {"name": "n"}))
        asyncio.run(transport.delete("/biblib/documents/abc"))

        methods = [call.args[0] for call in session.request.call_args_list]
        assert methods == ["PUT", "DELETE"]

    def test_status_errors_are_classified(self) -> None:
        session = MagicMock()
        session.request.return_value = _response(429, "slow down", {"Retry-After": "7"})
        transport = _transport(session)

        with pytest.raises(RateLimitedError) as exc_info:
            asyncio.run(transport.get("/search/query"))

        assert exc_info.value.retry_after == 7.0

    def test_network_failure_is_transport_error(self) -> None:
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("connection refused")
        transport = _transport(session)

        with pytest.raises(TransportError, match="connection refused"):
            asyncio.run(transport.get("/search/query"))

    def test_timeout_is_transport_error(self) -> None:
        session = MagicMock()
        session.request.side_effect = requests.Timeout("read timed out")
        transport = _transport(session)

        with pytest.raises(TransportError):
            asyncio.run(transport.get("/search/query"))

    def test_slow_response_is_cut_off_at_the_timeout(self) -> None:
        def slow_request(*args, **kwargs) -> requests.Response:
            time.sleep(0.5)
            return _response(200, "late body")

        session = MagicMock()
        session.request.side_effect = slow_request
        transport = Transport(
            "test-token",
            rate_limiter=RateLimiter(1000.0, sleep=_no_sleep),
            timeout=0.1,
            session=session,
        )

        async def scenario() -> float:
            start = time.monotonic()
            with pytest.raises(TransportError, match="timed out after 0.1s"):
                await transport.get("/search/query")
            return time.monotonic() - start

        assert asyncio.run(scenario()) < 0.4

    def test_quota_headers_feed_the_limiter_even_on_error(self) -> None:
        session = MagicMock()
        session.request.return_value = _response(
            500, "oops", {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "4102444800"}
        )
        limiter = RateLimiter(1000.0, sleep=_no_sleep)
        transport = _transport(session, limiter)

        with pytest.raises(UpstreamError):
            asyncio.run(transport.get("/search/query"))

        assert limiter._server_remaining == 0
        assert limiter._server_reset is not None

    def test_acquire_is_called_before_each_request(self) -> None:
        session = MagicMock()
        session.request.return_value = _response(200, "{}")
        calls: list[str] = []

        class RecordingLimiter(RateLimiter):
            async def acquire(self) -> None:
                calls.append("acquire")
                await super().acquire()

        transport = _transport(session, RecordingLimiter(1000.0, sleep=_no_sleep))

        async def scenario() -> None:
            await transport.get("/a")
            await transport.get("/b")

        asyncio.run(scenario())

        assert calls == ["acquire", "acquire"]

    def test_empty_token_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            Transport("")

    def test_each_worker_thread_gets_its_own_session(self) -> None:
        transport = Transport("test-token")
        seen: list[requests.Session] = []

        def grab() -> None:
            seen.append(transport._thread_session())
            seen.append(transport._thread_session())

        workers = [threading.Thread(target=grab) for _ in range(2)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        assert seen[0] is seen[1]
        assert seen[2] is seen[3]
        assert seen[0] is not seen[2]
        transport.close()
        assert transport._sessions == []

    def test_injected_session_is_shared_and_closed(self) -> None:
        session = MagicMock()
        transport = _transport(session)

        assert transport._thread_session() is session
        transport.close()
        session.close.assert_called_once_with()

    def test_trailing_slash_stripped_from_base_url(self) -> None:
        transport = _transport(MagicMock())
        assert transport.base_url == "https://api.example.org/v1"
