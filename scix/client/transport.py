"""Authenticated HTTP transport for the SciX API.

Every request is admitted by the shared ``RateLimiter`` first, and every
response (whatever its status) feeds its quota headers back into it.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from typing import Any

import requests

from scix.core.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    RETRY_AFTER_HEADER,
    USER_AGENT,
)
from scix.core.errors import (
    ConfigurationError,
    NotFoundError,
    RateLimitedError,
    TransportError,
    UnauthorizedError,
    UpstreamError,
)
from scix.core.rate_limit import RateLimiter, header_value

_log = logging.getLogger("scix.transport")


def _parse_retry_after(headers: Mapping[str, str]) -> float | None:
    value = header_value(headers, RETRY_AFTER_HEADER)
    if value is None:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    return float(seconds) if seconds >= 0 else None


def classify_response(status: int, headers: Mapping[str, str], text: str) -> str:
    """Return the body for 2xx statuses, otherwise raise the matching error."""
    if 200 <= status <= 299:
        return text
    if status == 401:
        raise UnauthorizedError()
    if status == 404:
        raise NotFoundError()
    if status == 429:
        raise RateLimitedError(_parse_retry_after(headers))
    raise UpstreamError(status, text)


class Transport:
    """Issues one authenticated HTTP call per admitted request. No retries."""

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        rate_limiter: RateLimiter | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        if not isinstance(api_token, str) or not api_token:
            raise ConfigurationError("API token must be a non-empty string")
        self._api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
        self.timeout = timeout
        # requests.Session is not thread-safe: unless one is injected, each
        # worker thread gets its own.
        self._session = session
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

    def _thread_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        return self._thread_session().request(method, url, **kwargs)

    def _headers(self, content_type: str | None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_token}",
            "User-Agent": USER_AGENT,
        }
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    async def execute(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        text_body: str | None = None,
        content_type: str | None = None,
    ) -> str:
        """Perform one request and return the 2xx body text.

        Raises a ``SciXError`` subclass for every other outcome.
        """
        await self.rate_limiter.acquire()

        url = f"{self.base_url}{path}"
        request_kwargs: dict[str, Any] = {
            "headers": self._headers(content_type),
            "timeout": self.timeout,
        }
        if params:
            request_kwargs["params"] = dict(params)
        if json_body is not None:
            request_kwargs["json"] = json_body
        if text_body is not None:
            request_kwargs["data"] = text_body.encode("utf-8")

        _log.debug("http_request method=%s path=%s", method, path, extra={"method": method, "path": path})
        try:
            # requests' timeout bounds each socket read; wait_for bounds the whole call.
            response = await asyncio.wait_for(
                asyncio.to_thread(self._send, method, url, **request_kwargs), self.timeout
            )
        except asyncio.TimeoutError as e:
            _log.warning(
                "http_timeout method=%s path=%s timeout=%s",
                method,
                path,
                self.timeout,
                extra={"method": method, "path": path, "timeout": self.timeout},
            )
            raise TransportError(f"request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            _log.warning(
                "http_transport_error method=%s path=%s error=%s",
                method,
                path,
                e,
                extra={"method": method, "path": path, "error": str(e)},
            )
            raise TransportError(str(e)) from e

        await self.rate_limiter.observe(response.headers)
        _log.debug(
            "http_response method=%s path=%s status=%s",
            method,
            path,
            response.status_code,
            extra={"method": method, "path": path, "status": response.status_code},
        )
        return classify_response(response.status_code, response.headers, response.text)

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> str:
        return await self.execute("GET", path, params=params)

    async def post_json(self, path: str, body: Any) -> str:
        return await self.execute("POST", path, json_body=body)

    async def post_text(self, path: str, body: str, content_type: str = "text/plain") -> str:
        return await self.execute("POST", path, text_body=body, content_type=content_type)

    async def put_json(self, path: str, body: Any) -> str:
        return await self.execute("PUT", path, json_body=body)

    async def delete(self, path: str) -> str:
        return await self.execute("DELETE", path)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
