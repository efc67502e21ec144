"""Request admission control for SciX API calls.

Combines a fixed local ceiling (minimum spacing between requests) with the
quota window the server reports in ``X-RateLimit-*`` headers.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping

from scix.core.constants import (
    DEFAULT_RATE_LIMIT,
    RATE_LIMIT_REMAINING_HEADER,
    RATE_LIMIT_RESET_HEADER,
)
from scix.core.errors import ConfigurationError

_log = logging.getLogger("scix.rate_limit")


def header_value(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup that also works on plain dicts."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def _parse_non_negative_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        parsed = int(value.strip())
    except ValueError:
        return None
    return parsed if parsed >= 0 else None


class RateLimiter:
    """Serializes request admission under a local and a server-reported quota.

    All state lives behind a single ``asyncio.Lock``. A caller computes its
    wait under the lock, releases it, sleeps, then reacquires to re-check and
    commit, so concurrent callers never queue behind each other's sleeps.
    """

    def __init__(
        self,
        max_per_second: float = DEFAULT_RATE_LIMIT,
        *,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_per_second <= 0:
            raise ConfigurationError(f"rate limit must be > 0, got {max_per_second}")
        self._max_per_second = float(max_per_second)
        self._min_interval = 1.0 / self._max_per_second
        self._clock = clock
        self._wall_clock = wall_clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_request: float | None = None
        self._server_remaining: int | None = None
        self._server_reset: float | None = None

    @property
    def max_per_second(self) -> float:
        return self._max_per_second

    def _server_wait(self, now: float) -> float:
        if self._server_remaining != 0 or self._server_reset is None:
            return 0.0
        return max(0.0, self._server_reset - now)

    def _spacing_wait(self, now: float) -> float:
        if self._last_request is None:
            return 0.0
        return max(0.0, self._min_interval - (now - self._last_request))

    async def acquire(self) -> None:
        """Wait until a request may be sent, then record it as sent."""
        while True:
            async with self._lock:
                now = self._clock()
                wait = self._server_wait(now)
                reason = "server_quota"
                if wait <= 0:
                    wait = self._spacing_wait(now)
                    reason = "local_spacing"
                if wait <= 0:
                    self._last_request = now
                    return
            _log.debug(
                "rate_limit_wait reason=%s wait=%.3f",
                reason,
                wait,
                extra={"reason": reason, "wait_seconds": wait},
            )
            await self._sleep(wait)

    async def observe(self, headers: Mapping[str, str]) -> None:
        """Update the server quota window from response headers.

        Missing or unparseable fields leave the previous values in place.
        """
        remaining = _parse_non_negative_int(header_value(headers, RATE_LIMIT_REMAINING_HEADER))
        reset_unix = _parse_non_negative_int(header_value(headers, RATE_LIMIT_RESET_HEADER))

        async with self._lock:
            if remaining is not None:
                self._server_remaining = remaining
            if reset_unix is not None:
                delta = reset_unix - self._wall_clock()
                if delta > 0:
                    self._server_reset = self._clock() + delta
            if remaining == 0:
                _log.info(
                    "server_quota_exhausted reset_in=%.1f",
                    max(0.0, (self._server_reset or self._clock()) - self._clock()),
                    extra={"server_remaining": remaining},
                )
