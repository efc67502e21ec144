"""Error taxonomy for SciX API calls.

Every failure surfaced by the client is one of the ``SciXError`` subclasses
below. The set is closed: the transport classifies HTTP outcomes into it and
gateway operations only ever raise these.
"""

from __future__ import annotations


class SciXError(Exception):
    """Base class for classified SciX client failures."""

    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class TransportError(SciXError):
    """The request failed before an HTTP status was received (network, timeout)."""

    kind = "transport"

    def __init__(self, detail: str) -> None:
        super().__init__(f"HTTP request failed: {detail}")
        self.detail = detail


class UnauthorizedError(SciXError):
    """HTTP 401: the bearer token was missing or rejected."""

    kind = "unauthorized"

    def __init__(self) -> None:
        super().__init__(
            "Authentication required: the API rejected the token "
            "(check SCIX_API_TOKEN or ADS_API_TOKEN)"
        )


class NotFoundError(SciXError):
    """HTTP 404, or a lookup that matched nothing."""

    kind = "not_found"

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(f"Not found: {detail}")
        self.detail = detail


class RateLimitedError(SciXError):
    """HTTP 429. ``retry_after`` is in seconds when the server supplied it."""

    kind = "rate_limited"

    def __init__(self, retry_after: float | None = None) -> None:
        if retry_after is None:
            message = "Rate limited, retry after an unspecified delay"
        else:
            message = f"Rate limited, retry after {retry_after:g}s"
        super().__init__(message)
        self.retry_after = retry_after


class MalformedResponseError(SciXError):
    """A 2xx body could not be parsed into the expected shape."""

    kind = "malformed_response"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to parse response: {detail}")
        self.detail = detail


class InvalidInputError(SciXError):
    """Caller-supplied arguments were missing or of the wrong shape."""

    kind = "invalid_input"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid input: {detail}")
        self.detail = detail


class UpstreamError(SciXError):
    """Any other non-2xx status, carrying the raw body."""

    kind = "upstream"

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"API error (HTTP {status}): {body}")
        self.status = status
        self.body = body


class ConfigurationError(SciXError):
    """Local configuration is missing or invalid."""

    kind = "configuration"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Configuration error: {detail}")
        self.detail = detail


__all__ = [
    "SciXError",
    "TransportError",
    "UnauthorizedError",
    "NotFoundError",
    "RateLimitedError",
    "MalformedResponseError",
    "InvalidInputError",
    "UpstreamError",
    "ConfigurationError",
]
