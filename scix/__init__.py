"""Client for the SciX (NASA ADS) bibliographic API, with an MCP server."""

from scix.client.client import SciXClient
from scix.core.config import ClientConfig
from scix.core.errors import (
    ConfigurationError,
    InvalidInputError,
    MalformedResponseError,
    NotFoundError,
    RateLimitedError,
    SciXError,
    TransportError,
    UnauthorizedError,
    UpstreamError,
)
from scix.core.query import QueryBuilder
from scix.core.rate_limit import RateLimiter
from scix.core.types import (
    Author,
    ExportFormat,
    Library,
    LibraryDetail,
    Metrics,
    Paper,
    PdfLink,
    ResolvedReference,
    SearchResponse,
    Sort,
    SortDirection,
)
from scix.version import __version__

__all__ = [
    "__version__",
    "SciXClient",
    "ClientConfig",
    "RateLimiter",
    "QueryBuilder",
    "Author",
    "ExportFormat",
    "Library",
    "LibraryDetail",
    "Metrics",
    "Paper",
    "PdfLink",
    "ResolvedReference",
    "SearchResponse",
    "Sort",
    "SortDirection",
    "SciXError",
    "ConfigurationError",
    "InvalidInputError",
    "MalformedResponseError",
    "NotFoundError",
    "RateLimitedError",
    "TransportError",
    "UnauthorizedError",
    "UpstreamError",
]
