"""Constants and defaults for the SciX client."""

from scix.version import __version__

DEFAULT_BASE_URL = "https://api.adsabs.harvard.edu/v1"
USER_AGENT = f"scix-client/{__version__}"

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RATE_LIMIT = 5.0  # requests per second

# Response headers carrying the server-side quota window.
RATE_LIMIT_REMAINING_HEADER = "x-ratelimit-remaining"
RATE_LIMIT_RESET_HEADER = "x-ratelimit-reset"
RETRY_AFTER_HEADER = "retry-after"

DEFAULT_SEARCH_FIELDS = (
    "bibcode,title,author,year,pub,abstract,doi,identifier,doctype,esources,citation_count,property"
)
# Single-paper detail view.
RICH_FIELDS = (
    "bibcode,title,author,year,pub,abstract,doi,identifier,doctype,esources,"
    "citation_count,property,read_count,volume,page,keyword,aff"
)
DEFAULT_SORT = "date desc"
DEFAULT_ADD_BY_QUERY_ROWS = 50

ABSTRACT_URL_TEMPLATE = "https://scixplorer.org/abs/{bibcode}"
