"""Async client for the SciX (NASA ADS) API.

Example::

    client = SciXClient.from_env()
    results = await client.search('author:"Einstein" year:1905', rows=10)
    for paper in results.papers:
        print(paper.title, paper.bibcode)
"""

from __future__ import annotations

from typing import Any

import requests

from scix.client.libraries import LibraryOperations
from scix.client.transport import Transport
from scix.core.config import ClientConfig
from scix.core.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_RATE_LIMIT,
    DEFAULT_SEARCH_FIELDS,
    DEFAULT_SORT,
    DEFAULT_TIMEOUT_SECONDS,
    RICH_FIELDS,
)
from scix.core.errors import NotFoundError
from scix.core.parse import (
    load_json,
    parse_export_response,
    parse_metrics_response,
    parse_reference_response,
    parse_search_response,
)
from scix.core.query import QueryBuilder
from scix.core.rate_limit import RateLimiter
from scix.core.types import ExportFormat, Metrics, Paper, ResolvedReference, SearchResponse, Sort


class SciXClient(LibraryOperations):
    """Gateway operations over a single rate-limited ``Transport``."""

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        rate_limit: float = DEFAULT_RATE_LIMIT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        *,
        transport: Transport | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if transport is None:
            transport = Transport(
                api_token,
                base_url=base_url,
                rate_limiter=RateLimiter(rate_limit),
                timeout=timeout,
                session=session,
            )
        self.transport = transport

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> SciXClient:
        return cls(
            config.api_token,
            base_url=config.base_url,
            rate_limit=config.rate_limit,
            timeout=config.timeout,
            **kwargs,
        )

    @classmethod
    def from_env(cls, token: str | None = None, **kwargs: Any) -> SciXClient:
        """Build a client from SCIX_API_TOKEN (or ADS_API_TOKEN) and SCIX_* settings."""
        return cls.from_config(ClientConfig.from_env(token), **kwargs)

    def close(self) -> None:
        self.transport.close()

    # -- Search and discovery --

    async def search(self, query: str, rows: int = 10) -> SearchResponse:
        """Search with ADS query syntax, e.g. ``author:"Einstein" year:1905``."""
        return await self.search_with_options(query, rows=rows)

    async def search_with_options(
        self,
        query: str,
        fields: str = DEFAULT_SEARCH_FIELDS,
        sort: Sort | str | None = None,
        rows: int = 10,
        start: int = 0,
    ) -> SearchResponse:
        params = {
            "q": query,
            "fl": fields,
            "rows": str(rows),
            "start": str(start),
            "sort": str(sort) if sort is not None else DEFAULT_SORT,
        }
        return parse_search_response(await self.transport.get("/search/query", params))

    async def bigquery(
        self,
        bibcodes: list[str],
        query: str | None = None,
        fields: str | None = None,
        sort: Sort | str | None = None,
        rows: int | None = None,
    ) -> SearchResponse:
        """Search restricted to a known set of bibcodes."""
        q = query or "*:*"
        fl = fields or DEFAULT_SEARCH_FIELDS
        sort_value = str(sort) if sort is not None else DEFAULT_SORT
        rows_value = len(bibcodes) if rows is None else rows
        body = {
            "bibcodes": list(bibcodes),
            "query": f"q={q}&fl={fl}&rows={rows_value}&sort={sort_value}",
        }
        return parse_search_response(await self.transport.post_json("/search/bigquery", body))

    async def references(self, bibcode: str, rows: int = 10) -> SearchResponse:
        return await self.search(QueryBuilder.references_of(bibcode).build(), rows)

    async def citations(self, bibcode: str, rows: int = 10) -> SearchResponse:
        return await self.search(QueryBuilder.citations_of(bibcode).build(), rows)

    async def similar(self, bibcode: str, rows: int = 10) -> SearchResponse:
        return await self.search(QueryBuilder.similar_to(bibcode).build(), rows)

    async def coreads(self, bibcode: str, rows: int = 10) -> SearchResponse:
        """Papers read by the same audience."""
        return await self.search(QueryBuilder.trending(bibcode).build(), rows)

    async def get_paper(self, bibcode: str) -> Paper:
        """Fetch one paper with the extended field set."""
        results = await self.search_with_options(f"identifier:{bibcode}", fields=RICH_FIELDS, rows=1)
        if not results.papers:
            raise NotFoundError(f"Paper not found: {bibcode}")
        return results.papers[0]

    # -- Export and metrics --

    async def export(
        self,
        bibcodes: list[str],
        format: ExportFormat | str = ExportFormat.BIBTEX,
        sort: Sort | str | None = None,
    ) -> str:
        body: dict[str, Any] = {"bibcode": list(bibcodes)}
        if sort is not None:
            body["sort"] = str(sort)
        return parse_export_response(await self.transport.post_json(f"/export/{format}", body))

    async def export_bibtex(self, bibcodes: list[str]) -> str:
        return await self.export(bibcodes, ExportFormat.BIBTEX)

    async def metrics(self, bibcodes: list[str]) -> Metrics:
        """h-index, g-index, citation counts and related indicators."""
        body = {"bibcodes": list(bibcodes), "types": ["basic", "citations", "indicators"]}
        return parse_metrics_response(await self.transport.post_json("/metrics", body))

    # -- Lookups --

    async def resolve_links(self, bibcode: str, link_type: str | None = None) -> Any:
        """Resolve links for a paper.

        ``link_type`` is one of "esource", "data", "citation", "reference",
        "coreads", or None for every link type.
        """
        path = f"/resolver/{bibcode}/{link_type}" if link_type else f"/resolver/{bibcode}"
        return load_json(await self.transport.get(path), "links")

    async def resolve_objects(self, objects: list[str]) -> Any:
        """Map object names (M31, NGC 1234, ...) to bibcodes via SIMBAD/NED."""
        body = {"query": [f'object:"{name}"' for name in objects]}
        return load_json(await self.transport.post_json("/objects", body), "objects")

    async def author_network(self, bibcodes: list[str]) -> Any:
        body = {"bibcodes": list(bibcodes), "types": ["author"]}
        return load_json(await self.transport.post_json("/vis/author-network", body), "network")

    async def paper_network(self, bibcodes: list[str]) -> Any:
        body = {"bibcodes": list(bibcodes), "types": ["paper"]}
        return load_json(await self.transport.post_json("/vis/paper-network", body), "network")

    async def citation_helper(self, bibcodes: list[str]) -> Any:
        """Papers frequently co-cited with the given set but not in it."""
        return load_json(
            await self.transport.post_json("/citation_helper", {"bibcodes": list(bibcodes)}),
            "citation helper",
        )

    async def resolve_references(self, references: list[str]) -> list[ResolvedReference]:
        """Resolve free-text citations to bibcodes."""
        body = await self.transport.post_text("/reference/text", "\n".join(references))
        return parse_reference_response(body, list(references))
