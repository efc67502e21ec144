"""Parsers turning raw SciX API JSON into record types."""

from __future__ import annotations

import json
import re
from typing import Any

from scix.core.constants import ABSTRACT_URL_TEMPLATE
from scix.core.errors import MalformedResponseError
from scix.core.types import (
    Author,
    BasicStats,
    BasicStatsEntry,
    CitationStats,
    CitationStatsEntry,
    Indicators,
    Metrics,
    Paper,
    PdfLink,
    ResolvedReference,
    SearchResponse,
)

# YYMM.NNNN or YYMM.NNNNN with an optional version suffix.
_NEW_ARXIV_ID = re.compile(r"^\d{4}\.\d{4,5}(v\d+)?$")
_ASCII_DIGITS = re.compile(r"[0-9]+")


def load_json(body: str, what: str) -> Any:
    """Decode a response body, classifying failures as malformed responses."""
    try:
        return json.loads(body)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Invalid {what} response: {e}") from e


def load_json_object(body: str, what: str) -> dict[str, Any]:
    parsed = load_json(body, what)
    if not isinstance(parsed, dict):
        raise MalformedResponseError(f"Invalid {what} response: expected a JSON object")
    return parsed


def _first(values: Any) -> str | None:
    if isinstance(values, list) and values and isinstance(values[0], str):
        return values[0]
    return None


def _string_list(values: Any) -> list[str]:
    if not isinstance(values, list):
        return []
    return [v for v in values if isinstance(v, str)]


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _parse_year(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _ASCII_DIGITS.fullmatch(value.strip()):
        return int(value.strip())
    return None


def _optional_count(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return max(value, 0)


def extract_arxiv_id(identifiers: list[str]) -> str | None:
    """Pick the arXiv id out of an ADS identifier list.

    Accepts ``arXiv:``-prefixed ids (old and new style) and bare new-style
    ids. DOIs and bibcodes never match.
    """
    for identifier in identifiers:
        if identifier.startswith("arXiv:"):
            return identifier[len("arXiv:") :]
        if _NEW_ARXIV_ID.match(identifier):
            return identifier
    return None


def document_to_paper(doc: dict[str, Any]) -> Paper | None:
    """Convert one search document; returns None for untitled documents."""
    bibcode = doc.get("bibcode")
    if not isinstance(bibcode, str):
        return None
    title = _first(doc.get("title")) or ""
    if not title:
        return None

    doi = _first(doc.get("doi"))
    identifiers = _string_list(doc.get("identifier"))
    arxiv_id = extract_arxiv_id(identifiers)
    esources = _string_list(doc.get("esources"))
    volume = doc.get("volume")
    page = doc.get("page")

    return Paper(
        bibcode=bibcode,
        title=title,
        url=ABSTRACT_URL_TEMPLATE.format(bibcode=bibcode),
        authors=[Author.from_ads_format(name) for name in _string_list(doc.get("author"))],
        year=_parse_year(doc.get("year")),
        publication=_optional_str(doc.get("pub")),
        abstract=_optional_str(doc.get("abstract")),
        doi=doi,
        arxiv_id=arxiv_id,
        identifiers=identifiers,
        esources=esources,
        citation_count=_optional_count(doc.get("citation_count")),
        doctype=_optional_str(doc.get("doctype")),
        properties=_string_list(doc.get("property")),
        keywords=_string_list(doc.get("keyword")),
        volume=_optional_str(volume),
        page=_first(page) if isinstance(page, list) else _optional_str(page),
        read_count=_optional_count(doc.get("read_count")),
        pdf_links=PdfLink.from_esources(esources, doi, arxiv_id, bibcode),
    )


def parse_search_response(body: str) -> SearchResponse:
    """Parse a ``/search/query`` (or bigquery) response body."""
    parsed = load_json_object(body, "search")
    response = parsed.get("response")
    if not isinstance(response, dict) or not isinstance(response.get("docs"), list):
        raise MalformedResponseError("Invalid search response: missing response.docs")

    papers = []
    for doc in response["docs"]:
        if isinstance(doc, dict):
            paper = document_to_paper(doc)
            if paper is not None:
                papers.append(paper)

    num_found = response.get("numFound")
    return SearchResponse(
        papers=papers,
        num_found=num_found if isinstance(num_found, int) and num_found >= 0 else 0,
    )


def parse_export_response(body: str) -> str:
    parsed = load_json_object(body, "export")
    export = parsed.get("export")
    if not isinstance(export, str):
        raise MalformedResponseError("Invalid export response: missing 'export' text")
    return export


def _normalize_keys(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    return {str(k).strip().lower().replace(" ", "_").replace("-", "_"): v for k, v in data.items()}


def _number(value: Any) -> int | float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _entry(cls: type, data: Any) -> Any:
    values = _normalize_keys(data)
    if not values:
        return None
    return cls(**{name: _number(values.get(name)) for name in cls.__dataclass_fields__})


def _section(data: dict[str, Any], name: str, entry_cls: type) -> tuple[Any, Any] | None:
    """Return (refereed, total) entries for a metrics section.

    Handles both ``{"basic_stats": {"total": ..., "refereed": ...}}`` and the
    API's flat ``{"basic stats": ..., "basic stats refereed": ...}`` layout.
    """
    nested = _normalize_keys(data.get(name))
    if "total" in nested or "refereed" in nested:
        return _entry(entry_cls, nested.get("refereed")), _entry(entry_cls, nested.get("total"))
    total = _entry(entry_cls, data.get(name))
    refereed = _entry(entry_cls, data.get(f"{name}_refereed"))
    if total is None and refereed is None:
        return None
    return refereed, total


def parse_metrics_response(body: str) -> Metrics:
    data = _normalize_keys(load_json_object(body, "metrics"))
    metrics = Metrics()

    basic = _section(data, "basic_stats", BasicStatsEntry)
    if basic is not None:
        metrics.basic_stats = BasicStats(refereed=basic[0], total=basic[1])

    citations = _section(data, "citation_stats", CitationStatsEntry)
    if citations is not None:
        metrics.citation_stats = CitationStats(refereed=citations[0], total=citations[1])

    indicators = _normalize_keys(data.get("indicators"))
    if indicators:
        metrics.indicators = _entry(Indicators, indicators)
    return metrics


def parse_reference_response(body: str, references: list[str]) -> list[ResolvedReference]:
    """Pair each resolved entry with the reference string sent at its position."""
    parsed = load_json_object(body, "reference")
    resolved = parsed.get("resolved")
    entries = resolved if isinstance(resolved, list) else []

    results = []
    for entry, reference in zip(entries, references):
        entry = entry if isinstance(entry, dict) else {}
        score = entry.get("score")
        if isinstance(score, (int, float)) and not isinstance(score, bool):
            score = str(score)
        results.append(
            ResolvedReference(
                reference=reference,
                bibcode=_optional_str(entry.get("bibcode")),
                score=_optional_str(score),
            )
        )
    return results
