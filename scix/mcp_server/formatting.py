"""Text renderings of gateway results for tool responses."""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

from scix.core.types import Paper, SearchResponse


def _author_summary(paper: Paper) -> str:
    if len(paper.authors) > 3:
        return f"{paper.authors[0].family_name} et al."
    return ", ".join(author.family_name for author in paper.authors)


def _year(paper: Paper) -> str:
    return str(paper.year) if paper.year is not None else ""


def format_search_results(results: SearchResponse, start: int = 0) -> str:
    """Numbered listing, with a pagination hint when more results exist."""
    lines = [f"Found {results.num_found} results:\n\n"]
    for offset, paper in enumerate(results.papers):
        lines.append(
            f"{start + offset + 1}. {paper.title} ({_year(paper)})\n"
            f"   {_author_summary(paper)}\n"
            f"   Bibcode: {paper.bibcode}\n"
        )
        if paper.doi:
            lines.append(f"   DOI: {paper.doi}\n")
        if paper.citation_count is not None:
            lines.append(f"   Citations: {paper.citation_count}\n")
        lines.append("\n")

    shown = start + len(results.papers)
    if results.num_found > shown:
        lines.append(f"*Use start={shown} to see more results*\n")
    return "".join(lines)


def format_paper_detail(paper: Paper) -> str:
    """Markdown card for a single paper."""
    names = [author.name for author in paper.authors]
    if len(names) > 10:
        authors = f"{'; '.join(names[:5])} ... and {len(names) - 5} more"
    else:
        authors = "; ".join(names)

    out = [f"# {paper.title}\n\n", f"**Authors:** {authors}\n", f"**Year:** {_year(paper)}\n"]
    if paper.publication:
        out.append(f"**Publication:** {paper.publication}\n")
    if paper.doctype:
        out.append(f"**Type:** {paper.doctype}\n")
    out.append(f"**Bibcode:** {paper.bibcode}\n")
    if paper.doi:
        out.append(f"**DOI:** {paper.doi}\n")
    if paper.arxiv_id:
        out.append(f"**arXiv:** {paper.arxiv_id}\n")
    if paper.citation_count is not None:
        out.append(f"**Citations:** {paper.citation_count}\n")
    if paper.properties:
        out.append(f"**Properties:** {', '.join(paper.properties)}\n")

    if paper.abstract:
        out.append(f"\n**Abstract:**\n{paper.abstract}\n")

    if paper.pdf_links:
        out.append("\n**Links:**\n")
        out.extend(f"- [{link.label}]({link.url})\n" for link in paper.pdf_links)

    out.append(f"\n**ADS:** {paper.url}\n")
    return "".join(out)


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def format_json(value: Any) -> str:
    """Pretty-printed JSON (indent 2); dataclass records are expanded."""
    return json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False, default=_json_default)
