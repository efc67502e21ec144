"""Tests for API response parsing."""

import json

import pytest

from scix.core.errors import MalformedResponseError
from scix.core.parse import (
    extract_arxiv_id,
    parse_export_response,
    parse_metrics_response,
    parse_reference_response,
    parse_search_response,
)
from scix.core.types import PdfLinkType


def _search_body(docs: list[dict], num_found: int | None = None) -> str:
    response: dict = {"docs": docs}
    if num_found is not None:
        response["numFound"] = num_found
    return json.dumps({"response": response})


EINSTEIN_DOC = {
    "bibcode": "1905AnP...322..891E",
    "title": ["Zur Elektrodynamik bewegter Körper"],
    "author": ["Einstein, A."],
    "year": "1905",
    "pub": "Annalen der Physik",
    "doi": ["10.1002/andp.19053221004"],
    "identifier": ["1905AnP...322..891E", "10.1002/andp.19053221004"],
    "citation_count": 1234,
    "esources": ["PUB_PDF", "ADS_SCAN"],
    "property": ["REFEREED", "ARTICLE"],
}


class TestParseSearchResponse:
    def test_parses_document_fields(self) -> None:
        result = parse_search_response(_search_body([EINSTEIN_DOC], num_found=1))

        assert result.num_found == 1
        paper = result.papers[0]
        assert paper.bibcode == "1905AnP...322..891E"
        assert paper.title == "Zur Elektrodynamik bewegter Körper"
        assert paper.year == 1905
        assert paper.authors[0].family_name == "Einstein"
        assert paper.authors[0].given_name == "A."
        assert paper.doi == "10.1002/andp.19053221004"
        assert paper.arxiv_id is None
        assert paper.citation_count == 1234
        assert paper.properties == ["REFEREED", "ARTICLE"]
        assert paper.url == "https://scixplorer.org/abs/1905AnP...322..891E"

    def test_pdf_links_follow_esources(self) -> None:
        paper = parse_search_response(_search_body([EINSTEIN_DOC])).papers[0]

        assert [link.link_type for link in paper.pdf_links] == [
            PdfLinkType.PUBLISHER,
            PdfLinkType.ADS_SCAN,
        ]

    def test_untitled_documents_are_dropped(self) -> None:
        docs = [EINSTEIN_DOC, {"bibcode": "2020xxx", "title": []}, {"bibcode": "2021yyy"}]

        result = parse_search_response(_search_body(docs, num_found=3))

        assert [p.bibcode for p in result.papers] == ["1905AnP...322..891E"]
        assert result.num_found == 3

    def test_integer_year_and_negative_citations(self) -> None:
        doc = {"bibcode": "2020A", "title": ["T"], "year": 2020, "citation_count": -4}

        paper = parse_search_response(_search_body([doc])).papers[0]

        assert paper.year == 2020
        assert paper.citation_count == 0

    @pytest.mark.parametrize("year", ["²", "20²0", "year", ""])
    def test_non_numeric_year_is_dropped(self, year: str) -> None:
        doc = {"bibcode": "2020A", "title": ["T"], "year": year}

        paper = parse_search_response(_search_body([doc])).papers[0]

        assert paper.year is None

    def test_num_found_defaults_to_zero(self) -> None:
        assert parse_search_response(_search_body([])).num_found == 0

    def test_missing_docs_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseError):
            parse_search_response(json.dumps({"response": {}}))

    def test_invalid_json_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseError, match="Invalid search response"):
            parse_search_response("<html>")


class TestExtractArxivId:
    def test_prefixed_identifier(self) -> None:
        assert extract_arxiv_id(["2020ApJ...1A", "arXiv:2301.12345"]) == "2301.12345"

    def test_old_style_prefixed_identifier(self) -> None:
        assert extract_arxiv_id(["arXiv:astro-ph/0501001"]) == "astro-ph/0501001"

    def test_bare_new_style_identifier(self) -> None:
        assert extract_arxiv_id(["1706.03762v5"]) == "1706.03762v5"

    def test_never_matches_doi_or_bibcode(self) -> None:
        assert extract_arxiv_id(["10.1002/andp.19053221004", "1905AnP...322..891E"]) is None


class TestParseOtherResponses:
    def test_export_text(self) -> None:
        body = json.dumps({"msg": "Retrieved 1 abstracts", "export": "@ARTICLE{...}"})
        assert parse_export_response(body) == "@ARTICLE{...}"

    def test_export_without_text_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseError):
            parse_export_response("{}")

    def test_metrics_with_spaced_keys(self) -> None:
        body = json.dumps(
            {
                "basic stats": {"number of papers": 2, "total number of reads": 10},
                "basic stats refereed": {"number of papers": 1},
                "citation stats": {"total number of citations": 7},
                "indicators": {"h": 3, "g": 4, "i10": 1, "tori": 1.5},
            }
        )

        metrics = parse_metrics_response(body)

        assert metrics.basic_stats is not None
        assert metrics.basic_stats.total.number_of_papers == 2
        assert metrics.basic_stats.refereed.number_of_papers == 1
        assert metrics.indicators.h == 3
        assert metrics.indicators.tori == 1.5

    def test_metrics_with_nested_sections(self) -> None:
        body = json.dumps(
            {"basic_stats": {"total": {"number_of_papers": 5}, "refereed": {"number_of_papers": 4}}}
        )

        metrics = parse_metrics_response(body)

        assert metrics.basic_stats.total.number_of_papers == 5
        assert metrics.basic_stats.refereed.number_of_papers == 4
        assert metrics.citation_stats is None
        assert metrics.indicators is None

    def test_references_pair_with_inputs(self) -> None:
        body = json.dumps(
            {"resolved": [{"bibcode": "1905AnP...322..891E", "score": "1.0"}, {"score": 0.2}]}
        )

        resolved = parse_reference_response(body, ["Einstein 1905", "Unknown 1999"])

        assert resolved[0].reference == "Einstein 1905"
        assert resolved[0].bibcode == "1905AnP...322..891E"
        assert resolved[0].score == "1.0"
        assert resolved[1].bibcode is None
        assert resolved[1].score == "0.2"

    def test_references_without_resolved_list(self) -> None:
        assert parse_reference_response("{}", ["a"]) == []
