"""Public record types returned by the SciX client."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


@dataclass
class Author:
    """An author of a paper."""

    name: str
    family_name: str
    given_name: str | None = None

    @classmethod
    def from_ads_format(cls, name: str) -> Author:
        """Parse an ADS author string ("Last, First M.")."""
        if "," in name:
            family, given = name.split(",", 1)
            return cls(name=name, family_name=family.strip(), given_name=given.strip())
        words = name.split()
        if len(words) > 1:
            return cls(name=name, family_name=words[-1], given_name=" ".join(words[:-1]))
        return cls(name=name, family_name=name)

    def display_name(self) -> str:
        """Format as "First M. Last"."""
        if self.given_name:
            return f"{self.given_name} {self.family_name}"
        return self.family_name

    def bibtex_name(self) -> str:
        """Format as "Last, First M."."""
        if self.given_name:
            return f"{self.family_name}, {self.given_name}"
        return self.family_name


class PdfLinkType(str, Enum):
    ARXIV = "arxiv"
    PUBLISHER = "publisher"
    ADS_SCAN = "ads_scan"
    DIRECT = "direct"


@dataclass
class PdfLink:
    url: str
    link_type: PdfLinkType
    label: str

    @staticmethod
    def _arxiv(arxiv_id: str) -> PdfLink:
        return PdfLink(f"https://arxiv.org/pdf/{arxiv_id}.pdf", PdfLinkType.ARXIV, "arXiv PDF")

    @staticmethod
    def _publisher(doi: str) -> PdfLink:
        return PdfLink(f"https://doi.org/{doi}", PdfLinkType.PUBLISHER, "Publisher")

    @classmethod
    def from_esources(
        cls,
        esources: list[str],
        doi: str | None,
        arxiv_id: str | None,
        bibcode: str,
    ) -> list[PdfLink]:
        """Build PDF links ordered by the esource flags, then fallbacks.

        arXiv and DOI links are appended as fallbacks when no matching
        esource flag produced them.
        """
        links: list[PdfLink] = []
        has_preprint = False
        has_publisher = False

        for esource in esources:
            flag = esource.upper()
            if flag == "EPRINT_PDF":
                if arxiv_id:
                    links.append(cls._arxiv(arxiv_id))
                    has_preprint = True
            elif flag in ("PUB_PDF", "PUB_HTML"):
                if doi:
                    links.append(cls._publisher(doi))
                    has_publisher = True
            elif flag in ("ADS_PDF", "ADS_SCAN"):
                links.append(
                    cls(
                        f"https://articles.adsabs.harvard.edu/pdf/{bibcode}",
                        PdfLinkType.ADS_SCAN,
                        "ADS Scan",
                    )
                )

        if not has_preprint and arxiv_id:
            links.append(cls._arxiv(arxiv_id))
        if not has_publisher and doi:
            links.append(cls._publisher(doi))
        return links


@dataclass
class Paper:
    bibcode: str
    title: str
    url: str
    authors: list[Author] = field(default_factory=list)
    year: int | None = None
    publication: str | None = None
    abstract: str | None = None
    doi: str | None = None
    arxiv_id: str | None = None
    identifiers: list[str] = field(default_factory=list)
    esources: list[str] = field(default_factory=list)
    citation_count: int | None = None
    doctype: str | None = None
    properties: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    volume: str | None = None
    page: str | None = None
    read_count: int | None = None
    pdf_links: list[PdfLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SearchResponse:
    papers: list[Paper]
    num_found: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"num_found": self.num_found, "papers": [p.to_dict() for p in self.papers]}


class ExportFormat(str, Enum):
    """Citation export formats supported by the export endpoint."""

    BIBTEX = "bibtex"
    BIBTEX_ABS = "bibtexabs"
    AASTEX = "aastex"
    ICARUS = "icarus"
    MNRAS = "mnras"
    SOPH = "soph"
    RIS = "ris"
    ENDNOTE = "endnote"
    MEDLARS = "medlars"
    IEEE = "ieee"
    CSL = "csl"
    DCXML = "dcxml"
    REFXML = "refxml"
    REFABSXML = "refabsxml"
    VOTABLE = "votable"
    RSS = "rss"
    CUSTOM = "custom"

    @classmethod
    def from_str_loose(cls, value: str) -> ExportFormat | None:
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Sort:
    field: str
    direction: SortDirection = SortDirection.DESC

    @classmethod
    def parse(cls, value: str) -> Sort:
        """Parse "field [asc|desc]"; anything but "asc" sorts descending."""
        parts = value.split()
        field_name = parts[0] if parts else "date"
        direction = SortDirection.ASC if parts[1:2] == ["asc"] else SortDirection.DESC
        return cls(field_name, direction)

    @classmethod
    def date_desc(cls) -> Sort:
        return cls("date")

    @classmethod
    def citation_count_desc(cls) -> Sort:
        return cls("citation_count")

    @classmethod
    def score_desc(cls) -> Sort:
        return cls("score")

    def __str__(self) -> str:
        return f"{self.field} {self.direction.value}"


@dataclass
class BasicStatsEntry:
    number_of_papers: int | None = None
    normalized_paper_count: float | None = None
    total_citations: int | None = None
    total_normalized_citations: float | None = None
    median_refereed_citations: float | None = None
    mean_refereed_citations: float | None = None


@dataclass
class BasicStats:
    refereed: BasicStatsEntry | None = None
    total: BasicStatsEntry | None = None


@dataclass
class CitationStatsEntry:
    number_of_citing_papers: int | None = None
    total_citations: int | None = None
    number_of_self_citations: int | None = None
    average_citations: float | None = None
    normalized_citations: float | None = None


@dataclass
class CitationStats:
    refereed: CitationStatsEntry | None = None
    total: CitationStatsEntry | None = None


@dataclass
class Indicators:
    h: int | None = None
    g: int | None = None
    i10: int | None = None
    i100: int | None = None
    m: float | None = None
    tori: float | None = None
    riq: int | None = None
    read10: float | None = None


@dataclass
class Metrics:
    """Citation metrics for a set of papers."""

    basic_stats: BasicStats | None = None
    citation_stats: CitationStats | None = None
    indicators: Indicators | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Library:
    id: str
    name: str = ""
    description: str = ""
    num_documents: int = 0
    public: bool = False
    owner: str = ""
    date_created: str = ""
    date_last_modified: str = ""

    @classmethod
    def from_api(cls, library_id: str, data: dict[str, Any]) -> Library:
        def text(key: str) -> str:
            value = data.get(key)
            return value if isinstance(value, str) else ""

        num_documents = data.get("num_documents")
        return cls(
            id=library_id,
            name=text("name"),
            description=text("description"),
            num_documents=num_documents if isinstance(num_documents, int) else 0,
            public=data.get("public") is True,
            owner=text("owner"),
            date_created=text("date_created"),
            date_last_modified=text("date_last_modified"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class LibraryDetail:
    metadata: Library
    documents: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ResolvedReference:
    """A free-text reference and the bibcode it resolved to, if any."""

    reference: str
    bibcode: str | None = None
    score: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
