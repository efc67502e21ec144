"""Fluent builder for ADS query strings.

    >>> QueryBuilder().author("Einstein").and_().year_range(1905, 1910).build()
    'author:"Einstein" AND year:[1905 TO 1910]'
"""

from __future__ import annotations


class QueryBuilder:
    def __init__(self) -> None:
        self._parts: list[str] = []

    def _push(self, part: str) -> QueryBuilder:
        self._parts.append(part)
        return self

    def author(self, name: str) -> QueryBuilder:
        return self._push(f'author:"{name}"')

    def first_author(self, name: str) -> QueryBuilder:
        return self._push(f'first_author:"{name}"')

    def title(self, text: str) -> QueryBuilder:
        return self._push(f'title:"{text}"')

    def abstract_contains(self, text: str) -> QueryBuilder:
        return self._push(f'abs:"{text}"')

    def year(self, year: int) -> QueryBuilder:
        return self._push(f"year:{year}")

    def year_range(self, start: int, end: int) -> QueryBuilder:
        """Inclusive year range."""
        return self._push(f"year:[{start} TO {end}]")

    def bibcode(self, bibcode: str) -> QueryBuilder:
        return self._push(f"bibcode:{bibcode}")

    def doi(self, doi: str) -> QueryBuilder:
        return self._push(f'doi:"{doi}"')

    def arxiv(self, arxiv_id: str) -> QueryBuilder:
        return self._push(f"identifier:arXiv:{arxiv_id}")

    def object(self, name: str) -> QueryBuilder:
        return self._push(f'object:"{name}"')

    def bibstem(self, stem: str) -> QueryBuilder:
        return self._push(f"bibstem:{stem}")

    def property(self, prop: str) -> QueryBuilder:
        return self._push(f"property:{prop}")

    def doctype(self, doctype: str) -> QueryBuilder:
        return self._push(f"doctype:{doctype}")

    def orcid(self, orcid: str) -> QueryBuilder:
        return self._push(f"orcid:{orcid}")

    def and_(self) -> QueryBuilder:
        return self._push("AND")

    def or_(self) -> QueryBuilder:
        return self._push("OR")

    def exclude(self) -> QueryBuilder:
        """Negate the term that follows."""
        return self._push("NOT")

    def raw(self, fragment: str) -> QueryBuilder:
        """Append a fragment verbatim."""
        return self._push(fragment)

    @classmethod
    def citations_of(cls, bibcode: str) -> QueryBuilder:
        return cls()._push(f"citations(bibcode:{bibcode})")

    @classmethod
    def references_of(cls, bibcode: str) -> QueryBuilder:
        return cls()._push(f"references(bibcode:{bibcode})")

    @classmethod
    def similar_to(cls, bibcode: str) -> QueryBuilder:
        return cls()._push(f"similar(bibcode:{bibcode})")

    @classmethod
    def trending(cls, bibcode: str) -> QueryBuilder:
        return cls()._push(f"trending(bibcode:{bibcode})")

    def build(self) -> str:
        return " ".join(self._parts)

    def __str__(self) -> str:
        return self.build()
