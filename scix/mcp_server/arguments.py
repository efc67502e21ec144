"""Typed tool arguments, validated before any outbound call."""

from dataclasses import dataclass
from typing import Any

from scix.core.constants import DEFAULT_SEARCH_FIELDS
from scix.core.errors import InvalidInputError
from scix.core.types import ExportFormat, Sort
from scix.mcp_server.constants import (
    DEFAULT_NETWORK_TYPE,
    DEFAULT_SEARCH_ROWS,
    DOCUMENT_ACTIONS,
    LIBRARY_ACTIONS,
    NETWORK_TYPES,
    PERMISSION_LEVELS,
)


def _require_str(arguments: dict[str, Any], key: str, message: str | None = None) -> str:
    value = arguments.get(key)
    if value is None:
        raise InvalidInputError(message or f"'{key}' required")
    if not isinstance(value, str):
        raise InvalidInputError(f"'{key}' must be a string")
    return value


def _optional_str(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"'{key}' must be a string")
    return value


def _string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidInputError(f"'{key}' must be an array of strings")
    return list(value)


def _require_str_list(arguments: dict[str, Any], key: str) -> list[str]:
    value = arguments.get(key)
    if value is None:
        raise InvalidInputError(f"'{key}' array required")
    return _string_list(value, key)


def _optional_str_list(arguments: dict[str, Any], key: str) -> list[str] | None:
    value = arguments.get(key)
    return None if value is None else _string_list(value, key)


def _optional_count(arguments: dict[str, Any], key: str) -> int | None:
    value = arguments.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInputError(f"'{key}' must be a non-negative integer")
    return value


def _optional_bool(arguments: dict[str, Any], key: str) -> bool | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise InvalidInputError(f"'{key}' must be a boolean")
    return value


@dataclass(frozen=True)
class SearchArgs:
    query: str
    rows: int = DEFAULT_SEARCH_ROWS
    start: int = 0
    sort: Sort | None = None
    fields: str = DEFAULT_SEARCH_FIELDS

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "SearchArgs":
        query = _require_str(arguments, "query", "'query' parameter required")
        rows = _optional_count(arguments, "rows")
        start = _optional_count(arguments, "start")
        sort = _optional_str(arguments, "sort")
        fields = _optional_str(arguments, "fields")
        return cls(
            query=query,
            rows=DEFAULT_SEARCH_ROWS if rows is None else rows,
            start=0 if start is None else start,
            sort=Sort.parse(sort) if sort is not None else None,
            fields=fields or DEFAULT_SEARCH_FIELDS,
        )


@dataclass(frozen=True)
class BigqueryArgs:
    bibcodes: list[str]
    query: str | None = None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "BigqueryArgs":
        return cls(
            bibcodes=_require_str_list(arguments, "bibcodes"),
            query=_optional_str(arguments, "query"),
        )


@dataclass(frozen=True)
class ExportArgs:
    bibcodes: list[str]
    format: ExportFormat = ExportFormat.BIBTEX

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "ExportArgs":
        bibcodes = _require_str_list(arguments, "bibcodes")
        format_name = _optional_str(arguments, "format")
        # Unrecognized format names fall back to BibTeX.
        export_format = ExportFormat.from_str_loose(format_name) if format_name else None
        return cls(bibcodes=bibcodes, format=export_format or ExportFormat.BIBTEX)


@dataclass(frozen=True)
class StringListArgs:
    """A single required string array, e.g. ``bibcodes`` or ``objects``."""

    values: list[str]

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any], key: str) -> "StringListArgs":
        return cls(values=_require_str_list(arguments, key))


@dataclass(frozen=True)
class NetworkArgs:
    bibcodes: list[str]
    network_type: str = DEFAULT_NETWORK_TYPE

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "NetworkArgs":
        bibcodes = _require_str_list(arguments, "bibcodes")
        network_type = _optional_str(arguments, "type") or DEFAULT_NETWORK_TYPE
        if network_type not in NETWORK_TYPES:
            raise InvalidInputError(f"Unknown network type: {network_type}")
        return cls(bibcodes=bibcodes, network_type=network_type)


@dataclass(frozen=True)
class LinksArgs:
    bibcode: str
    link_type: str | None = None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "LinksArgs":
        return cls(
            bibcode=_require_str(arguments, "bibcode"),
            link_type=_optional_str(arguments, "link_type") or None,
        )


@dataclass(frozen=True)
class PaperArgs:
    bibcode: str

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "PaperArgs":
        return cls(bibcode=_require_str(arguments, "bibcode"))


@dataclass(frozen=True)
class LibraryArgs:
    action: str
    id: str | None = None
    name: str | None = None
    description: str | None = None
    public: bool | None = None
    email: str | None = None
    permission: str | None = None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "LibraryArgs":
        action = _require_str(arguments, "action", "'action' parameter required")
        if action not in LIBRARY_ACTIONS:
            raise InvalidInputError(f"Unknown library action: {action}")
        permission = _optional_str(arguments, "permission")
        if permission is not None and permission not in PERMISSION_LEVELS:
            raise InvalidInputError(f"Unknown permission level: {permission}")
        return cls(
            action=action,
            id=_optional_str(arguments, "id"),
            name=_optional_str(arguments, "name"),
            description=_optional_str(arguments, "description"),
            public=_optional_bool(arguments, "public"),
            email=_optional_str(arguments, "email"),
            permission=permission,
        )

    def require(self, name: str) -> str:
        """Return a string field the current action needs, or raise."""
        value = getattr(self, name)
        if value is None:
            raise InvalidInputError(f"'{name}' required for {self.action}")
        return value


@dataclass(frozen=True)
class DocumentArgs:
    action: str
    library_id: str
    bibcodes: list[str] | None = None
    bibcode: str | None = None
    content: str | None = None
    libraries: list[str] | None = None
    query: str | None = None
    rows: int | None = None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "DocumentArgs":
        action = _require_str(arguments, "action", "'action' parameter required")
        library_id = _require_str(arguments, "library_id")
        if action not in DOCUMENT_ACTIONS:
            raise InvalidInputError(f"Unknown document action: {action}")
        return cls(
            action=action,
            library_id=library_id,
            bibcodes=_optional_str_list(arguments, "bibcodes"),
            bibcode=_optional_str(arguments, "bibcode"),
            content=_optional_str(arguments, "content"),
            libraries=_optional_str_list(arguments, "libraries"),
            query=_optional_str(arguments, "query"),
            rows=_optional_count(arguments, "rows"),
        )

    def require(self, name: str) -> str:
        value = getattr(self, name)
        if value is None:
            raise InvalidInputError(f"'{name}' required for {self.action}")
        return value

    def require_bibcodes(self) -> list[str]:
        if self.bibcodes is None:
            raise InvalidInputError("'bibcodes' array required")
        return self.bibcodes
