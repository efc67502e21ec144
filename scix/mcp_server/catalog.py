"""Static tool and resource catalog served by the SciX MCP server."""

from typing import Any

from mcp.types import Tool, ToolAnnotations

from scix.mcp_server.constants import (
    DOCUMENT_ACTIONS,
    LIBRARY_ACTIONS,
    LINK_TYPES,
    NETWORK_TYPES,
    PERMISSION_LEVELS,
)

_READ_ONLY = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}
_MUTATING = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": False,
    "openWorldHint": True,
}


def _string_array(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


_TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": "scix_search",
        "description": (
            "Search the SciX / NASA ADS database. Supports field queries (author, title, "
            "abstract, year, etc.), boolean operators, and functional operators "
            "(citations(), references(), similar()). Returns a numbered text listing."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "ADS query string (e.g., 'author:\"Einstein\" year:1905')",
                },
                "rows": {"type": "integer", "description": "Max results (default 10)", "default": 10},
                "start": {
                    "type": "integer",
                    "description": "Starting index for pagination (default 0)",
                    "default": 0,
                },
                "sort": {
                    "type": "string",
                    "description": "Sort order (e.g., 'date desc', 'citation_count desc')",
                },
                "fields": {"type": "string", "description": "Comma-separated fields to return"},
            },
            "required": ["query"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_bigquery",
        "description": (
            "Search within a set of known bibcodes. Useful for filtering a collection of "
            "papers. Returns a numbered text listing."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "bibcodes": _string_array("List of bibcodes to search within"),
                "query": {"type": "string", "description": "Optional additional query filter"},
            },
            "required": ["bibcodes"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_export",
        "description": (
            "Export papers in citation formats (bibtex, ris, aastex, mnras, ieee, csl, etc.). "
            "Returns the exported text as-is."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "bibcodes": _string_array("Bibcodes to export"),
                "format": {
                    "type": "string",
                    "description": "Export format (bibtex, ris, aastex, mnras, ieee, csl, etc.)",
                    "default": "bibtex",
                },
            },
            "required": ["bibcodes"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_metrics",
        "description": (
            "Get citation metrics (h-index, g-index, citation counts) for a set of papers. "
            "Returns JSON."
        ),
        "input_schema": {
            "type": "object",
            "properties": {"bibcodes": _string_array("Bibcodes to get metrics for")},
            "required": ["bibcodes"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_library",
        "description": (
            "Manage SciX personal libraries (list, get, create, edit, delete, permissions, "
            "transfer). Returns JSON for lookups and a one-line confirmation for changes."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "action": {"type": "string", "enum": list(LIBRARY_ACTIONS)},
                "id": {
                    "type": "string",
                    "description": "Library ID (for get/edit/delete/permissions/update_permissions/transfer)",
                },
                "name": {"type": "string", "description": "Library name (for create/edit)"},
                "description": {
                    "type": "string",
                    "description": "Library description (for create/edit)",
                },
                "public": {"type": "boolean", "description": "Public visibility (for create/edit)"},
                "email": {
                    "type": "string",
                    "description": "Collaborator email (for update_permissions/transfer)",
                },
                "permission": {
                    "type": "string",
                    "description": "Permission level: owner, admin, write, read (for update_permissions)",
                    "enum": list(PERMISSION_LEVELS),
                },
            },
            "required": ["action"],
        },
        "annotations": _MUTATING,
    },
    {
        "name": "scix_library_documents",
        "description": (
            "Manage documents in a SciX library: add/remove bibcodes, notes, set operations "
            "(union/intersection/difference/copy/empty), or add by search query. Returns JSON "
            "for set operations, the note text for get_notes, and a one-line confirmation "
            "otherwise."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "action": {"type": "string", "enum": list(DOCUMENT_ACTIONS)},
                "library_id": {"type": "string", "description": "Library ID"},
                "bibcodes": _string_array("Bibcodes to add/remove"),
                "bibcode": {"type": "string", "description": "Single bibcode (for note operations)"},
                "content": {
                    "type": "string",
                    "description": "Note content (for add_note/edit_note)",
                },
                "libraries": _string_array(
                    "Source library IDs (for set operations: union/intersection/difference/copy)"
                ),
                "query": {"type": "string", "description": "Search query (for add_by_query)"},
                "rows": {
                    "type": "integer",
                    "description": "Max documents to add by query (default 50)",
                },
            },
            "required": ["action", "library_id"],
        },
        "annotations": _MUTATING,
    },
    {
        "name": "scix_citation_helper",
        "description": (
            "Find papers frequently co-cited with the given set but not yet included. "
            "Returns JSON."
        ),
        "input_schema": {
            "type": "object",
            "properties": {"bibcodes": _string_array("Bibcodes for co-citation analysis")},
            "required": ["bibcodes"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_network",
        "description": "Get author collaboration or paper citation network data. Returns JSON.",
        "input_schema": {
            "type": "object",
            "properties": {
                "bibcodes": _string_array("Bibcodes for network analysis"),
                "type": {
                    "type": "string",
                    "enum": list(NETWORK_TYPES),
                    "description": "Network type",
                    "default": "author",
                },
            },
            "required": ["bibcodes"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_object_search",
        "description": (
            "Resolve astronomical object names (M31, NGC 1234, Crab Nebula) via SIMBAD/NED. "
            "Returns JSON."
        ),
        "input_schema": {
            "type": "object",
            "properties": {"objects": _string_array("Object names to resolve")},
            "required": ["objects"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_resolve_reference",
        "description": (
            "Resolve free-text references to bibcodes (e.g., 'Einstein 1905 Annalen der "
            "Physik 17 891'). Returns JSON."
        ),
        "input_schema": {
            "type": "object",
            "properties": {"references": _string_array("Free-text reference strings")},
            "required": ["references"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_resolve_links",
        "description": (
            "Resolve links for a paper (full-text, datasets, citations, references). "
            "Returns JSON."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "bibcode": {"type": "string", "description": "Paper bibcode"},
                "link_type": {
                    "type": "string",
                    "enum": list(LINK_TYPES),
                    "description": "Specific link type (optional)",
                },
            },
            "required": ["bibcode"],
        },
        "annotations": _READ_ONLY,
    },
    {
        "name": "scix_get_paper",
        "description": (
            "Get detailed metadata for a single paper by bibcode, including abstract, "
            "affiliations, keywords, and links. Returns a Markdown summary."
        ),
        "input_schema": {
            "type": "object",
            "properties": {"bibcode": {"type": "string", "description": "Paper bibcode"}},
            "required": ["bibcode"],
        },
        "annotations": _READ_ONLY,
    },
]

TOOL_NAMES: tuple[str, ...] = tuple(str(entry["name"]) for entry in _TOOL_DEFINITIONS)


def _make_tool(name: str, description: str, input_schema: dict[str, Any], annotations: dict[str, Any]) -> Tool:
    return Tool(
        name=name,
        description=description,
        inputSchema=input_schema,
        annotations=ToolAnnotations(**annotations),
    )


def _dump_tools() -> list[dict[str, Any]]:
    tools = [
        _make_tool(
            name=str(entry["name"]),
            description=str(entry["description"]),
            input_schema=entry["input_schema"],
            annotations=entry["annotations"],
        )
        for entry in _TOOL_DEFINITIONS
    ]
    return [tool.model_dump(by_alias=True, exclude_none=True, mode="json") for tool in tools]


# Serialized once so every tools/list response is byte-identical.
TOOL_CATALOG: list[dict[str, Any]] = _dump_tools()


FIELDS_URI = "scix://fields"
SYNTAX_URI = "scix://syntax"

FIELDS_REFERENCE = """SciX Searchable Fields
======================

Common search fields:
  author       - Author name (e.g., author:"Einstein, A.")
  first_author - First author only
  title        - Title words
  abs          - Abstract words
  year         - Publication year (e.g., year:2023 or year:[2020 TO 2023])
  bibcode      - ADS bibcode
  doi          - Digital Object Identifier
  identifier   - Any identifier (DOI, arXiv, bibcode)
  bibstem      - Journal abbreviation (e.g., bibstem:ApJ)
  object       - Astronomical object name
  orcid        - Author ORCID
  keyword      - Keywords
  full         - Full text search
  property     - Paper properties (refereed, openaccess, etc.)
  doctype      - Document type (article, inproceedings, etc.)

Common returnable fields:
  bibcode, title, author, year, pub, abstract, doi, identifier,
  doctype, esources, citation_count, reference, property, aff,
  orcid_pub, keyword, volume, page, read_count
"""

SYNTAX_REFERENCE = """SciX Query Syntax Guide
=======================

Field queries:
  author:"Einstein"           - Author search
  title:"dark matter"         - Title search
  year:2023                   - Exact year
  year:[2020 TO 2023]         - Year range

Boolean operators:
  term1 AND term2             - Both terms
  term1 OR term2              - Either term
  NOT term                    - Exclude term
  (term1 OR term2) AND term3  - Grouping

Functional operators:
  citations(bibcode:XXX)      - Papers citing XXX
  references(bibcode:XXX)     - Papers referenced by XXX
  similar(bibcode:XXX)        - Content-similar papers
  trending(bibcode:XXX)       - Trending co-reads
  reviews(bibcode:XXX)        - Review articles

Wildcards:
  author:"Eins*"              - Prefix matching
  title:galax?                - Single character wildcard

Properties:
  property:refereed           - Refereed papers only
  property:openaccess         - Open access papers
  property:nonarticle         - Non-article documents

Sort options:
  date desc                   - Newest first (default)
  citation_count desc         - Most cited first
  score desc                  - Best match first
  read_count desc             - Most read first
"""

RESOURCE_CATALOG: list[dict[str, Any]] = [
    {
        "uri": FIELDS_URI,
        "name": "SciX Searchable Fields",
        "description": "List of searchable and returnable fields in ADS",
        "mimeType": "text/plain",
    },
    {
        "uri": SYNTAX_URI,
        "name": "SciX Query Syntax",
        "description": "Guide to ADS query syntax",
        "mimeType": "text/plain",
    },
]

RESOURCE_TEXT: dict[str, str] = {
    FIELDS_URI: FIELDS_REFERENCE,
    SYNTAX_URI: SYNTAX_REFERENCE,
}
