"""Tool dispatch: validate arguments, call the gateway, render the result."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from mcp.types import CallToolResult, TextContent

from scix.client.client import SciXClient
from scix.core.errors import InvalidInputError, SciXError
from scix.mcp_server.arguments import (
    BigqueryArgs,
    DocumentArgs,
    ExportArgs,
    LibraryArgs,
    LinksArgs,
    NetworkArgs,
    PaperArgs,
    SearchArgs,
    StringListArgs,
)
from scix.mcp_server.constants import SET_OPERATION_ACTIONS
from scix.mcp_server.formatting import format_json, format_paper_detail, format_search_results

_log = logging.getLogger("scix.mcp_server")

ToolHandler = Callable[[dict[str, Any]], Awaitable[str]]


def content_envelope(text: str, is_error: bool = False) -> dict[str, Any]:
    result = CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)
    return result.model_dump(by_alias=True, exclude_none=True, mode="json")


class ToolDispatcher:
    """Closed mapping from tool names to handlers over one ``SciXClient``."""

    def __init__(self, client: SciXClient) -> None:
        self.client = client
        self._handlers: dict[str, ToolHandler] = {
            "scix_search": self._search,
            "scix_bigquery": self._bigquery,
            "scix_export": self._export,
            "scix_metrics": self._metrics,
            "scix_library": self._library,
            "scix_library_documents": self._library_documents,
            "scix_citation_helper": self._citation_helper,
            "scix_network": self._network,
            "scix_object_search": self._object_search,
            "scix_resolve_reference": self._resolve_reference,
            "scix_resolve_links": self._resolve_links,
            "scix_get_paper": self._get_paper,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    async def invoke(self, name: str, arguments: Any) -> dict[str, Any]:
        """Run one tool and return its content envelope.

        Failures never escape: they come back with ``isError`` set.
        """
        if not isinstance(arguments, dict):
            arguments = {}
        _log.info("tool_call tool=%s", name, extra={"tool": name})
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise InvalidInputError(f"Unknown tool: {name}")
            text = await handler(arguments)
        except SciXError as e:
            _log.warning(
                "tool_error tool=%s kind=%s error=%s",
                name,
                e.kind,
                e.message,
                extra={"tool": name, "error_kind": e.kind, "error": e.message},
            )
            return content_envelope(f"Error: {e}", is_error=True)
        except Exception as e:
            _log.exception("tool_failed tool=%s", name, extra={"tool": name})
            return content_envelope(f"Error: Tool execution failed: {e}", is_error=True)
        return content_envelope(text)

    async def _search(self, arguments: dict[str, Any]) -> str:
        args = SearchArgs.from_arguments(arguments)
        results = await self.client.search_with_options(
            args.query, fields=args.fields, sort=args.sort, rows=args.rows, start=args.start
        )
        return format_search_results(results, args.start)

    async def _bigquery(self, arguments: dict[str, Any]) -> str:
        args = BigqueryArgs.from_arguments(arguments)
        return format_search_results(await self.client.bigquery(args.bibcodes, args.query))

    async def _export(self, arguments: dict[str, Any]) -> str:
        args = ExportArgs.from_arguments(arguments)
        return await self.client.export(args.bibcodes, args.format)

    async def _metrics(self, arguments: dict[str, Any]) -> str:
        args = StringListArgs.from_arguments(arguments, "bibcodes")
        return format_json(await self.client.metrics(args.values))

    async def _library(self, arguments: dict[str, Any]) -> str:
        args = LibraryArgs.from_arguments(arguments)
        client = self.client
        action = args.action

        if action == "list":
            return format_json(await client.list_libraries())
        if action == "get":
            return format_json(await client.get_library(args.require("id")))
        if action == "create":
            library = await client.create_library(
                args.require("name"), args.description or "", bool(args.public)
            )
            return format_json(library)
        if action == "edit":
            library_id = args.require("id")
            await client.edit_library(library_id, args.name, args.description, args.public)
            return f"Library {library_id} updated"
        if action == "delete":
            library_id = args.require("id")
            await client.delete_library(library_id)
            return f"Library {library_id} deleted"
        if action == "permissions":
            return format_json(await client.get_permissions(args.require("id")))
        if action == "update_permissions":
            library_id = args.require("id")
            email = args.require("email")
            await client.update_permissions(library_id, email, args.require("permission"))
            return f"Permissions updated for {email} on library {library_id}"
        # transfer
        library_id = args.require("id")
        email = args.require("email")
        await client.transfer_library(library_id, email)
        return f"Library {library_id} transferred to {email}"

    async def _library_documents(self, arguments: dict[str, Any]) -> str:
        args = DocumentArgs.from_arguments(arguments)
        client = self.client
        action = args.action
        library_id = args.library_id

        if action == "add":
            bibcodes = args.require_bibcodes()
            await client.add_documents(library_id, bibcodes)
            return f"Added {len(bibcodes)} documents"
        if action == "remove":
            bibcodes = args.require_bibcodes()
            await client.remove_documents(library_id, bibcodes)
            return f"Removed {len(bibcodes)} documents"
        if action == "get_notes":
            return await client.get_annotation(library_id, args.require("bibcode"))
        if action in ("add_note", "edit_note"):
            bibcode = args.require("bibcode")
            await client.set_annotation(library_id, bibcode, args.require("content"))
            return f"Note saved for {bibcode}"
        if action == "delete_note":
            bibcode = args.require("bibcode")
            await client.delete_annotation(library_id, bibcode)
            return f"Note deleted for {bibcode}"
        if action in SET_OPERATION_ACTIONS:
            return format_json(await client.library_operation(library_id, action, args.libraries))
        # add_by_query
        count = await client.add_documents_by_query(library_id, args.require("query"), args.rows)
        return f"Added {count} documents by query"

    async def _citation_helper(self, arguments: dict[str, Any]) -> str:
        args = StringListArgs.from_arguments(arguments, "bibcodes")
        return format_json(await self.client.citation_helper(args.values))

    async def _network(self, arguments: dict[str, Any]) -> str:
        args = NetworkArgs.from_arguments(arguments)
        if args.network_type == "paper":
            return format_json(await self.client.paper_network(args.bibcodes))
        return format_json(await self.client.author_network(args.bibcodes))

    async def _object_search(self, arguments: dict[str, Any]) -> str:
        args = StringListArgs.from_arguments(arguments, "objects")
        return format_json(await self.client.resolve_objects(args.values))

    async def _resolve_reference(self, arguments: dict[str, Any]) -> str:
        args = StringListArgs.from_arguments(arguments, "references")
        return format_json(await self.client.resolve_references(args.values))

    async def _resolve_links(self, arguments: dict[str, Any]) -> str:
        args = LinksArgs.from_arguments(arguments)
        return format_json(await self.client.resolve_links(args.bibcode, args.link_type))

    async def _get_paper(self, arguments: dict[str, Any]) -> str:
        args = PaperArgs.from_arguments(arguments)
        return format_paper_detail(await self.client.get_paper(args.bibcode))
