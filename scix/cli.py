"""Command-line interface for the SciX client.

Usage: scix search "dark matter" --rows 10
"""

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence

from scix.client.client import SciXClient
from scix.core.constants import DEFAULT_SEARCH_FIELDS
from scix.core.errors import SciXError
from scix.core.types import ExportFormat, Paper, SearchResponse, Sort
from scix.mcp_server.formatting import format_json
from scix.version import __version__

_TITLE_WIDTH = 60


def configure_logging(level: str | None = None) -> None:
    """Send log records to stderr; stdout is reserved for command output."""
    level_name = (level or os.getenv("SCIX_LOG_LEVEL") or "WARNING").upper()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("scix")
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level_name, logging.WARNING))
    root.propagate = False


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    lines = ["  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)).rstrip()]
    lines.append("  ".join("-" * w for w in widths))
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
    return "\n".join(lines)


def papers_table(papers: list[Paper]) -> str:
    rows = []
    for paper in papers:
        title = paper.title
        if len(title) > _TITLE_WIDTH:
            title = title[: _TITLE_WIDTH - 3] + "..."
        rows.append(
            [
                paper.bibcode,
                str(paper.year) if paper.year is not None else "",
                paper.authors[0].family_name if paper.authors else "-",
                title,
                str(paper.citation_count) if paper.citation_count is not None else "",
            ]
        )
    return render_table(["Bibcode", "Year", "First Author", "Title", "Cites"], rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scix", description="SciX / NASA ADS API client")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--token", help="API token (overrides SCIX_API_TOKEN / ADS_API_TOKEN)")
    parser.add_argument("--output", choices=["table", "json"], default="table", help="Output format")
    parser.add_argument("--log-level", help="Logging level for stderr (default: SCIX_LOG_LEVEL or WARNING)")
    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Search the SciX database")
    search.add_argument("query", help="Search query (SciX/ADS syntax)")
    search.add_argument("-r", "--rows", type=int, default=10, help="Maximum results to return")
    search.add_argument("-s", "--sort", help='Sort order (e.g. "date desc", "citation_count desc")')
    search.add_argument("-f", "--fields", help="Fields to return (comma-separated)")

    export = commands.add_parser("export", help="Export papers in citation format")
    export.add_argument("bibcodes", nargs="+")
    export.add_argument("-f", "--format", default="bibtex", help="Export format")

    for name, help_text, rows in (
        ("refs", "Show papers referenced by a paper", 25),
        ("cites", "Show papers that cite a paper", 25),
        ("similar", "Show papers similar to a paper", 10),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("bibcode")
        sub.add_argument("-r", "--rows", type=int, default=rows)

    metrics = commands.add_parser("metrics", help="Get citation metrics for papers")
    metrics.add_argument("bibcodes", nargs="+")

    resolve = commands.add_parser("resolve", help="Resolve free-text references to bibcodes")
    resolve.add_argument("references", nargs="+")

    objects = commands.add_parser("objects", help="Resolve astronomical object names")
    objects.add_argument("objects", nargs="+", help="Object names (M31, NGC 1234, etc.)")

    links = commands.add_parser("links", help="Resolve links for a paper")
    links.add_argument("bibcode")
    links.add_argument("-l", "--link-type", help="esource, data, citation, reference or coreads")

    libraries = commands.add_parser("libraries", help="Manage SciX libraries")
    library_actions = libraries.add_subparsers(dest="library_action", required=True)
    library_actions.add_parser("list", help="List all libraries")
    get = library_actions.add_parser("get", help="Get a library")
    get.add_argument("id")
    create = library_actions.add_parser("create", help="Create a new library")
    create.add_argument("name")
    create.add_argument("-d", "--description", default="")
    create.add_argument("--public", action="store_true")
    delete = library_actions.add_parser("delete", help="Delete a library")
    delete.add_argument("id")

    serve = commands.add_parser("serve", help="Start the MCP server (stdio)")
    serve.add_argument("--serial", action="store_true", help="Handle tool calls one at a time")
    return parser


def _print_papers(args: argparse.Namespace, heading: str, results: SearchResponse) -> None:
    if args.output == "json":
        print(format_json(results.to_dict()))
    else:
        print(heading)
        print(papers_table(results.papers))


async def run_command(client: SciXClient, args: argparse.Namespace) -> None:
    command = args.command
    if command == "search":
        results = await client.search_with_options(
            args.query,
            fields=args.fields or DEFAULT_SEARCH_FIELDS,
            sort=Sort.parse(args.sort) if args.sort else None,
            rows=args.rows,
        )
        _print_papers(args, f"Found {results.num_found} results:", results)
    elif command == "export":
        export_format = ExportFormat.from_str_loose(args.format) or ExportFormat.BIBTEX
        print(await client.export(args.bibcodes, export_format))
    elif command == "refs":
        results = await client.references(args.bibcode, args.rows)
        _print_papers(args, f"References for {args.bibcode}:", results)
    elif command == "cites":
        results = await client.citations(args.bibcode, args.rows)
        _print_papers(args, f"Citations of {args.bibcode}:", results)
    elif command == "similar":
        results = await client.similar(args.bibcode, args.rows)
        _print_papers(args, f"Similar to {args.bibcode}:", results)
    elif command == "metrics":
        print(format_json(await client.metrics(args.bibcodes)))
    elif command == "resolve":
        resolved = await client.resolve_references(args.references)
        if args.output == "json":
            print(format_json(resolved))
        else:
            for entry in resolved:
                print(f"{entry.reference} -> {entry.bibcode or '(not found)'}")
    elif command == "objects":
        print(format_json(await client.resolve_objects(args.objects)))
    elif command == "links":
        print(format_json(await client.resolve_links(args.bibcode, args.link_type)))
    elif command == "libraries":
        await _run_library_command(client, args)


async def _run_library_command(client: SciXClient, args: argparse.Namespace) -> None:
    action = args.library_action
    if action == "list":
        libraries = await client.list_libraries()
        if args.output == "json":
            print(format_json(libraries))
        else:
            rows = [[lib.id, lib.name, str(lib.num_documents), str(lib.public).lower()] for lib in libraries]
            print(render_table(["ID", "Name", "Documents", "Public"], rows))
    elif action == "get":
        print(format_json(await client.get_library(args.id)))
    elif action == "create":
        library = await client.create_library(args.name, args.description, args.public)
        print(f"Created library: {library.name} ({library.id})")
    elif action == "delete":
        await client.delete_library(args.id)
        print(f"Deleted library: {args.id}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        client = SciXClient.from_env(args.token)
        if args.command == "serve":
            from scix.mcp_server.server import serve

            asyncio.run(serve(client, concurrent=not args.serial))
            return
        try:
            asyncio.run(run_command(client, args))
        finally:
            client.close()
    except SciXError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
