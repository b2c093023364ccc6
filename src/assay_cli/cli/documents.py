"""``assay documents`` (alias ``docs``) — list, get, summary, search."""

from __future__ import annotations

import argparse
from typing import Any

from assay_cli.cli import exit_codes
from assay_cli.cli.context import CliContext
from assay_cli.cli.output import emit_payload
from assay_cli.core.params import (
    DEFAULT_LIMIT,
    DOCUMENT_FILTERS,
    LEGACY_VISIBILITIES,
    SUMMARY_TYPES,
    resolve_document_filter,
)


def handle_list(args: argparse.Namespace, ctx: CliContext) -> int:
    payload = ctx.service.list_documents(
        filter_value=resolve_document_filter(args.filter, args.visibility),
        limit=args.limit,
        cursor=args.cursor,
    )
    emit_payload(payload, ctx.output_format)
    return exit_codes.SUCCESS


def handle_get(args: argparse.Namespace, ctx: CliContext) -> int:
    emit_payload(ctx.service.get_document(args.document_id), ctx.output_format)
    return exit_codes.SUCCESS


def handle_summary(args: argparse.Namespace, ctx: CliContext) -> int:
    payload = ctx.service.get_summary(args.document_id, args.type)
    emit_payload(payload, ctx.output_format)
    return exit_codes.SUCCESS


def handle_search(args: argparse.Namespace, ctx: CliContext) -> int:
    payload = ctx.service.search_documents(
        query=args.query,
        theme=args.theme,
        author=args.author,
        title=args.title,
        keywords=args.keywords,
        filter_value=resolve_document_filter(args.filter, args.visibility),
        limit=args.limit,
    )
    emit_payload(payload, ctx.output_format)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Parser registration
# ---------------------------------------------------------------------------

def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _add_filter_flags(parser: argparse.ArgumentParser) -> None:
    # Both default to None; resolve_document_filter applies the real default.
    parser.add_argument(
        "-f", "--filter",
        choices=DOCUMENT_FILTERS,
        default=None,
        help="Document filter: public, personal, or private (default: public).",
    )
    parser.add_argument(
        "-v", "--visibility",
        choices=LEGACY_VISIBILITIES,
        default=None,
        help="[DEPRECATED] Use --filter instead. Ignored when --filter is given.",
    )


def _add_limit_flag(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("-l", "--limit", type=_positive_int, default=DEFAULT_LIMIT, help=help_text)


def register(subparsers: Any) -> None:
    documents = subparsers.add_parser(
        "documents",
        aliases=["docs"],
        help="Document operations.",
    )
    doc_sub = documents.add_subparsers(dest="documents_command", metavar="<command>")
    doc_sub.required = True

    list_parser = doc_sub.add_parser("list", help="List documents with pagination.")
    _add_filter_flags(list_parser)
    _add_limit_flag(list_parser, "Maximum results per page (default: 20).")
    list_parser.add_argument("-c", "--cursor", help="Pagination cursor from a previous response.")
    list_parser.set_defaults(handler=handle_list)

    get_parser = doc_sub.add_parser("get", help="Get document details.")
    get_parser.add_argument("document_id", metavar="DOCUMENT_ID", help="Document ID.")
    get_parser.set_defaults(handler=handle_get)

    summary_parser = doc_sub.add_parser("summary", help="Get document summary.")
    summary_parser.add_argument("document_id", metavar="DOCUMENT_ID", help="Document ID.")
    summary_parser.add_argument(
        "-t", "--type",
        choices=SUMMARY_TYPES,
        default="comprehensive",
        help="Summary type (default: comprehensive).",
    )
    summary_parser.set_defaults(handler=handle_summary)

    search_parser = doc_sub.add_parser("search", help="Search documents.")
    search_parser.add_argument("-q", "--query", help="General search query.")
    search_parser.add_argument("-t", "--theme", help="Canonical theme ID.")
    search_parser.add_argument("-a", "--author", help="Author name.")
    search_parser.add_argument("--title", help="Document title.")
    search_parser.add_argument("--keywords", help="Keywords or concepts.")
    _add_filter_flags(search_parser)
    _add_limit_flag(search_parser, "Maximum results (default: 20).")
    search_parser.set_defaults(handler=handle_search)
