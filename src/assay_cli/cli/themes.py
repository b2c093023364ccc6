"""``assay themes`` — browse canonical themes."""

from __future__ import annotations

import argparse
from typing import Any

from assay_cli.cli import exit_codes
from assay_cli.cli.context import CliContext
from assay_cli.cli.output import emit_payload


def handle_list(args: argparse.Namespace, ctx: CliContext) -> int:
    """List L0 domains, or the L1 themes of ``--domain``."""
    emit_payload(ctx.service.list_themes(args.domain), ctx.output_format)
    return exit_codes.SUCCESS


def register(subparsers: Any) -> None:
    themes = subparsers.add_parser("themes", help="Theme operations.")
    themes_sub = themes.add_subparsers(dest="themes_command", metavar="<command>")
    themes_sub.required = True

    list_parser = themes_sub.add_parser("list", help="Browse canonical themes.")
    list_parser.add_argument(
        "-d", "--domain",
        help=(
            "L0 domain ID (e.g. ARTIFICIAL_INTELLIGENCE). "
            "If provided, returns L1 themes for that domain."
        ),
    )
    list_parser.set_defaults(handler=handle_list)
