"""CLI application entry point and command routing for ``assay``.

This module is the **sole error boundary** for the entire application.
It catches :class:`~assay_cli.exceptions.AssayError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering a one-line message on stderr
and returning well-defined exit codes.

Architecture notes
------------------
* Command handlers live in ``auth``, ``documents``, ``themes`` and
  ``doctor``; each module registers its own sub-parsers and sets a
  ``handler`` default.
* Handlers return an exit code and raise on failure; nothing below
  this module calls ``sys.exit``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from assay_cli.cli import auth, documents, doctor, exit_codes, themes
from assay_cli.cli.console import console, print_error
from assay_cli.cli.context import build_context
from assay_cli.core.error_messages import describe_error
from assay_cli.core.models import OUTPUT_FORMATS
from assay_cli.exceptions import AssayError
from assay_cli.logging_config import configure_logging
from assay_cli.version import __version__

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assay",
        description="Assay CLI - command-line access to the Assay document API.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: the configured format, json).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    auth.register(subparsers)
    documents.register(subparsers)
    themes.register(subparsers)
    doctor.register(subparsers)
    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the assay CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(args.verbose)
    log.debug("Running command %s", args.command)
    ctx = build_context(args.format)
    return args.handler(args, ctx)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli(argv: list[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` so the process never exits with a raw stack trace
    during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except AssayError as exc:
        log.debug("Command failed", exc_info=True)
        print_error(describe_error(exc))
        if exc.hint:
            console.message("Hint:", exc.hint, "yellow")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.raw("\nAborted by user.")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        log.debug("Unexpected failure", exc_info=True)
        print_error(
            "Unexpected error. Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
