"""``assay doctor`` — environment diagnostics command.

Collects what the CLI needs at runtime (interpreter, HTTP client, OS
keychain, config directory, an API key) and renders one row per check.
Nothing here touches the network.
"""

from __future__ import annotations

import argparse
import os
import platform
import sys
from typing import Any

from assay_cli.cli import exit_codes
from assay_cli.cli.console import console, print_error, print_success
from assay_cli.cli.context import CliContext
from assay_cli.core.credentials import API_KEY_ENV_VAR
from assay_cli.exceptions import ConfigParseError
from assay_cli.version import __version__

OK = "OK"
WARN = "WARN"
FAIL = "FAIL"

_STATUS_STYLES = {OK: "green", WARN: "yellow", FAIL: "red"}

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _assay_version_check() -> Check:
    return "assay-cli", __version__, OK


def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    ok = sys.version_info[:2] >= (3, 10)
    return "Python", platform.python_version(), OK if ok else FAIL


def _requests_check() -> Check:
    try:
        import requests
    except ModuleNotFoundError:
        return "requests", "NOT INSTALLED", FAIL
    return "requests", getattr(requests, "__version__", "unknown"), OK


def _keyring_check(ctx: CliContext) -> Check:
    """Keychain is optional: without it the key must come from the environment."""
    store = ctx.secret_store
    backend = store.backend_name()
    if backend is None:
        return "keyring", "not installed", WARN
    if not store.probe():
        return "keyring", f"{backend} (unusable)", WARN
    return "keyring", backend, OK


def _config_dir_check(ctx: CliContext) -> Check:
    config_dir = ctx.config_store.config_dir
    if not os.path.isdir(config_dir):
        return "config dir", f"{config_dir} (not created yet)", OK
    if not os.access(config_dir, os.W_OK):
        return "config dir", f"{config_dir} (not writable)", FAIL
    return "config dir", str(config_dir), OK


def _credential_check(ctx: CliContext) -> Check:
    if ctx.resolver.uses_environment_override:
        return "api key", f"from {API_KEY_ENV_VAR}", OK
    try:
        config = ctx.load_config()
    except ConfigParseError:
        return "api key", "config file unreadable", FAIL
    if not config.key_id:
        return "api key", "not configured (run 'assay auth login')", WARN
    if ctx.secret_store.retrieve() is None:
        return "api key", "secret missing from keychain", WARN
    return "api key", "from config + keychain", OK


def collect_checks(ctx: CliContext) -> list[Check]:
    return [
        _assay_version_check(),
        _python_version_check(),
        _requests_check(),
        _keyring_check(ctx),
        _config_dir_check(ctx),
        _credential_check(ctx),
    ]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\nassay doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<42} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<42} {status:<8}", file=sys.stderr)
    print(file=sys.stderr)


def _build_rich_table(checks: list[Check]) -> Any | None:
    try:
        from rich.table import Table
        from rich.text import Text
    except ModuleNotFoundError:
        return None

    table = Table(
        title="assay doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, Text(status, style=_STATUS_STYLES[status]))
    return table


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def handle_doctor(args: argparse.Namespace, ctx: CliContext) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    checks = collect_checks(ctx)
    has_failure = any(status == FAIL for _, _, status in checks)

    table = _build_rich_table(checks)
    if table is None:
        _print_plain_doctor_table(checks)
    else:
        console.print()
        console.print(table)
        console.print()

    if has_failure:
        print_error("Some checks failed.")
        return exit_codes.GENERAL_ERROR
    print_success("All checks passed.")
    return exit_codes.SUCCESS


def register(subparsers: Any) -> None:
    doctor = subparsers.add_parser("doctor", help="Run environment diagnostics.")
    doctor.set_defaults(handler=handle_doctor)
