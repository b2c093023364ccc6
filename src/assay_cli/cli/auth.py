"""``assay auth`` — login, status, rotate, and logout.

Login is the only command that talks to the API outside the request
pipeline: the pasted key is verified before anything is persisted.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Any

from assay_cli.cli import exit_codes
from assay_cli.cli.console import get_rich_console, print_info, print_success, print_warning
from assay_cli.cli.context import CliContext
from assay_cli.cli.key_prompt import prompt_api_key
from assay_cli.core.assay_service import verify_api_key
from assay_cli.core.credentials import (
    API_KEY_ENV_VAR,
    EXPIRING_SOON_WINDOW,
    format_local_time,
    mask_key_id,
    parse_api_key,
)
from assay_cli.core.models import Config
from assay_cli.exceptions import (
    ApiKeyVerificationError,
    AssayError,
    InvalidApiKeyError,
    NoCredentialError,
)
from assay_cli.infra.browser import DASHBOARD_URL, open_dashboard
from assay_cli.infra.http_transport import RequestsTransport

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------

def handle_login(args: argparse.Namespace, ctx: CliContext) -> int:
    """Open the dashboard, take a pasted key, verify it, then persist it.

    Flow:
    1. Open the dashboard so the user can generate a key.
    2. Prompt for the key and check its shape (no network yet).
    3. Verify the key against ``/api/v1/me``.
    4. Store the secret in the keychain (or warn when there is none).
    5. Save key id, expiry, and base URL to config.
    """
    print_info("Opening Dashboard to generate API key...")
    if not open_dashboard():
        print_info(f"Could not open a browser. Visit {DASHBOARD_URL}")

    api_key = prompt_api_key()
    parsed = parse_api_key(api_key)
    if parsed is None:
        raise InvalidApiKeyError(
            "Invalid API key format",
            hint="Keys look like ask_live_<key id>_<secret>.",
        )

    base_url = ctx.base_url(Config())
    print_info("Testing API key...")
    result = verify_api_key(RequestsTransport(base_url), api_key)
    if not result.valid:
        raise ApiKeyVerificationError(
            "API key validation failed. Please check your key and try again.",
        )

    secret_store = ctx.secret_store
    keychain_available = secret_store.probe()
    if keychain_available:
        secret_store.store(parsed.key_secret)
        print_info("API key stored securely in OS keychain")
    else:
        print_warning("Keychain not available. Only the key id is saved in the config file.")
        print_warning(f"For better security, set the {API_KEY_ENV_VAR} environment variable instead.")

    config = replace(
        ctx.load_config(),
        key_id=parsed.key_id,
        key_expires_at=result.expires_at,
        base_url=base_url,
    )
    ctx.config_store.save(config)

    if not keychain_available:
        print_warning(f'Set it with:\n  export {API_KEY_ENV_VAR}="{api_key}"')

    expires = format_local_time(result.expires_at) if result.expires_at else "unknown"
    print_success(f"API key valid until {expires}")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------

def format_time_remaining(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds} seconds"
    if seconds < 3600:
        return f"{seconds // 60} minutes"
    if seconds < 86400:
        return f"{seconds // 3600} hours"
    return f"{seconds // 86400} days"


def _int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _number(value: int | None) -> str:
    return f"{value:,}" if value is not None else "unknown"


def build_status_rows(data: dict[str, Any]) -> list[tuple[str, str]]:
    """Turn the ``/api/v1/me`` payload into (label, value) display rows."""
    rows: list[tuple[str, str]] = []
    key_id = data.get("keyId")
    rows.append(("Key ID", mask_key_id(str(key_id)) if key_id else "unknown"))
    rows.append(("Status", "Active"))

    expires_at = data.get("expiresAt")
    rows.append(("Expires", format_local_time(str(expires_at)) if expires_at else "unknown"))
    expires_in = _int(data.get("expiresIn"))
    if expires_in is not None:
        rows.append(("Expires In", format_time_remaining(expires_in)))

    quota = data.get("quota")
    if isinstance(quota, dict):
        used = _int(quota.get("used"))
        limit = _int(quota.get("limit"))
        usage = f"{_number(used)} / {_number(limit)}"
        if used is not None and limit:
            usage += f" ({round(used / limit * 100)}%)"
        rows.append(("Quota Used", usage))
        rows.append(("Quota Remaining", _number(_int(quota.get("remaining")))))
        reset_at = quota.get("resetAt")
        rows.append(("Quota Resets", format_local_time(str(reset_at)) if reset_at else "unknown"))
    return rows


def _render_status(rows: list[tuple[str, str]]) -> None:
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        print("\nAPI Key Status:", file=sys.stdout)
        for label, value in rows:
            print(f"  {label}: {value}", file=sys.stdout)
        return

    table = Table(
        title="API Key Status",
        show_header=False,
        border_style="dim",
    )
    table.add_column("Field", style="bold", min_width=16)
    table.add_column("Value")
    for label, value in rows:
        table.add_row(label, value)
    get_rich_console(stderr=False).print(table)


def handle_status(args: argparse.Namespace, ctx: CliContext) -> int:
    """Show key and quota information from ``/api/v1/me``."""
    if ctx.resolver.resolve_api_key() is None:
        raise NoCredentialError()

    payload = ctx.service.get_me()
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(payload, dict) or not payload.get("success") or not isinstance(data, dict):
        raise AssayError("Unexpected response from the API status endpoint.")

    _render_status(build_status_rows(data))

    expires_in = _int(data.get("expiresIn"))
    if expires_in is not None and expires_in < EXPIRING_SOON_WINDOW.total_seconds():
        print_warning(
            f"API key expires in {expires_in // 60} minutes. "
            "Run 'assay auth login' to refresh."
        )
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# rotate / logout
# ---------------------------------------------------------------------------

def handle_rotate(args: argparse.Namespace, ctx: CliContext) -> int:
    """Open the dashboard so the user can issue a replacement key."""
    if args.keep_old:
        log.debug("--keep-old given; revocation is managed from the dashboard")
    print_info("Opening Dashboard to generate new API key...")
    if not open_dashboard():
        print_info(f"Could not open a browser. Visit {DASHBOARD_URL}")
    print_info("After generating a new key, run 'assay auth login' to update your CLI configuration.")
    return exit_codes.SUCCESS


def handle_logout(args: argparse.Namespace, ctx: CliContext) -> int:
    """Forget the stored key: delete the vault secret and clear config."""
    ctx.secret_store.delete()
    config = ctx.load_config()
    if config.key_id is not None or config.key_expires_at is not None:
        ctx.config_store.save(replace(config, key_id=None, key_expires_at=None))
    print_success("Stored API key removed.")
    if ctx.resolver.uses_environment_override:
        print_warning(f"{API_KEY_ENV_VAR} is still set and will keep being used.")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Parser registration
# ---------------------------------------------------------------------------

def register(subparsers: Any) -> None:
    auth = subparsers.add_parser("auth", help="Authentication and API key management.")
    auth_sub = auth.add_subparsers(dest="auth_command", metavar="<command>")
    auth_sub.required = True

    login = auth_sub.add_parser("login", help="Authenticate with an API key from the Dashboard.")
    login.set_defaults(handler=handle_login)

    status = auth_sub.add_parser("status", help="Show API key status and quota information.")
    status.set_defaults(handler=handle_status)

    rotate = auth_sub.add_parser("rotate", help="Rotate API key (opens Dashboard to generate a new key).")
    rotate.add_argument("--keep-old", action="store_true", help="Keep old key active (don't revoke).")
    rotate.set_defaults(handler=handle_rotate)

    logout = auth_sub.add_parser("logout", help="Remove the stored API key from this machine.")
    logout.set_defaults(handler=handle_logout)
