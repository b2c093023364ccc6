"""Credential resolution, key parsing, and expiration checks.

Resolution order for the API key:

1. ``ASSAY_API_KEY`` — returned verbatim; config and vault are never read.
2. ``Config.key_id`` + vault secret — recombined into
   ``ask_live_<key_id>_<secret>``.

Anything missing along path 2 yields ``None``; callers decide whether
that is fatal.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone

from assay_cli.core.models import ExpirationStatus, ParsedApiKey
from assay_cli.core.protocols import ConfigRepository, SecretStore

log = logging.getLogger(__name__)

API_KEY_ENV_VAR = "ASSAY_API_KEY"
API_KEY_PREFIX = "ask_live_"
EXPIRING_SOON_WINDOW = timedelta(minutes=30)

# fromisoformat before 3.11 only takes 3 or 6 fractional digits.
_FRACTION_RE = re.compile(r"(?<=:\d\d)\.(\d+)")


# ---------------------------------------------------------------------------
# Key shape (pure)
# ---------------------------------------------------------------------------

def parse_api_key(api_key: str) -> ParsedApiKey | None:
    """Split ``ask_live_<key_id>_<key_secret>`` into its parts.

    The secret may itself contain underscores; only the first segment
    after the prefix is the identifier.  Returns ``None`` for anything
    that does not have the expected shape.
    """
    if not api_key.startswith(API_KEY_PREFIX):
        return None
    parts = api_key[len(API_KEY_PREFIX):].split("_")
    if len(parts) < 2:
        return None
    key_id, key_secret = parts[0], "_".join(parts[1:])
    if not key_id or not key_secret:
        return None
    return ParsedApiKey(key_id=key_id, key_secret=key_secret)


def compose_api_key(key_id: str, key_secret: str) -> str:
    return f"{API_KEY_PREFIX}{key_id}_{key_secret}"


def mask_key_id(key_id: str) -> str:
    """Render a key id as ``<first 12>...<last 4>`` for display."""
    return f"{key_id[:12]}...{key_id[-4:]}"


# ---------------------------------------------------------------------------
# Expiration (pure)
# ---------------------------------------------------------------------------

def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO 8601 timestamp; naive values and ``Z`` are read as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1).ljust(6, "0")[:6], text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_local_time(value: str) -> str:
    """Render an ISO 8601 timestamp in local time; unparseable input is returned as-is."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def check_expiration(
    expires_at: str | None,
    now: datetime | None = None,
) -> ExpirationStatus:
    """Classify *expires_at* as expired, expiring soon, or fine.

    Absent or unparseable timestamps are treated as "no expiry known"
    and never block a request.
    """
    if not expires_at:
        return ExpirationStatus()
    expires = parse_timestamp(expires_at)
    if expires is None:
        log.debug("Ignoring unparseable expiration timestamp %r", expires_at)
        return ExpirationStatus()

    current = now if now is not None else datetime.now(timezone.utc)
    remaining = expires - current

    if remaining <= timedelta(0):
        return ExpirationStatus(
            expired=True,
            message="API key expired. Run 'assay auth login' to generate a new key.",
        )
    if remaining < EXPIRING_SOON_WINDOW:
        minutes = int(remaining.total_seconds() // 60)
        return ExpirationStatus(
            expiring_soon=True,
            message=(
                f"API key expires in {minutes} minutes. "
                "Run 'assay auth login' to refresh."
            ),
        )
    return ExpirationStatus()


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class CredentialResolver:
    """Assemble the API key from the environment or local storage.

    Parameters
    ----------
    config_store:
        Source of ``key_id`` and ``key_expires_at``.
    secret_store:
        Vault capability holding the secret half of the key.
    environ:
        Environment mapping; defaults to :data:`os.environ`.
    """

    def __init__(
        self,
        config_store: ConfigRepository,
        secret_store: SecretStore,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config_store = config_store
        self._secret_store = secret_store
        self._environ: Mapping[str, str] = environ if environ is not None else os.environ

    @property
    def config_store(self) -> ConfigRepository:
        return self._config_store

    @property
    def uses_environment_override(self) -> bool:
        return bool(self._environ.get(API_KEY_ENV_VAR))

    def resolve_api_key(self) -> str | None:
        env_key = self._environ.get(API_KEY_ENV_VAR)
        if env_key:
            return env_key

        config = self._config_store.load()
        if not config.key_id:
            return None

        secret = self._secret_store.retrieve()
        if not secret:
            log.debug("Config names key %s but the vault has no secret", config.key_id)
            return None

        return compose_api_key(config.key_id, secret)

    def expiration_status(self, now: datetime | None = None) -> ExpirationStatus:
        """Check the expiration recorded in config."""
        return check_expiration(self._config_store.load().key_expires_at, now)
