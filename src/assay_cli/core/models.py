"""Domain models for assay-cli.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and (de)serialisation of their own fields.
They carry zero I/O and no dependencies on external packages.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

DEFAULT_BASE_URL = "https://us-east4-pdfsummaries.cloudfunctions.net/api"
OUTPUT_FORMATS: tuple[str, ...] = ("json", "table", "yaml")
DEFAULT_OUTPUT_FORMAT = "json"


# ---------------------------------------------------------------------------
# Persistent configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Config:
    """Contents of ``config.json``.

    Field names are Pythonic; :meth:`to_dict` / :meth:`from_dict` map them
    to the camelCase keys used on disk.
    """

    base_url: str = DEFAULT_BASE_URL
    """API base URL; request paths are appended to it."""

    output_format: str = DEFAULT_OUTPUT_FORMAT
    """One of :data:`OUTPUT_FORMATS`."""

    key_id: str | None = None
    """Non-secret identifier portion of the API key."""

    key_expires_at: str | None = None
    """ISO 8601 expiration timestamp of the stored key."""

    def to_dict(self) -> dict[str, str]:
        data: dict[str, str] = {}
        if self.key_id is not None:
            data["keyId"] = self.key_id
        if self.key_expires_at is not None:
            data["apiKeyExpiresAt"] = self.key_expires_at
        data["baseUrl"] = self.base_url
        data["outputFormat"] = self.output_format
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        output_format = data.get("outputFormat")
        if output_format not in OUTPUT_FORMATS:
            output_format = DEFAULT_OUTPUT_FORMAT
        base_url = data.get("baseUrl")
        key_id = data.get("keyId")
        expires_at = data.get("apiKeyExpiresAt")
        return cls(
            base_url=base_url if isinstance(base_url, str) else DEFAULT_BASE_URL,
            output_format=str(output_format),
            key_id=str(key_id) if key_id is not None else None,
            key_expires_at=str(expires_at) if expires_at is not None else None,
        )


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParsedApiKey:
    """An ``ask_live_<key_id>_<key_secret>`` key split into its parts."""

    key_id: str
    key_secret: str


@dataclass(frozen=True, slots=True)
class ExpirationStatus:
    """Result of comparing a key's expiration timestamp with the clock."""

    expired: bool = False
    expiring_soon: bool = False
    message: str | None = None


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of the out-of-band login verification call."""

    valid: bool
    expires_at: str | None = None


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Transport-neutral HTTP response.

    ``headers`` keys are lower-cased by the transport so lookups do not
    depend on the server's casing.
    """

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    """Decoded JSON body, or ``None`` when the body is not JSON."""

    text: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


@dataclass(frozen=True, slots=True)
class ApiResult:
    """A successful pipeline call."""

    data: Any
    """Decoded JSON payload exactly as returned by the server."""

    refreshed_expires_at: str | None = None
    """Value of ``X-Api-Key-Expires-At`` when the server sent one."""
