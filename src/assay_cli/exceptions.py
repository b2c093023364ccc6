"""Custom exception hierarchy for assay-cli.

All exceptions that cross layer boundaries must inherit from
:class:`AssayError`.  Raw third-party exceptions (``requests``,
``keyring``) must NEVER propagate beyond the infrastructure layer — they
are caught there and re-raised as a typed subclass defined here.

Hierarchy
---------
AssayError
├── NoCredentialError
├── CredentialExpiredError
├── InvalidApiKeyError
├── ApiKeyVerificationError
├── LoginCancelledError
├── ConfigParseError
├── ConfigWriteError
├── SecretStoreError
│   ├── SecretStoreUnavailableError
│   └── SecretStoreWriteError
├── NetworkError
├── ApiError
└── EnvironmentError
"""

from __future__ import annotations

from typing import Any

LOGIN_HINT = "Run 'assay auth login' to authenticate."


class AssayError(Exception):
    """Base exception for all assay-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Local credential preconditions ----------------------------------------

class NoCredentialError(AssayError):
    """Raised when no API key can be resolved from env, config, or vault."""

    def __init__(self, message: str | None = None, *, hint: str | None = None) -> None:
        super().__init__(
            message or "No API key found. " + LOGIN_HINT,
            hint=hint,
        )


class CredentialExpiredError(AssayError):
    """Raised when the stored key is past its expiration timestamp."""


class InvalidApiKeyError(AssayError):
    """Raised when a pasted key does not have the ``ask_live_`` shape."""


class ApiKeyVerificationError(AssayError):
    """Raised when the server refuses a key during login verification."""


class LoginCancelledError(AssayError):
    """Raised when the user aborts the key prompt."""


# --- Local storage ---------------------------------------------------------

class ConfigParseError(AssayError):
    """Raised when the config file exists but cannot be read as JSON."""


class ConfigWriteError(AssayError):
    """Raised when the config file cannot be written."""


class SecretStoreError(AssayError):
    """Base class for OS credential vault failures surfaced to callers."""


class SecretStoreUnavailableError(SecretStoreError):
    """Raised when no usable OS credential vault exists on this host."""


class SecretStoreWriteError(SecretStoreError):
    """Raised when the vault is usable but refused the write."""


# --- Remote API ------------------------------------------------------------

class NetworkError(AssayError):
    """Raised when the API cannot be reached (refused, timed out, DNS...)."""


class ApiError(AssayError):
    """Raised for any HTTP error status returned by the API.

    The structured body ``{"error": {"code", "message", "details"}}`` is
    unpacked into attributes; classification into user-facing text lives
    in :mod:`assay_cli.core.error_messages`.
    """

    def __init__(
        self,
        status_code: int,
        *,
        code: str | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message or code or f"HTTP {status_code}")
        self.status_code: int = status_code
        self.code: str | None = code
        self.server_message: str | None = message
        self.details: dict[str, Any] = details or {}
        self.body: Any = body

    @classmethod
    def from_body(cls, status_code: int, body: Any) -> ApiError:
        """Build an :class:`ApiError` from a decoded response body."""
        error: Any = body.get("error") if isinstance(body, dict) else None
        if not isinstance(error, dict):
            return cls(status_code, body=body)
        details = error.get("details")
        return cls(
            status_code,
            code=_optional_str(error.get("code")),
            message=_optional_str(error.get("message")),
            details=details if isinstance(details, dict) else None,
            body=body,
        )


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(AssayError):
    """Raised when a required runtime dependency is not available."""


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
