"""Map failures onto user-facing remediation text.

The request pipeline propagates :class:`~assay_cli.exceptions.ApiError`
unmodified; this module is where server error codes become sentences.
Unknown codes fall back to the raw server message.
"""

from __future__ import annotations

from assay_cli.core.credentials import format_local_time
from assay_cli.exceptions import ApiError, AssayError, NetworkError

CONNECTION_ERROR_MESSAGE = (
    "Connection error: Could not reach the API. "
    "Please check your internet connection."
)


def describe_api_error(exc: ApiError) -> str:
    code = exc.code
    message = exc.server_message

    if code == "API_KEY_EXPIRED":
        return "API key expired. Run 'assay auth login' to generate a new key."
    if code == "API_KEY_INVALID":
        return "Invalid API key. Run 'assay auth login' to authenticate."
    if code == "API_KEY_REVOKED":
        return "API key has been revoked. Run 'assay auth login' to generate a new key."
    if code == "RATE_LIMIT_EXCEEDED":
        return f"Rate limit exceeded. Quota resets {_format_reset(exc.details.get('resetAt'))}."
    if code == "DOCUMENT_NOT_FOUND":
        return "Document not found. Check the document ID."
    if code == "INVALID_PARAMETERS":
        return f"Invalid parameters: {message}"
    if code == "PERMISSION_DENIED":
        return f"Permission denied: {message}"
    if code == "INTERNAL_ERROR":
        return f"Internal server error: {message or 'Please try again later.'}"
    if code is None and message is None:
        return f"Request failed with HTTP {exc.status_code}."
    return f"Error: {message or code or 'Unknown error'}"


def describe_error(exc: AssayError) -> str:
    """Return the single line printed for a handled failure."""
    if isinstance(exc, ApiError):
        return describe_api_error(exc)
    if isinstance(exc, NetworkError):
        return str(exc) or CONNECTION_ERROR_MESSAGE
    return str(exc)


def _format_reset(reset_at: object) -> str:
    if not reset_at:
        return "soon"
    return format_local_time(str(reset_at))
