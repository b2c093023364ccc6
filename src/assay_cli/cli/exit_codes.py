"""Process exit statuses returned by ``assay``.

Every handled failure — missing or expired key, unreachable API, server
error — exits with :data:`GENERAL_ERROR`.  Usage errors keep argparse's
own status so scripts can tell a typo from a failed request.
"""

from __future__ import annotations

SUCCESS: int = 0

GENERAL_ERROR: int = 1
"""An AssayError was caught and its classified message printed."""

USAGE_ERROR: int = 2
"""Raised by argparse itself for unknown flags or missing arguments."""

UNEXPECTED_ERROR: int = 70
"""A bug: an exception escaped every known error boundary (``EX_SOFTWARE``)."""

KEYBOARD_INTERRUPT: int = 130
"""Ctrl+C (128 + SIGINT)."""
