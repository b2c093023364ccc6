"""Interactive API key entry for ``assay auth login``.

This module is responsible for:

* Prompting for a pasted key via questionary.
* Rejecting keys without the ``ask_live_`` prefix inside the prompt.
* Returning the stripped key as a string.
"""

from __future__ import annotations

from typing import Any

from assay_cli.core.credentials import API_KEY_PREFIX
from assay_cli.exceptions import EnvironmentError, LoginCancelledError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive entry."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def validate_key_input(text: str) -> bool | str:
    """questionary validator: ``True`` or the message shown under the prompt."""
    if not text.strip().startswith(API_KEY_PREFIX):
        return f'Invalid API key format. Must start with "{API_KEY_PREFIX}"'
    return True


def prompt_api_key() -> str:
    """Ask the user to paste their API key.

    Raises
    ------
    LoginCancelledError
        If the user cancels the prompt (Ctrl+C / Esc).
    """
    questionary = _import_questionary()

    answer: str | None = questionary.password(
        f"Paste your API key ({API_KEY_PREFIX}...):",
        validate=validate_key_input,
    ).ask()  # Returns None on Ctrl+C / Esc

    if answer is None:
        raise LoginCancelledError(
            "Login cancelled.",
            hint="Run 'assay auth login' again when you have your key.",
        )
    return answer.strip()
