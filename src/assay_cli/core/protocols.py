"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so the credential and retry logic can be exercised
with in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from assay_cli.core.models import Config, HttpResponse


class SecretStore(Protocol):
    """Contract for the OS credential vault holding the key secret."""

    def probe(self) -> bool:
        """Return whether the vault is usable on this host."""
        ...  # pragma: no cover

    def store(self, secret: str) -> None:
        """Persist *secret*.

        Raises
        ------
        SecretStoreUnavailableError
            When :meth:`probe` is false.
        SecretStoreWriteError
            When the backend refuses the write.
        """
        ...  # pragma: no cover

    def retrieve(self) -> str | None:
        """Return the stored secret, or ``None`` on any failure."""
        ...  # pragma: no cover

    def delete(self) -> None:
        """Remove the stored secret; never raises."""
        ...  # pragma: no cover


class ConfigRepository(Protocol):
    """Contract for loading and saving :class:`Config`."""

    def load(self) -> Config:
        """Return the stored config, or defaults when none exists.

        Raises
        ------
        ConfigParseError
            When the stored document is not valid JSON.
        """
        ...  # pragma: no cover

    def save(self, config: Config) -> None:
        """Overwrite the stored config with *config*.

        Raises
        ------
        ConfigWriteError
            When the document cannot be written.
        """
        ...  # pragma: no cover


class Transport(Protocol):
    """Contract for the HTTP backend.

    Implementations return an :class:`HttpResponse` for every HTTP status
    (including 4xx/5xx) and raise
    :class:`~assay_cli.exceptions.NetworkError` only when no response was
    received at all.
    """

    def send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        ...  # pragma: no cover
