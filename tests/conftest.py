"""Shared pytest fixtures and configuration for the assay-cli test suite.

Guidelines
----------
* No internet access in any test; HTTP is faked at the transport
  boundary or intercepted with ``requests-mock``.
* The OS keychain is never touched — ``keyring`` is patched or the
  in-memory :class:`FakeSecretStore` is used.
* Config files only ever land under ``tmp_path``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from assay_cli.core.credentials import CredentialResolver
from assay_cli.core.models import Config, HttpResponse
from assay_cli.exceptions import ConfigWriteError

_ISOLATED_ENV_VARS = (
    "ASSAY_API_KEY",
    "ASSAY_BASE_URL",
    "ASSAY_DEBUG",
    "DEBUG",
)


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------

class FakeSecretStore:
    """In-memory :class:`~assay_cli.core.protocols.SecretStore`."""

    def __init__(self, secret: str | None = None, *, available: bool = True) -> None:
        self.secret = secret
        self.available = available
        self.retrieve_calls = 0
        self.deleted = False

    def probe(self) -> bool:
        return self.available

    def store(self, secret: str) -> None:
        self.secret = secret

    def retrieve(self) -> str | None:
        self.retrieve_calls += 1
        return self.secret if self.available else None

    def delete(self) -> None:
        self.deleted = True
        self.secret = None

    def backend_name(self) -> str | None:
        return "FakeKeyring" if self.available else None


class MemoryConfigStore:
    """In-memory :class:`~assay_cli.core.protocols.ConfigRepository`."""

    def __init__(self, config: Config | None = None, config_dir: Path | None = None) -> None:
        self.config = config or Config()
        self.saved: list[Config] = []
        self.config_dir = config_dir or Path("/nonexistent/assay")

    def load(self) -> Config:
        return self.config

    def save(self, config: Config) -> None:
        self.config = config
        self.saved.append(config)


class ReadOnlyConfigStore(MemoryConfigStore):
    """Config store whose writes always fail."""

    def save(self, config: Config) -> None:
        raise ConfigWriteError(
            "Failed to save config: [Errno 13] Permission denied",
            hint="Check that the config directory is writable.",
        )


class ScriptedTransport:
    """Transport returning queued responses and recording every call."""

    def __init__(self, *responses: HttpResponse | Exception) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def send(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        headers: Any = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        self.calls.append(
            {"method": method, "path": path, "params": params, "headers": dict(headers or {})}
        )
        item = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(item, Exception):
            raise item
        return item


def ok_response(body: Any = None, headers: dict[str, str] | None = None) -> HttpResponse:
    return HttpResponse(status_code=200, headers=headers or {}, body=body, text="")


def rate_limited(reset: str | None = None) -> HttpResponse:
    headers = {"x-ratelimit-reset": reset} if reset is not None else {}
    return HttpResponse(status_code=429, headers=headers, body=None, text="")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep real credentials and config out of every test."""
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ASSAY_CONFIG_DIR", str(tmp_path / "assay-config"))
    yield
    logger = logging.getLogger("assay_cli")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def secret_store() -> FakeSecretStore:
    return FakeSecretStore()


@pytest.fixture()
def config_store() -> MemoryConfigStore:
    return MemoryConfigStore()


@pytest.fixture()
def resolver(config_store: MemoryConfigStore, secret_store: FakeSecretStore) -> CredentialResolver:
    return CredentialResolver(config_store, secret_store, environ={})
