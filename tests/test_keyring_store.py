"""Tests for the keyring-backed secret store (infra/keyring_store.py).

``keyring`` is replaced with a mock in ``sys.modules``; the real OS
keychain is never touched.

Coverage:
* Probe result is cached per instance.
* Missing or broken backends make the store unavailable, not fatal.
* ``store`` raises typed errors; ``retrieve``/``delete`` swallow failures.
"""

from __future__ import annotations

import sys
from unittest.mock import MagicMock

import pytest

from assay_cli.exceptions import SecretStoreUnavailableError, SecretStoreWriteError
from assay_cli.infra.keyring_store import ACCOUNT_NAME, SERVICE_NAME, KeyringSecretStore


@pytest.fixture()
def fake_keyring(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    module = MagicMock()
    module.get_password.return_value = None
    monkeypatch.setitem(sys.modules, "keyring", module)
    return module


class TestProbe:
    def test_probe_succeeds_with_working_backend(self, fake_keyring: MagicMock) -> None:
        store = KeyringSecretStore()
        assert store.probe() is True
        fake_keyring.get_password.assert_called_once_with(SERVICE_NAME, "test")

    def test_probe_is_cached(self, fake_keyring: MagicMock) -> None:
        store = KeyringSecretStore()
        store.probe()
        store.probe()
        store.retrieve()
        probe_calls = [
            c for c in fake_keyring.get_password.call_args_list if c.args[1] == "test"
        ]
        assert len(probe_calls) == 1

    def test_probe_fails_when_backend_raises(self, fake_keyring: MagicMock) -> None:
        fake_keyring.get_password.side_effect = RuntimeError("no backend")
        assert KeyringSecretStore().probe() is False

    def test_probe_fails_when_keyring_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "keyring", None)
        store = KeyringSecretStore()
        assert store.probe() is False
        assert store.backend_name() is None


class TestStore:
    def test_store_writes_secret(self, fake_keyring: MagicMock) -> None:
        KeyringSecretStore().store("s3cret")
        fake_keyring.set_password.assert_called_once_with(SERVICE_NAME, ACCOUNT_NAME, "s3cret")

    def test_store_unavailable_raises(self, fake_keyring: MagicMock) -> None:
        fake_keyring.get_password.side_effect = RuntimeError("no backend")
        with pytest.raises(SecretStoreUnavailableError):
            KeyringSecretStore().store("s3cret")

    def test_store_write_failure_raises(self, fake_keyring: MagicMock) -> None:
        fake_keyring.set_password.side_effect = RuntimeError("locked")
        with pytest.raises(SecretStoreWriteError, match="locked"):
            KeyringSecretStore().store("s3cret")


class TestRetrieveAndDelete:
    def test_retrieve_returns_secret(self, fake_keyring: MagicMock) -> None:
        fake_keyring.get_password.side_effect = (
            lambda service, account: "s3cret" if account == ACCOUNT_NAME else None
        )
        assert KeyringSecretStore().retrieve() == "s3cret"

    def test_retrieve_swallows_errors(self, fake_keyring: MagicMock) -> None:
        store = KeyringSecretStore()
        store.probe()
        fake_keyring.get_password.side_effect = RuntimeError("locked")
        assert store.retrieve() is None

    def test_retrieve_when_unavailable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "keyring", None)
        assert KeyringSecretStore().retrieve() is None

    def test_delete_swallows_errors(self, fake_keyring: MagicMock) -> None:
        fake_keyring.delete_password.side_effect = RuntimeError("not found")
        KeyringSecretStore().delete()
        fake_keyring.delete_password.assert_called_once_with(SERVICE_NAME, ACCOUNT_NAME)

    def test_backend_name(self, fake_keyring: MagicMock) -> None:
        class FakeBackend:
            pass

        fake_keyring.get_keyring.return_value = FakeBackend()
        assert KeyringSecretStore().backend_name() == "FakeBackend"
