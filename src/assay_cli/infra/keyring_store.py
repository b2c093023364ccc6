"""``keyring``-backed implementation of :class:`~assay_cli.core.protocols.SecretStore`.

This module is the **only** place in the codebase that imports
``keyring``.  Vault failures are deliberately absorbed here: callers
only ever learn "unavailable" or "not found", never the backend error.
Absorbed errors are logged at DEBUG level.
"""

from __future__ import annotations

import logging
from typing import Any

from assay_cli.exceptions import SecretStoreUnavailableError, SecretStoreWriteError

log = logging.getLogger(__name__)

SERVICE_NAME = "assay-cli"
ACCOUNT_NAME = "api-key-secret"
PROBE_ACCOUNT = "test"


class KeyringSecretStore:
    """Single-secret vault adapter with a per-instance availability cache.

    Usage::

        store = KeyringSecretStore()
        if store.probe():
            store.store("s3cret")
        secret = store.retrieve()

    Construct one instance per process and pass it to whoever needs it;
    :meth:`probe` talks to the backend at most once per instance.
    """

    def __init__(
        self,
        service: str = SERVICE_NAME,
        account: str = ACCOUNT_NAME,
    ) -> None:
        self._service = service
        self._account = account
        self._available: bool | None = None

    @property
    def service(self) -> str:
        return self._service

    @property
    def account(self) -> str:
        return self._account

    # ------------------------------------------------------------------
    # Capability probe
    # ------------------------------------------------------------------

    def probe(self) -> bool:
        """Return whether the vault is usable; cached after the first call."""
        if self._available is None:
            self._available = self._probe_backend()
        return self._available

    def backend_name(self) -> str | None:
        """Return the active keyring backend's class name, if any."""
        module = self._import_keyring()
        if module is None:
            return None
        try:
            return type(module.get_keyring()).__name__
        except Exception as exc:  # noqa: BLE001
            log.debug("Could not determine keyring backend: %s", exc)
            return None

    def _probe_backend(self) -> bool:
        module = self._import_keyring()
        if module is None:
            return False
        try:
            module.get_password(self._service, PROBE_ACCOUNT)
        except Exception as exc:  # noqa: BLE001
            log.debug("Keyring probe failed: %s", exc)
            return False
        return True

    @staticmethod
    def _import_keyring() -> Any:
        try:
            import keyring
        except ModuleNotFoundError:
            log.debug("keyring is not installed; OS vault unavailable")
            return None
        return keyring

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def store(self, secret: str) -> None:
        """Write *secret* to the vault.

        Raises
        ------
        SecretStoreUnavailableError
            When no usable vault exists.
        SecretStoreWriteError
            When the backend refuses the write.
        """
        if not self.probe():
            raise SecretStoreUnavailableError(
                "Keychain not available.",
                hint="Use the ASSAY_API_KEY environment variable instead.",
            )
        import keyring

        try:
            keyring.set_password(self._service, self._account, secret)
        except Exception as exc:
            raise SecretStoreWriteError(
                f"Failed to store API key in keychain: {exc}",
            ) from exc

    def retrieve(self) -> str | None:
        if not self.probe():
            return None
        import keyring

        try:
            return keyring.get_password(self._service, self._account)
        except Exception as exc:  # noqa: BLE001
            log.debug("Keyring read failed: %s", exc)
            return None

    def delete(self) -> None:
        if not self.probe():
            return
        import keyring

        try:
            keyring.delete_password(self._service, self._account)
        except Exception as exc:  # noqa: BLE001
            log.debug("Keyring delete failed: %s", exc)
