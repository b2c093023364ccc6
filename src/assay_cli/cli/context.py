"""Per-invocation wiring of stores, transport, pipeline, and service.

Everything is built lazily: ``auth rotate`` never reads the config file
or the vault, and ``doctor`` never builds a transport.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import cached_property

from assay_cli.cli.console import print_warning
from assay_cli.core.assay_service import AssayService
from assay_cli.core.credentials import CredentialResolver
from assay_cli.core.models import Config
from assay_cli.core.request_pipeline import RequestPipeline
from assay_cli.infra.config_store import ConfigStore
from assay_cli.infra.http_transport import RequestsTransport
from assay_cli.infra.keyring_store import KeyringSecretStore

BASE_URL_ENV_VAR = "ASSAY_BASE_URL"


class CliContext:
    """Dependencies shared by the command handlers of one invocation.

    Parameters
    ----------
    output_format:
        Value of the global ``--format`` flag, or ``None`` to use config.
    environ:
        Environment mapping; defaults to :data:`os.environ`.
    """

    def __init__(
        self,
        *,
        output_format: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._output_format = output_format
        self.environ: Mapping[str, str] = environ if environ is not None else os.environ

    @cached_property
    def config_store(self) -> ConfigStore:
        return ConfigStore(environ=self.environ)

    @cached_property
    def secret_store(self) -> KeyringSecretStore:
        return KeyringSecretStore()

    @cached_property
    def resolver(self) -> CredentialResolver:
        return CredentialResolver(self.config_store, self.secret_store, self.environ)

    def load_config(self) -> Config:
        return self.config_store.load()

    def base_url(self, config: Config | None = None) -> str:
        """``$ASSAY_BASE_URL`` when set, else the configured base URL."""
        override = self.environ.get(BASE_URL_ENV_VAR)
        if override:
            return override
        return (config or self.load_config()).base_url

    @cached_property
    def transport(self) -> RequestsTransport:
        return RequestsTransport(self.base_url())

    @cached_property
    def pipeline(self) -> RequestPipeline:
        return RequestPipeline(self.transport, self.resolver, notify=print_warning)

    @cached_property
    def service(self) -> AssayService:
        return AssayService(self.pipeline, self.resolver)

    @property
    def output_format(self) -> str:
        if self._output_format:
            return self._output_format
        return self.load_config().output_format


def build_context(
    output_format: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> CliContext:
    return CliContext(output_format=output_format, environ=environ)
