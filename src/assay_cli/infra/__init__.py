"""Infrastructure layer — external system integration.

This layer wraps all interaction with the HTTP API, the OS credential
vault, the config file, and the browser.  Every raw third-party
exception must be caught here and re-raised as an
:class:`~assay_cli.exceptions.AssayError` subclass (or, for the vault,
absorbed).

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from assay_cli.infra.browser import DASHBOARD_URL, open_dashboard
from assay_cli.infra.config_store import ConfigStore, get_config_dir
from assay_cli.infra.http_transport import RequestsTransport
from assay_cli.infra.keyring_store import KeyringSecretStore

__all__: list[str] = [
    "DASHBOARD_URL",
    "ConfigStore",
    "KeyringSecretStore",
    "RequestsTransport",
    "get_config_dir",
    "open_dashboard",
]
