"""Core / service layer — credential logic, the request pipeline, and services.

Rules
-----
* No ``print()`` calls.
* No direct HTTP, vault, or filesystem access — only through protocols.
* No imports from ``cli`` or ``infra``.
"""

from assay_cli.core.assay_service import AssayService, verify_api_key
from assay_cli.core.credentials import CredentialResolver, check_expiration, parse_api_key
from assay_cli.core.models import ApiResult, Config, ExpirationStatus, HttpResponse
from assay_cli.core.protocols import ConfigRepository, SecretStore, Transport
from assay_cli.core.request_pipeline import RequestPipeline, compute_retry_delay

__all__: list[str] = [
    "ApiResult",
    "AssayService",
    "Config",
    "ConfigRepository",
    "CredentialResolver",
    "ExpirationStatus",
    "HttpResponse",
    "RequestPipeline",
    "SecretStore",
    "Transport",
    "check_expiration",
    "compute_retry_delay",
    "parse_api_key",
    "verify_api_key",
]
