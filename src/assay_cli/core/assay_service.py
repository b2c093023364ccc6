"""Core Assay service — one method per consumed API endpoint.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~assay_cli.core.request_pipeline.RequestPipeline`
injected at construction time and never touches HTTP, the vault, or the
terminal directly.

Expiration refresh
------------------
When a response carries ``X-Api-Key-Expires-At`` and the credential
came from config (not ``ASSAY_API_KEY``), the new timestamp is written
back to config if it differs from the stored one.  A failed write is
logged and never fails the request that carried the header.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any
from urllib.parse import quote

from assay_cli.core.credentials import CredentialResolver
from assay_cli.core.models import ApiResult, VerificationResult
from assay_cli.core.params import DEFAULT_FILTER, DEFAULT_LIMIT, build_search_params
from assay_cli.core.protocols import Transport
from assay_cli.core.request_pipeline import API_KEY_HEADER, RequestPipeline
from assay_cli.exceptions import AssayError, ConfigWriteError

log = logging.getLogger(__name__)

ME_PATH = "/api/v1/me"
DOCUMENTS_PATH = "/api/v1/documents"
SEARCH_PATH = "/api/v1/documents/search"
THEMES_PATH = "/api/v1/themes"
VERIFY_TIMEOUT = 10.0


class AssayService:
    """Read-only operations against the Assay API.

    Parameters
    ----------
    pipeline:
        Authenticated request pipeline.
    resolver:
        The resolver the pipeline uses; consulted to decide whether
        refreshed expirations are persisted.
    """

    def __init__(self, pipeline: RequestPipeline, resolver: CredentialResolver) -> None:
        self._pipeline = pipeline
        self._resolver = resolver

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def get_me(self) -> Any:
        return self._get(ME_PATH)

    def list_documents(
        self,
        *,
        filter_value: str = DEFAULT_FILTER,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
    ) -> Any:
        params: dict[str, Any] = {"filter": filter_value, "limit": limit}
        if cursor:
            params["cursor"] = cursor
        return self._get(DOCUMENTS_PATH, params)

    def get_document(self, document_id: str) -> Any:
        return self._get(_document_path(document_id))

    def get_summary(self, document_id: str, summary_type: str | None = None) -> Any:
        params = {"type": summary_type} if summary_type else None
        return self._get(_document_path(document_id) + "/summary", params)

    def search_documents(
        self,
        *,
        query: str | None = None,
        theme: str | None = None,
        author: str | None = None,
        title: str | None = None,
        keywords: str | None = None,
        filter_value: str = DEFAULT_FILTER,
        limit: int = DEFAULT_LIMIT,
    ) -> Any:
        params = build_search_params(
            query=query,
            theme=theme,
            author=author,
            title=title,
            keywords=keywords,
            filter_value=filter_value,
            limit=limit,
        )
        return self._get(SEARCH_PATH, params)

    def list_themes(self, domain: str | None = None) -> Any:
        params = {"domain": domain} if domain else None
        return self._get(THEMES_PATH, params)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        result = self._pipeline.get(path, params)
        self._remember_expiration(result)
        return result.data

    def _remember_expiration(self, result: ApiResult) -> None:
        refreshed = result.refreshed_expires_at
        if not refreshed or self._resolver.uses_environment_override:
            return
        store = self._resolver.config_store
        config = store.load()
        if not config.key_id or config.key_expires_at == refreshed:
            return
        log.debug("Key expiration refreshed: %s -> %s", config.key_expires_at, refreshed)
        try:
            store.save(replace(config, key_expires_at=refreshed))
        except ConfigWriteError as exc:
            log.debug("Could not persist refreshed expiration: %s", exc)


def verify_api_key(transport: Transport, api_key: str) -> VerificationResult:
    """Check *api_key* against ``/api/v1/me`` outside the pipeline.

    Used by login before anything is persisted.  Any failure — network,
    HTTP error, unexpected body — counts as "not valid".
    """
    try:
        response = transport.send(
            "GET",
            ME_PATH,
            headers={API_KEY_HEADER: api_key},
            timeout=VERIFY_TIMEOUT,
        )
    except AssayError as exc:
        log.debug("Key verification request failed: %s", exc)
        return VerificationResult(valid=False)

    body = response.body
    if not response.ok or not isinstance(body, dict):
        log.debug("Key verification rejected with HTTP %d", response.status_code)
        return VerificationResult(valid=False)

    data = body.get("data")
    if not body.get("success") or not isinstance(data, dict):
        return VerificationResult(valid=False)

    expires_at = data.get("expiresAt")
    return VerificationResult(
        valid=True,
        expires_at=str(expires_at) if expires_at else None,
    )


def _document_path(document_id: str) -> str:
    return f"{DOCUMENTS_PATH}/{quote(document_id, safe='')}"
