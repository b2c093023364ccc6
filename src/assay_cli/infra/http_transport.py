"""``requests``-backed implementation of :class:`~assay_cli.core.protocols.Transport`.

This module is the **only** place in the codebase that imports
``requests``.  Every HTTP status comes back as an
:class:`~assay_cli.core.models.HttpResponse`; only failures to get a
response at all are raised, as :class:`~assay_cli.exceptions.NetworkError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from assay_cli.core.error_messages import CONNECTION_ERROR_MESSAGE
from assay_cli.core.models import HttpResponse
from assay_cli.exceptions import EnvironmentError, NetworkError
from assay_cli.version import __version__

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class RequestsTransport:
    """HTTP client bound to one API base URL.

    Parameters
    ----------
    base_url:
        Prefix for every request path, e.g.
        ``https://us-east4-pdfsummaries.cloudfunctions.net/api``.
    timeout:
        Per-request timeout in seconds unless overridden in :meth:`send`.
    """

    def __init__(self, base_url: str, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session: Any = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_session(self) -> Any:
        if self._session is None:
            requests = _import_requests()
            session = requests.Session()
            session.headers.update(
                {
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "User-Agent": f"assay-cli/{__version__}",
                }
            )
            self._session = session
        return self._session

    def send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Send one request and wrap whatever comes back.

        Raises
        ------
        NetworkError
            When the connection fails or times out.
        """
        session = self._get_session()
        requests = _import_requests()
        url = f"{self._base_url}/{path.lstrip('/')}"
        query = {k: v for k, v in (params or {}).items() if v is not None}

        log.debug("%s %s params=%s", method, url, query)
        try:
            response = session.request(
                method,
                url,
                params=query or None,
                headers=dict(headers or {}),
                timeout=timeout if timeout is not None else self._timeout,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as exc:
            raise NetworkError(CONNECTION_ERROR_MESSAGE) from exc
        except requests.exceptions.RequestException as exc:
            raise NetworkError(str(exc)) from exc

        return _wrap_response(response)


def _wrap_response(response: Any) -> HttpResponse:
    try:
        body: Any = response.json()
    except ValueError:
        body = None
    return HttpResponse(
        status_code=response.status_code,
        headers={k.lower(): v for k, v in response.headers.items()},
        body=body,
        text=response.text,
    )


def _import_requests() -> Any:
    try:
        import requests
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "requests is not installed. Install with: pip install requests",
        ) from exc
    return requests
