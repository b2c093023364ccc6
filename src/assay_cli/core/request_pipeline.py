"""Authenticated request pipeline with rate-limit retry.

Every logical request runs the same explicit sequence of steps:

1. **Resolve** the API key (:class:`CredentialResolver`).
2. **Check expiration** — expired keys are refused before any network
   call; keys close to expiry produce a warning and proceed.
3. **Attach** the key as the ``X-API-Key`` header.
4. **Send** through the injected :class:`Transport`.
5. **Retry** on HTTP 429 — at most :data:`MAX_RETRIES` times, waiting
   for the server-supplied reset time clamped to
   [:data:`MIN_RETRY_DELAY`, :data:`MAX_RETRY_DELAY`] seconds.

Steps 1–3 run again before every attempt, so a retry never reuses a
credential that expired while waiting.

Guarantees
----------
* No terminal output — user-facing warnings go through the optional
  ``notify`` callback.
* ``sleep`` and ``clock`` are injectable so the retry contract can be
  tested without real waiting.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Mapping
from typing import Any

from assay_cli.core.credentials import CredentialResolver
from assay_cli.core.models import ApiResult, HttpResponse
from assay_cli.core.protocols import Transport
from assay_cli.exceptions import ApiError, CredentialExpiredError, NoCredentialError

log = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"
RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"
KEY_EXPIRES_AT_HEADER = "X-Api-Key-Expires-At"

RATE_LIMITED_STATUS = 429
MAX_RETRIES = 3
MIN_RETRY_DELAY = 1.0
MAX_RETRY_DELAY = 60.0
DEFAULT_RETRY_DELAY = 60.0


def compute_retry_delay(reset_header: str | None, now: float) -> float:
    """Return the number of seconds to wait before retrying a 429.

    *reset_header* is the ``X-RateLimit-Reset`` value in epoch seconds.
    When absent or not numeric, the reset is assumed to be
    :data:`DEFAULT_RETRY_DELAY` seconds away.
    """
    reset_at = now + DEFAULT_RETRY_DELAY
    if reset_header is not None:
        try:
            reset_at = float(reset_header.strip())
        except ValueError:
            log.debug("Ignoring non-numeric %s header %r", RATE_LIMIT_RESET_HEADER, reset_header)
        if not math.isfinite(reset_at):
            reset_at = now + DEFAULT_RETRY_DELAY
    return max(min(reset_at - now, MAX_RETRY_DELAY), MIN_RETRY_DELAY)


class RequestPipeline:
    """Send authenticated API requests with bounded rate-limit retry.

    Parameters
    ----------
    transport:
        HTTP backend bound to the API base URL.
    resolver:
        Source of the API key and its expiration state.
    notify:
        Optional callable receiving user-facing warning strings
        (expiring key, rate-limit waits).
    sleep:
        Blocking wait, :func:`time.sleep` by default.
    clock:
        Epoch-seconds clock, :func:`time.time` by default.
    max_retries:
        Retries allowed after the first attempt.
    """

    def __init__(
        self,
        transport: Transport,
        resolver: CredentialResolver,
        *,
        notify: Callable[[str], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
        max_retries: int = MAX_RETRIES,
    ) -> None:
        self._transport = transport
        self._resolver = resolver
        self._notify = notify
        self._sleep = sleep
        self._clock = clock
        self._max_retries = max_retries

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> ApiResult:
        return self.request("GET", path, params=params)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> ApiResult:
        """Run one logical request through the pipeline.

        Raises
        ------
        NoCredentialError
            When no API key can be resolved.
        CredentialExpiredError
            When the stored key has expired.
        NetworkError
            When the transport cannot reach the API.
        ApiError
            For any HTTP error status, including 429 after retries ran out.
        """
        retries = 0
        while True:
            headers = self._authenticate()
            response = self._transport.send(method, path, params=params, headers=headers)

            if response.status_code != RATE_LIMITED_STATUS or retries >= self._max_retries:
                break

            retries += 1
            delay = compute_retry_delay(response.header(RATE_LIMIT_RESET_HEADER), self._clock())
            log.info(
                "%s %s rate limited - retry %d/%d in %.1f s",
                method, path, retries, self._max_retries, delay,
            )
            self._warn(f"Rate limited. Retrying in {math.ceil(delay)}s...")
            self._sleep(delay)

        return self._finish(response)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _authenticate(self) -> dict[str, str]:
        """Resolve the key, enforce expiration, and build auth headers."""
        api_key = self._resolver.resolve_api_key()
        if not api_key:
            raise NoCredentialError()

        if not self._resolver.uses_environment_override:
            status = self._resolver.expiration_status()
            if status.expired:
                raise CredentialExpiredError(status.message or "API key expired.")
            if status.expiring_soon and status.message:
                self._warn(status.message)

        return {API_KEY_HEADER: api_key}

    @staticmethod
    def _finish(response: HttpResponse) -> ApiResult:
        if not response.ok:
            log.debug("API error %d body: %s", response.status_code, response.text)
            raise ApiError.from_body(response.status_code, response.body)
        return ApiResult(
            data=response.body,
            refreshed_expires_at=response.header(KEY_EXPIRES_AT_HEADER),
        )

    def _warn(self, message: str) -> None:
        if self._notify is None:
            log.warning(message)
        else:
            self._notify(message)
