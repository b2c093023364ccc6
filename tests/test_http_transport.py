"""Tests for the requests-backed transport (infra/http_transport.py).

HTTP is intercepted with the ``requests_mock`` pytest fixture.

Coverage:
* URL joining, query encoding, and ``None`` params dropped.
* Default headers plus per-call headers.
* Error statuses (including 429) come back as responses.
* Connection failures become :class:`NetworkError`.
"""

from __future__ import annotations

import pytest
import requests

from assay_cli.core.error_messages import CONNECTION_ERROR_MESSAGE
from assay_cli.exceptions import NetworkError
from assay_cli.infra.http_transport import RequestsTransport
from assay_cli.version import __version__

BASE = "https://api.example.test/api"


class TestRequestsTransport:
    def test_joins_base_url_and_path(self, requests_mock) -> None:
        requests_mock.get(f"{BASE}/api/v1/me", json={"success": True})
        response = RequestsTransport(BASE + "/").send("GET", "/api/v1/me")

        assert response.status_code == 200
        assert response.ok
        assert response.body == {"success": True}

    def test_query_params_drop_none(self, requests_mock) -> None:
        requests_mock.get(f"{BASE}/api/v1/documents", json={})
        RequestsTransport(BASE).send(
            "GET", "/api/v1/documents", params={"filter": "public", "limit": 5, "cursor": None},
        )

        assert requests_mock.last_request.qs == {"filter": ["public"], "limit": ["5"]}

    def test_sends_default_and_call_headers(self, requests_mock) -> None:
        requests_mock.get(f"{BASE}/api/v1/me", json={})
        RequestsTransport(BASE).send("GET", "/api/v1/me", headers={"X-API-Key": "ask_live_a_b"})

        sent = requests_mock.last_request.headers
        assert sent["X-API-Key"] == "ask_live_a_b"
        assert sent["Accept"] == "application/json"
        assert sent["User-Agent"] == f"assay-cli/{__version__}"

    def test_headers_are_lower_cased(self, requests_mock) -> None:
        requests_mock.get(
            f"{BASE}/api/v1/me",
            json={},
            headers={"X-Api-Key-Expires-At": "2030-01-01T00:00:00Z"},
        )
        response = RequestsTransport(BASE).send("GET", "/api/v1/me")
        assert response.header("X-Api-Key-Expires-At") == "2030-01-01T00:00:00Z"
        assert "x-api-key-expires-at" in response.headers

    def test_rate_limit_is_returned_not_raised(self, requests_mock) -> None:
        requests_mock.get(
            f"{BASE}/api/v1/me",
            status_code=429,
            json={"error": {"code": "RATE_LIMIT_EXCEEDED"}},
            headers={"X-RateLimit-Reset": "1700000000"},
        )
        response = RequestsTransport(BASE).send("GET", "/api/v1/me")

        assert response.status_code == 429
        assert not response.ok
        assert response.header("x-ratelimit-reset") == "1700000000"

    def test_non_json_body(self, requests_mock) -> None:
        requests_mock.get(f"{BASE}/api/v1/me", status_code=502, text="<html>bad gateway</html>")
        response = RequestsTransport(BASE).send("GET", "/api/v1/me")

        assert response.body is None
        assert response.text == "<html>bad gateway</html>"

    def test_connection_error_becomes_network_error(self, requests_mock) -> None:
        requests_mock.get(f"{BASE}/api/v1/me", exc=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(NetworkError) as exc_info:
            RequestsTransport(BASE).send("GET", "/api/v1/me")
        assert str(exc_info.value) == CONNECTION_ERROR_MESSAGE

    def test_timeout_becomes_network_error(self, requests_mock) -> None:
        requests_mock.get(f"{BASE}/api/v1/me", exc=requests.exceptions.ConnectTimeout)
        with pytest.raises(NetworkError):
            RequestsTransport(BASE).send("GET", "/api/v1/me", timeout=1.0)
