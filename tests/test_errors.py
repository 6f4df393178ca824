# tests/test_errors.py
"""Tests for the tagged error responses returned by the API."""

from typing import Any

from fastapi import status
from fastapi.testclient import TestClient

from wordcloud_stage.core.errors import QuotaUnavailableError
from wordcloud_stage.services import store


def test_unexpected_error_returns_server_error(app: Any, notifier: Any, live_session: Any, monkeypatch: Any) -> None:
    def _boom(*args: Any, **kwargs: Any) -> None:
        raise RuntimeError("database exploded")

    monkeypatch.setattr(store, "get_aggregate", _boom)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get(f"/api/v1/sessions/{live_session.id}/aggregate")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"outcome": "server_error", "detail": "Internal server error"}


def test_service_failure_hides_details(app: Any, notifier: Any, live_session: Any, monkeypatch: Any) -> None:
    def _unavailable(*args: Any, **kwargs: Any) -> None:
        raise QuotaUnavailableError("connection refused by 10.0.0.5")

    monkeypatch.setattr(store, "get_aggregate", _unavailable)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get(f"/api/v1/sessions/{live_session.id}/aggregate")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["outcome"] == "server_error"
    assert "10.0.0.5" not in response.text


def test_malformed_body_is_unprocessable(client: Any, live_session: Any) -> None:
    response = client.post(
        f"/api/v1/sessions/{live_session.id}/entries",
        json={"word": "cat"},
    )
    assert response.status_code == 422
