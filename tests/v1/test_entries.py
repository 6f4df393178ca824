# mypy: ignore-errors
# tests/v1/test_entries.py
"""Tests for participant submissions and quota endpoints."""

import pytest
from fastapi import status

from wordcloud_stage.core.errors import QuotaUnavailableError
from wordcloud_stage.core.settings import settings
from wordcloud_stage.services import quota

USER = "anon_participant"


def _submit(client, session_id, word, user_hash=USER, **extra):
    return client.post(
        f"/api/v1/sessions/{session_id}/entries",
        json={"user_hash": user_hash, "word": word, **extra},
    )


def test_submit_word_success(client, live_session) -> None:
    response = _submit(client, live_session.id, "  Fluffy  ")
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["outcome"] == "accepted"
    assert data["attempts_left"] == 2
    assert data["cooldown_remaining_seconds"] == 0
    assert data["degraded"] is False
    assert isinstance(data["entry_id"], int)


def test_third_submission_starts_cooldown_and_fourth_is_rejected(client, live_session) -> None:
    results = [_submit(client, live_session.id, word).json() for word in ("a", "b", "c")]
    assert [r["attempts_left"] for r in results] == [2, 1, 0]
    assert 0 < results[-1]["cooldown_remaining_seconds"] <= 24 * 60

    response = _submit(client, live_session.id, "d")
    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    data = response.json()
    assert data["outcome"] == "quota_rejected"
    assert data["reason"] == "COOLDOWN"
    assert data["attempts_left"] == 0
    assert 0 < data["cooldown_remaining_seconds"] <= 24 * 60

    count = client.get(
        f"/api/v1/sessions/{live_session.id}/entry-count", params={"user_hash": USER}
    ).json()
    assert count == {"count": 3}


def test_submission_accepts_word_at_length_limit(client, live_session) -> None:
    assert _submit(client, live_session.id, "a" * 25).status_code == status.HTTP_201_CREATED


def test_submission_rejects_word_over_length_limit(client, live_session) -> None:
    response = _submit(client, live_session.id, "a" * 26)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {
        "outcome": "invalid_input",
        "detail": "Word must be 25 characters or less",
    }


@pytest.mark.parametrize("word", ["", "   ", None])
def test_submission_rejects_empty_word(client, live_session, word) -> None:
    response = _submit(client, live_session.id, word)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Word cannot be empty"


def test_rejected_input_does_not_consume_attempt(client, live_session) -> None:
    _submit(client, live_session.id, "a" * 40)

    response = client.get(
        f"/api/v1/sessions/{live_session.id}/quota", params={"user_hash": USER}
    )
    assert response.json()["attempts_left"] == 3


def test_compact_surface_rules(client, live_session) -> None:
    ok = _submit(client, live_session.id, "Sleepy", surface="compact")
    assert ok.status_code == status.HTTP_201_CREATED

    too_long = _submit(client, live_session.id, "abcdefghijk", surface="compact")
    assert too_long.status_code == status.HTTP_400_BAD_REQUEST
    assert too_long.json()["detail"] == "Word must be 1-10 characters"

    digits = _submit(client, live_session.id, "cat2", surface="compact")
    assert digits.status_code == status.HTTP_400_BAD_REQUEST


def test_submission_to_unknown_session(client) -> None:
    response = _submit(client, "missing", "cat")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["outcome"] == "not_found"


def test_submission_to_closed_session_is_rejected(client, make_session) -> None:
    session = make_session(status="closed")
    response = _submit(client, session.id, "cat")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Session is closed"


def test_quota_unavailable_falls_back_to_unguarded_insert(client, live_session, monkeypatch) -> None:
    def _unavailable(*args, **kwargs):
        raise QuotaUnavailableError("Quota operation failed")

    monkeypatch.setattr(quota, "attempt_submission", _unavailable)

    response = _submit(client, live_session.id, "cat")
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["degraded"] is True
    assert data["message"] == "Word submitted (quota system not active)"
    assert data["attempts_left"] == 3

    aggregate = client.get(f"/api/v1/sessions/{live_session.id}/aggregate").json()
    assert aggregate["items"][0]["count"] == 1


def test_disabled_enforcement_skips_quota(client, live_session, monkeypatch) -> None:
    monkeypatch.setattr(settings, "quota_enforcement_enabled", False)

    for word in ("a", "b", "c", "d"):
        response = _submit(client, live_session.id, word)
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["degraded"] is True


def test_quota_endpoint_reports_state(client, live_session) -> None:
    url = f"/api/v1/sessions/{live_session.id}/quota"
    assert client.get(url, params={"user_hash": USER}).json() == {
        "attempts_left": 3,
        "cooldown_remaining_seconds": 0,
        "cooldown_until": None,
    }

    for word in ("a", "b", "c"):
        _submit(client, live_session.id, word)

    data = client.get(url, params={"user_hash": USER}).json()
    assert data["attempts_left"] == 0
    assert data["cooldown_remaining_seconds"] > 0
    assert data["cooldown_until"] is not None


def test_quota_endpoint_requires_user_hash(client, live_session) -> None:
    response = client.get(f"/api/v1/sessions/{live_session.id}/quota")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "user_hash is required"


def test_last_submission(client, live_session) -> None:
    url = f"/api/v1/sessions/{live_session.id}/last-submission"
    assert client.get(url, params={"user_hash": USER}).json() == {"last_submission": None}

    _submit(client, live_session.id, "cat")

    assert client.get(url, params={"user_hash": USER}).json()["last_submission"] is not None


def test_entry_count_is_per_participant(client, live_session) -> None:
    _submit(client, live_session.id, "cat")
    _submit(client, live_session.id, "dog", user_hash="anon_other")

    url = f"/api/v1/sessions/{live_session.id}/entry-count"
    assert client.get(url, params={"user_hash": USER}).json() == {"count": 1}
    assert client.get(url, params={"user_hash": "nobody"}).json() == {"count": 0}
