# mypy: ignore-errors
# tests/v1/test_summary.py
"""Tests for aggregate, top-N, render and moderation endpoints."""

from fastapi import status
from sqlalchemy import select

from wordcloud_stage.models import Entry
from wordcloud_stage.services.render import color_for, font_size


def _submit_many(client, session_id, words):
    for index, word in enumerate(words):
        response = client.post(
            f"/api/v1/sessions/{session_id}/entries",
            json={"user_hash": f"anon_{index}", "word": word},
        )
        assert response.status_code == status.HTTP_201_CREATED


def test_aggregate_counts_normalized_words(client, live_session) -> None:
    _submit_many(client, live_session.id, ["Cat", "cat!", "  CAT ", "dog"])

    response = client.get(f"/api/v1/sessions/{live_session.id}/aggregate")
    assert response.status_code == status.HTTP_200_OK
    items = response.json()["items"]
    assert [(i["cluster_key"], i["count"]) for i in items] == [("cat", 3), ("dog", 1)]
    assert items[0]["display_word"] == "cat"
    assert items[0]["color"] == color_for("cat")


def test_aggregate_without_grouping_keeps_plurals_apart(client, live_session) -> None:
    _submit_many(client, live_session.id, ["cats", "cat"])

    items = client.get(f"/api/v1/sessions/{live_session.id}/aggregate").json()["items"]
    keys = {i["cluster_key"] for i in items}
    assert keys == {"cats", "cat"}


def test_grouping_merges_near_duplicates(client, grouped_session) -> None:
    _submit_many(client, grouped_session.id, ["Cats", "cat", "flies", "fly"])

    items = client.get(f"/api/v1/sessions/{grouped_session.id}/aggregate").json()["items"]
    counts = {i["cluster_key"]: i["count"] for i in items}
    assert counts == {"cat": 2, "fly": 2}
    # The first submission of a cluster names it.
    assert {i["display_word"] for i in items} == {"cats", "flies"}


def test_aggregate_for_session_without_entries(client, live_session) -> None:
    assert client.get(f"/api/v1/sessions/{live_session.id}/aggregate").json() == {"items": []}


def test_top_words_defaults_to_three(client, live_session) -> None:
    _submit_many(
        client,
        live_session.id,
        ["a", "a", "a", "b", "b", "c", "c", "d"],
    )

    words = client.get(f"/api/v1/sessions/{live_session.id}/top").json()["words"]
    assert [w["cluster_key"] for w in words][:1] == ["a"]
    assert len(words) == 3

    one = client.get(f"/api/v1/sessions/{live_session.id}/top", params={"n": 1}).json()["words"]
    assert [w["cluster_key"] for w in one] == ["a"]


def test_top_words_rejects_invalid_n(client, live_session) -> None:
    response = client.get(f"/api/v1/sessions/{live_session.id}/top", params={"n": 0})
    assert response.status_code == 422


def test_render_items(client, live_session) -> None:
    _submit_many(client, live_session.id, ["sun", "sun", "rain"])

    items = client.get(f"/api/v1/sessions/{live_session.id}/render").json()["items"]
    assert [(i["text"], i["count"]) for i in items] == [("sun", 2), ("rain", 1)]
    assert items[0]["weight"] == font_size(2)
    assert items[1]["color"] == color_for("rain")


def test_delete_aggregate_entry_blocks_entries(client, db_session, live_session) -> None:
    _submit_many(client, live_session.id, ["spam", "spam", "ham"])

    response = client.request(
        "DELETE",
        f"/api/v1/sessions/{live_session.id}/aggregate-entry",
        json={"cluster_key": "spam"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"deleted": True}

    items = client.get(f"/api/v1/sessions/{live_session.id}/aggregate").json()["items"]
    assert [i["cluster_key"] for i in items] == ["ham"]

    blocked = db_session.scalars(
        select(Entry.is_blocked).where(
            Entry.session_id == live_session.id, Entry.cluster_key == "spam"
        )
    ).all()
    assert blocked == [True, True]


def test_delete_aggregate_entry_by_query_param(client, live_session) -> None:
    _submit_many(client, live_session.id, ["spam"])

    response = client.delete(
        f"/api/v1/sessions/{live_session.id}/aggregate-entry",
        params={"cluster_key": "spam"},
    )
    assert response.json() == {"deleted": True}

    again = client.delete(
        f"/api/v1/sessions/{live_session.id}/aggregate-entry",
        params={"cluster_key": "spam"},
    )
    assert again.json() == {"deleted": False}


def test_delete_aggregate_entry_requires_key(client, live_session) -> None:
    response = client.delete(f"/api/v1/sessions/{live_session.id}/aggregate-entry")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Cluster key is required"
