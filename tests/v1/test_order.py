# mypy: ignore-errors
# tests/v1/test_order.py
"""Tests for the presenter's session ordering."""

from fastapi import status


def test_order_is_empty_by_default(client) -> None:
    response = client.get("/api/v1/session-order")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"order": []}


def test_save_order_replaces_previous(client, make_session) -> None:
    first, second, third = (make_session(question=f"Q{i}") for i in range(3))

    response = client.post(
        "/api/v1/session-order",
        json={"session_ids": [third.id, first.id, second.id]},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True

    client.post("/api/v1/session-order", json={"sessionIds": [second.id, first.id]})

    order = client.get("/api/v1/session-order").json()["order"]
    assert order == [
        {"session_id": second.id, "order_index": 0},
        {"session_id": first.id, "order_index": 1},
    ]


def test_save_order_rejects_unknown_sessions(client, make_session) -> None:
    session = make_session()
    response = client.post(
        "/api/v1/session-order",
        json={"session_ids": [session.id, "ghost"]},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Unknown session ids: ghost"
