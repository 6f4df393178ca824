# mypy: ignore-errors
# tests/v1/test_identity.py
from fastapi import status

from wordcloud_stage.services.identity import TOKEN_LENGTH, TOKEN_PREFIX, generate_user_hash


def test_generate_user_hash_shape() -> None:
    token = generate_user_hash()
    assert token.startswith(TOKEN_PREFIX)
    suffix = token[len(TOKEN_PREFIX):]
    assert len(suffix) == TOKEN_LENGTH
    assert suffix.isalnum() and suffix == suffix.lower()


def test_issue_identity_returns_fresh_tokens(client) -> None:
    first = client.post("/api/v1/identity")
    second = client.post("/api/v1/identity")

    assert first.status_code == status.HTTP_201_CREATED
    assert first.json()["user_hash"].startswith("anon_")
    assert first.json()["user_hash"] != second.json()["user_hash"]
