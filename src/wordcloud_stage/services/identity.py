"""Anonymous participant identity tokens."""

from __future__ import annotations

import secrets
import string

_ALPHABET = string.digits + string.ascii_lowercase
TOKEN_PREFIX = "anon_"
TOKEN_LENGTH = 13


def generate_user_hash() -> str:
    """Return a fresh opaque participant token.

    Tokens are device-scoped and weakly durable: the client stores them and
    may lose them. They carry no authentication.
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(TOKEN_LENGTH))
    return f"{TOKEN_PREFIX}{suffix}"
