"""Text normalization, validation and cluster-key derivation for submissions."""

from __future__ import annotations

import re
from typing import Final, Literal

from wordcloud_stage.core.errors import InvalidInputError
from wordcloud_stage.core.settings import settings

Surface = Literal["standard", "compact"]

# English + Indonesian. Only consulted when PROFANITY_FILTER_ENABLED is set.
PROFANITY_LIST: Final[tuple[str, ...]] = (
    "fuck", "shit", "damn", "bitch", "ass", "bastard", "hell", "crap",
    "piss", "dick", "cock", "pussy", "whore", "slut",
    "anjing", "babi", "kontol", "memek", "pepek", "jancok", "bangsat",
    "kampret", "tolol", "goblok", "tai", "asu", "kimak", "bajingan",
)

# Suffix rules for the naive stemmer. Order matters and each fires at most once.
SUFFIX_RULES: Final[tuple[tuple[str, str], ...]] = (
    ("ies", "y"),
    ("s", ""),
    ("ed", ""),
    ("ing", ""),
)

_PUNCTUATION_RE: Final = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE_RE: Final = re.compile(r"\s+")
_COMPACT_RE: Final = re.compile(r"[A-Za-z\s]+")


def normalize_text(text: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace.

    Only ASCII word characters and whitespace survive. The result is trimmed
    last so that ``normalize_text`` is idempotent.
    """
    lowered = text.lower()
    stripped = _PUNCTUATION_RE.sub("", lowered)
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def cluster_key(text: str) -> str:
    """Return the grouping key used to count near-duplicate submissions.

    This is a heuristic, not a stemmer: ``"boss"`` becomes ``"bos"`` and
    ``"loved"`` becomes ``"lov"``.
    """
    key = normalize_text(text)
    for suffix, replacement in SUFFIX_RULES:
        if key.endswith(suffix):
            key = key[: len(key) - len(suffix)] + replacement
    return key


def grouping_key(text: str, *, grouping_enabled: bool) -> str:
    """Return the aggregate key for a session's grouping mode."""
    if grouping_enabled:
        return cluster_key(text)
    return normalize_text(text)


def is_profane(word: str) -> bool:
    """Return True if the normalized word contains a listed term."""
    normalized = normalize_text(word)
    return any(term in normalized for term in PROFANITY_LIST)


def validate_word(
    word: str | None,
    surface: Surface = "standard",
    *,
    max_length: int | None = None,
    profanity_filter: bool | None = None,
) -> str:
    """Validate a raw submission for the given surface.

    Args:
        word: Raw participant input.
        surface: ``standard`` (longer free text) or ``compact`` (short, letters only).
        max_length: Override for the surface's configured length limit.
        profanity_filter: Override for ``settings.profanity_filter_enabled``.

    Returns:
        The input with surrounding whitespace removed.

    Raises:
        InvalidInputError: If the word is empty, too long or not allowed.
    """
    # Punctuation-only input would aggregate under an empty key.
    if word is None or not normalize_text(word):
        raise InvalidInputError("Word cannot be empty")

    limit = max_length if max_length is not None else settings.max_length_by_surface[surface]
    trimmed = word.strip()

    if surface == "compact":
        if len(trimmed) > limit:
            raise InvalidInputError(f"Word must be 1-{limit} characters")
        if not _COMPACT_RE.fullmatch(trimmed):
            raise InvalidInputError("Word may only contain letters")
    elif len(word) > limit:
        raise InvalidInputError(f"Word must be {limit} characters or less")

    check_profanity = (
        settings.profanity_filter_enabled if profanity_filter is None else profanity_filter
    )
    if check_profanity and is_profane(trimmed):
        raise InvalidInputError("Word contains inappropriate content")

    return trimmed
