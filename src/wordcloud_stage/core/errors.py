"""Domain exceptions raised by the Word Cloud Stage services.

The API layer maps each exception to a tagged JSON response (see
``wordcloud_stage.main``). Services raise; they never build HTTP responses.
"""

from __future__ import annotations


class WordCloudError(RuntimeError):
    """Base exception for all word cloud failures."""

    outcome: str = "server_error"
    status_code: int = 500


class InvalidInputError(WordCloudError):
    """Raised when participant or presenter input fails validation."""

    outcome = "invalid_input"
    status_code = 400


class SessionNotFoundError(WordCloudError):
    """Raised when a session id does not resolve to a stored session."""

    outcome = "not_found"
    status_code = 404

    def __init__(self, session_id: str) -> None:
        super().__init__("Session not found")
        self.session_id = session_id


class QuotaRejectedError(WordCloudError):
    """Raised when a participant has no attempts left or is cooling down."""

    outcome = "quota_rejected"
    status_code = 429

    def __init__(
        self,
        reason: str,
        *,
        attempts_left: int,
        cooldown_remaining_seconds: int = 0,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.attempts_left = attempts_left
        self.cooldown_remaining_seconds = cooldown_remaining_seconds


class QuotaUnavailableError(WordCloudError):
    """Raised when the atomic quota operation cannot run.

    The submission endpoint absorbs this error and falls back to an
    unguarded insert.
    """
