"""Submission and quota schemas.

Submission outcomes are tagged by ``outcome`` so clients can tell a quota
rejection (render a countdown) from a failure.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from wordcloud_stage.services.text import Surface


class SubmitWordRequest(BaseModel):
    """Schema for a participant submission."""

    user_hash: str = Field(..., min_length=1, max_length=64)
    word: str | None = None
    surface: Surface = "standard"


class SubmissionAccepted(BaseModel):
    """The entry was recorded."""

    outcome: Literal["accepted"] = "accepted"
    entry_id: int
    attempts_left: int
    cooldown_remaining_seconds: int
    degraded: bool = False
    message: str | None = None


class SubmissionQuotaRejected(BaseModel):
    """The participant is cooling down or has no attempts left."""

    outcome: Literal["quota_rejected"] = "quota_rejected"
    reason: Literal["COOLDOWN", "NO_ATTEMPTS"]
    attempts_left: int
    cooldown_remaining_seconds: int


class QuotaResponse(BaseModel):
    """Authoritative quota snapshot used to resynchronise client timers."""

    attempts_left: int
    cooldown_remaining_seconds: int
    cooldown_until: datetime | None = None


class EntryCountResponse(BaseModel):
    """Number of entries a participant has recorded."""

    count: int


class LastSubmissionResponse(BaseModel):
    """Timestamp of a participant's latest entry, if any."""

    last_submission: datetime | None


class IdentityResponse(BaseModel):
    """A fresh anonymous participant token for the client to keep."""

    user_hash: str


class ResetCooldownResponse(BaseModel):
    """Result of clearing a session's quota rows."""

    success: bool
    cleared: int
    cooldown_minutes: int
