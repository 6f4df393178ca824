"""Session-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

SessionStatus = Literal["draft", "live", "closed"]


class SessionCreate(BaseModel):
    """Schema for creating a new session.

    Range checks on the numeric limits happen in the store layer so that
    violations surface as 400 rather than 422.
    """

    question: str | None = Field(None, description="Prompt shown to participants")
    description: str | None = None
    background_image_url: str | None = None
    max_entries_per_user: int | None = None
    cooldown_minutes: int | None = Field(
        None,
        validation_alias=AliasChoices("cooldown_minutes", "cooldown_hours"),
        description="Cooldown window in minutes; cooldown_hours is accepted as a legacy name",
    )
    time_limit_sec: int | None = None
    grouping_enabled: bool = False
    theme: str | None = None
    created_by: str | None = None


class SessionUpdate(BaseModel):
    """Schema for partial session updates. Only sent fields are applied."""

    question: str | None = None
    description: str | None = None
    background_image_url: str | None = None
    max_entries_per_user: int | None = None
    cooldown_minutes: int | None = Field(
        None,
        validation_alias=AliasChoices("cooldown_minutes", "cooldown_hours"),
    )
    time_limit_sec: int | None = None
    grouping_enabled: bool | None = None
    theme: str | None = None


class StatusUpdate(BaseModel):
    """Schema for a lifecycle transition. The value is checked by the store."""

    status: str | None = None


class SessionResponse(BaseModel):
    """Schema for session information returned by the API."""

    id: str
    question: str
    description: str | None
    background_image_url: str | None
    theme: str
    max_entries_per_user: int
    cooldown_minutes: int
    time_limit_sec: int | None
    grouping_enabled: bool
    status: SessionStatus
    created_by: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SessionListItem(SessionResponse):
    """Session with participation counters for the presenter list."""

    participant_count: int
    word_count: int
    total_entries: int


class SessionCreated(BaseModel):
    """Response for a newly created session."""

    session_id: str


class SessionOrderUpdate(BaseModel):
    """Replace-all body for the presenter's session ordering."""

    session_ids: list[str] = Field(
        ...,
        validation_alias=AliasChoices("session_ids", "sessionIds"),
    )


class SessionOrderItem(BaseModel):
    """One position in the presenter's session ordering."""

    session_id: str
    order_index: int

    model_config = ConfigDict(from_attributes=True)
