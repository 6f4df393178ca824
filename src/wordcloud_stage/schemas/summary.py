"""Aggregate and renderer schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SummaryItem(BaseModel):
    """One clustered word with its running count."""

    session_id: str
    cluster_key: str
    display_word: str
    count: int
    color: str | None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SummaryResponse(BaseModel):
    """Full aggregate, highest count first."""

    items: list[SummaryItem]


class TopWordsResponse(BaseModel):
    """Top-N slice of the aggregate."""

    words: list[SummaryItem]


class RenderItem(BaseModel):
    """Renderer input: text, font size and color."""

    text: str
    count: int
    weight: float
    color: str


class RenderResponse(BaseModel):
    """Renderer-ready list for the presenter canvas."""

    items: list[RenderItem]


class AggregateEntryDelete(BaseModel):
    """Body naming the clustered word to remove."""

    cluster_key: str | None = None


class AggregateEntryDeleted(BaseModel):
    """Whether an aggregate row was removed."""

    deleted: bool


class ImageUploadResponse(BaseModel):
    """An uploaded background image as an inline data URI."""

    url: str
    filename: str | None
    size: int
    type: str
