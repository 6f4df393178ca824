"""SQLAlchemy models for word cloud sessions and their presenter ordering."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wordcloud_stage.db.session import Base
from wordcloud_stage.db.time import utcnow

SESSION_STATUS_DRAFT = "draft"
SESSION_STATUS_LIVE = "live"
SESSION_STATUS_CLOSED = "closed"
SESSION_STATUSES = (SESSION_STATUS_DRAFT, SESSION_STATUS_LIVE, SESSION_STATUS_CLOSED)


def _new_session_id() -> str:
    return str(uuid.uuid4())


class WordCloudSession(Base):
    """One prompt/collection campaign with its own lifecycle and limits."""

    __tablename__ = "wordcloud_session"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_session_id)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Either an external URL or an embedded data URI from the upload endpoint.
    background_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    theme: Mapped[str] = mapped_column(String(64), nullable=False, default="default")

    max_entries_per_user: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    # Minutes. Older deployments called this column cooldown_hours.
    cooldown_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=24)
    time_limit_sec: Mapped[int | None] = mapped_column(Integer, nullable=True)
    grouping_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # draft -> live -> closed; closed -> live reopens.
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=SESSION_STATUS_DRAFT)
    created_by: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )


class SessionOrder(Base):
    """Presenter-defined display position of a session in the session list."""

    __tablename__ = "session_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("wordcloud_session.id", ondelete="CASCADE"),
        nullable=False,
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
