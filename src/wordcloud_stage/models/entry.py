"""SQLAlchemy model for raw participant submissions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wordcloud_stage.db.session import Base
from wordcloud_stage.db.time import utcnow


class Entry(Base):
    """A single submission. Immutable apart from the moderation flag."""

    __tablename__ = "wordcloud_entry"
    __table_args__ = (
        Index("ix_wordcloud_entry_session_user", "session_id", "user_hash"),
        Index("ix_wordcloud_entry_session_cluster", "session_id", "cluster_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("wordcloud_session.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    word_raw: Mapped[str] = mapped_column(Text, nullable=False)
    word_norm: Mapped[str] = mapped_column(Text, nullable=False)
    cluster_key: Mapped[str] = mapped_column(Text, nullable=False)
    # Set by moderation only; never cleared.
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
