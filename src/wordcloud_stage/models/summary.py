"""SQLAlchemy model for the per-cluster aggregate rendered by presenters."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wordcloud_stage.db.session import Base
from wordcloud_stage.db.time import utcnow


class Summary(Base):
    """Rollup of non-blocked entries sharing a cluster key."""

    __tablename__ = "wordcloud_summary"

    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("wordcloud_session.id", ondelete="CASCADE"),
        primary_key=True,
    )
    cluster_key: Mapped[str] = mapped_column(Text, primary_key=True)
    display_word: Mapped[str] = mapped_column(Text, nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
