"""SQLAlchemy model tracking per-participant submission quota."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from wordcloud_stage.db.session import Base
from wordcloud_stage.db.time import utcnow


class WordQuota(Base):
    """Attempts remaining and cooldown expiry for one (session, participant)."""

    __tablename__ = "word_quota"

    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("wordcloud_session.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    attempts_left: Mapped[int] = mapped_column(Integer, nullable=False)
    # Non-null only while attempts_left is 0 and the window has not been reset.
    cooldown_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
