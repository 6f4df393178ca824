"""Persistence operations for sessions, entries, the aggregate and ordering.

Functions here flush but do not commit unless their name says otherwise;
the caller owns the transaction so that an entry insert and its aggregate
update land together.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wordcloud_stage.core.errors import InvalidInputError, SessionNotFoundError
from wordcloud_stage.core.settings import settings
from wordcloud_stage.db.time import utcnow
from wordcloud_stage.models import Entry, SessionOrder, Summary, WordCloudSession, WordQuota
from wordcloud_stage.models.session import SESSION_STATUSES
from wordcloud_stage.services.render import color_for
from wordcloud_stage.services.text import grouping_key, normalize_text

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "question",
    "description",
    "background_image_url",
    "max_entries_per_user",
    "cooldown_minutes",
    "time_limit_sec",
    "grouping_enabled",
    "theme",
)

# Columns a partial update may change but never clear.
NON_NULLABLE_FIELDS = (
    "max_entries_per_user",
    "cooldown_minutes",
    "grouping_enabled",
    "theme",
)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _require_question(question: str | None) -> str:
    if question is None or not question.strip():
        raise InvalidInputError("Question is required")
    return question.strip()


def _check_limits(values: dict[str, Any]) -> None:
    max_entries = values.get("max_entries_per_user")
    if max_entries is not None and not 1 <= max_entries <= settings.max_entries_per_user_limit:
        raise InvalidInputError(
            f"Max entries per user must be between 1 and {settings.max_entries_per_user_limit}"
        )
    cooldown = values.get("cooldown_minutes")
    if cooldown is not None and not 1 <= cooldown <= settings.max_cooldown_minutes:
        raise InvalidInputError(
            f"Cooldown minutes must be between 1 and {settings.max_cooldown_minutes}"
        )


def create_session(db: Session, values: dict[str, Any]) -> WordCloudSession:
    """Create a draft session, applying configured defaults."""
    question = _require_question(values.get("question"))
    _check_limits(values)
    session = WordCloudSession(
        question=question,
        description=_blank_to_none(values.get("description")),
        background_image_url=_blank_to_none(values.get("background_image_url")),
        max_entries_per_user=values.get("max_entries_per_user") or settings.default_max_entries_per_user,
        cooldown_minutes=values.get("cooldown_minutes") or settings.default_cooldown_minutes,
        time_limit_sec=values.get("time_limit_sec") or None,
        grouping_enabled=bool(values.get("grouping_enabled")),
        theme=values.get("theme") or "default",
        created_by=values.get("created_by"),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("Created session %s", session.id)
    return session


def get_session(db: Session, session_id: str) -> WordCloudSession:
    """Return a session or raise ``SessionNotFoundError``."""
    session = db.get(WordCloudSession, session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return session


def update_session(db: Session, session_id: str, values: dict[str, Any]) -> WordCloudSession:
    """Apply the provided fields to a session.

    ``values`` holds only the fields the caller sent; absent keys are left
    untouched. Blank description and background fields clear the column.
    """
    session = get_session(db, session_id)
    if "question" in values:
        values["question"] = _require_question(values["question"])
    for field in NON_NULLABLE_FIELDS:
        if field in values and values[field] is None:
            raise InvalidInputError(f"{field} cannot be null")
    _check_limits(values)

    for field in UPDATABLE_FIELDS:
        if field not in values:
            continue
        value = values[field]
        if field in ("description", "background_image_url"):
            value = _blank_to_none(value)
        setattr(session, field, value)
    session.updated_at = utcnow()

    db.commit()
    db.refresh(session)
    return session


def set_status(db: Session, session_id: str, status: str | None) -> WordCloudSession:
    """Move a session to ``draft``, ``live`` or ``closed``."""
    if status not in SESSION_STATUSES:
        raise InvalidInputError("Valid status is required (draft/live/closed)")
    session = get_session(db, session_id)
    session.status = status
    session.updated_at = utcnow()
    db.commit()
    db.refresh(session)
    logger.info("Session %s is now %s", session_id, status)
    return session


def delete_session(db: Session, session_id: str) -> None:
    """Delete a session with its aggregate, entries, quota and order rows."""
    get_session(db, session_id)
    db.execute(delete(Summary).where(Summary.session_id == session_id))
    db.execute(delete(Entry).where(Entry.session_id == session_id))
    db.execute(delete(WordQuota).where(WordQuota.session_id == session_id))
    db.execute(delete(SessionOrder).where(SessionOrder.session_id == session_id))
    db.execute(delete(WordCloudSession).where(WordCloudSession.id == session_id))
    db.commit()
    logger.info("Deleted session %s", session_id)


def list_sessions(db: Session) -> list[dict[str, Any]]:
    """Return every session, newest first, with participation counts."""
    sessions = db.scalars(
        select(WordCloudSession).order_by(WordCloudSession.created_at.desc())
    ).all()

    entry_stats = {
        row.session_id: (row.participants, row.total)
        for row in db.execute(
            select(
                Entry.session_id,
                func.count(func.distinct(Entry.user_hash)).label("participants"),
                func.count(Entry.id).label("total"),
            ).group_by(Entry.session_id)
        )
    }
    word_counts = dict(
        db.execute(
            select(Summary.session_id, func.count()).group_by(Summary.session_id)
        ).all()
    )

    listed = []
    for session in sessions:
        participants, total = entry_stats.get(session.id, (0, 0))
        listed.append(
            {
                "session": session,
                "participant_count": participants,
                "word_count": word_counts.get(session.id, 0),
                "total_entries": total,
            }
        )
    return listed


def _bump_summary(db: Session, session_id: str, key: str, display_word: str) -> None:
    bumped = db.execute(
        update(Summary)
        .where(Summary.session_id == session_id, Summary.cluster_key == key)
        .values(count=Summary.count + 1, updated_at=utcnow())
    )
    if bumped.rowcount:
        return
    try:
        with db.begin_nested():
            db.execute(
                insert(Summary).values(
                    session_id=session_id,
                    cluster_key=key,
                    display_word=display_word,
                    count=1,
                    color=color_for(display_word),
                    updated_at=utcnow(),
                )
            )
    except IntegrityError:
        # Another writer created the row first.
        db.execute(
            update(Summary)
            .where(Summary.session_id == session_id, Summary.cluster_key == key)
            .values(count=Summary.count + 1, updated_at=utcnow())
        )


def record_entry(
    db: Session,
    session: WordCloudSession,
    user_hash: str,
    word: str,
    *,
    now: datetime | None = None,
) -> Entry:
    """Insert an entry and fold it into the session aggregate.

    No quota is consulted. The caller commits.
    """
    word_norm = normalize_text(word)
    key = grouping_key(word, grouping_enabled=session.grouping_enabled)
    entry = Entry(
        session_id=session.id,
        user_hash=user_hash,
        word_raw=word,
        word_norm=word_norm,
        cluster_key=key,
        is_blocked=False,
        created_at=now or utcnow(),
    )
    db.add(entry)
    db.flush()
    _bump_summary(db, session.id, key, word_norm)
    return entry


def remove_aggregate_entry(db: Session, session_id: str, key: str | None) -> bool:
    """Drop one clustered word and block the entries that produced it."""
    if not key:
        raise InvalidInputError("Cluster key is required")
    removed = db.execute(
        delete(Summary).where(Summary.session_id == session_id, Summary.cluster_key == key)
    )
    db.execute(
        update(Entry)
        .where(Entry.session_id == session_id, Entry.cluster_key == key)
        .values(is_blocked=True)
    )
    db.commit()
    logger.info("Removed cluster %r from session %s", key, session_id)
    return bool(removed.rowcount)


def get_aggregate(db: Session, session_id: str, limit: int | None = None) -> Sequence[Summary]:
    """Return aggregate rows ordered by count, highest first."""
    stmt = (
        select(Summary)
        .where(Summary.session_id == session_id)
        .order_by(Summary.count.desc())
        .execution_options(populate_existing=True)
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.scalars(stmt).all()


def count_entries(db: Session, session_id: str, user_hash: str) -> int:
    """Return how many entries a participant has recorded in a session."""
    return db.scalar(
        select(func.count(Entry.id)).where(
            Entry.session_id == session_id,
            Entry.user_hash == user_hash,
        )
    ) or 0


def last_submission_at(db: Session, session_id: str, user_hash: str) -> datetime | None:
    """Return the creation time of a participant's most recent entry."""
    return db.scalar(
        select(Entry.created_at)
        .where(Entry.session_id == session_id, Entry.user_hash == user_hash)
        .order_by(Entry.created_at.desc(), Entry.id.desc())
        .limit(1)
    )


def get_session_order(db: Session) -> Sequence[SessionOrder]:
    """Return the presenter's session ordering."""
    return db.scalars(select(SessionOrder).order_by(SessionOrder.order_index.asc())).all()


def replace_session_order(db: Session, session_ids: Sequence[str]) -> Sequence[SessionOrder]:
    """Replace the whole ordering with ``session_ids`` in the given order."""
    known = set(
        db.scalars(
            select(WordCloudSession.id).where(WordCloudSession.id.in_(list(session_ids)))
        ).all()
    )
    missing = [session_id for session_id in session_ids if session_id not in known]
    if missing:
        raise InvalidInputError(f"Unknown session ids: {', '.join(missing)}")

    db.execute(delete(SessionOrder))
    db.add_all(
        SessionOrder(session_id=session_id, order_index=index)
        for index, session_id in enumerate(session_ids)
    )
    db.commit()
    return get_session_order(db)
