"""Per-participant submission quota with cooldown.

States for a (session, participant) pair:

* Fresh: no quota row yet; behaves as ``max_entries_per_user`` attempts.
* HasAttempts(n): ``attempts_left = n`` and no cooldown.
* Cooldown(until): ``attempts_left = 0`` and ``cooldown_until = until``.

An accepted attempt decrements ``attempts_left``; reaching zero starts the
cooldown. Once ``until`` has passed the pair is Fresh again. The
check-and-decrement is a conditional ``UPDATE`` inside the same transaction
as the entry insert, so two concurrent submissions can never both consume
the last attempt.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Final

from sqlalchemy import case, delete, insert, literal, null, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from wordcloud_stage.core.errors import QuotaRejectedError, QuotaUnavailableError
from wordcloud_stage.db.time import as_utc, utcnow
from wordcloud_stage.models import WordCloudSession, WordQuota
from wordcloud_stage.services import store

logger = logging.getLogger(__name__)

REASON_COOLDOWN: Final[str] = "COOLDOWN"
REASON_NO_ATTEMPTS: Final[str] = "NO_ATTEMPTS"


@dataclass(frozen=True)
class QuotaStatus:
    """Read-only snapshot of a participant's quota."""

    attempts_left: int
    cooldown_remaining_seconds: int
    cooldown_until: datetime | None = None


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of an accepted submission."""

    entry_id: int
    attempts_left: int
    cooldown_remaining_seconds: int
    degraded: bool = False


def remaining_seconds(cooldown_until: datetime | None, now: datetime) -> int:
    """Return whole seconds until ``cooldown_until``, never negative."""
    if cooldown_until is None:
        return 0
    delta = (as_utc(cooldown_until) - now).total_seconds()
    return max(0, math.floor(delta))


def _quota_key(session_id: str, user_hash: str) -> tuple:
    return (WordQuota.session_id == session_id, WordQuota.user_hash == user_hash)


def _read_quota(db: Session, session_id: str, user_hash: str) -> tuple[int, datetime | None] | None:
    row = db.execute(
        select(WordQuota.attempts_left, WordQuota.cooldown_until).where(
            *_quota_key(session_id, user_hash)
        )
    ).first()
    if row is None:
        return None
    cooldown_until = as_utc(row.cooldown_until) if row.cooldown_until is not None else None
    return row.attempts_left, cooldown_until


def quota_status(
    db: Session,
    session: WordCloudSession,
    user_hash: str,
    *,
    now: datetime | None = None,
) -> QuotaStatus:
    """Report attempts left and cooldown time without changing anything."""
    now = now or utcnow()
    current = _read_quota(db, session.id, user_hash)
    if current is None:
        return QuotaStatus(session.max_entries_per_user, 0)

    attempts_left, cooldown_until = current
    if cooldown_until is not None and cooldown_until <= now:
        return QuotaStatus(session.max_entries_per_user, 0)
    return QuotaStatus(attempts_left, remaining_seconds(cooldown_until, now), cooldown_until)


def _reset_expired(db: Session, session: WordCloudSession, user_hash: str, now: datetime) -> None:
    db.execute(
        update(WordQuota)
        .where(
            *_quota_key(session.id, user_hash),
            WordQuota.cooldown_until.is_not(None),
            WordQuota.cooldown_until <= now,
        )
        .values(
            attempts_left=session.max_entries_per_user,
            cooldown_until=None,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )


def _consume_attempt(db: Session, session: WordCloudSession, user_hash: str, now: datetime) -> bool:
    cooldown_until = now + timedelta(minutes=session.cooldown_minutes)
    consumed = db.execute(
        update(WordQuota)
        .where(
            *_quota_key(session.id, user_hash),
            WordQuota.attempts_left > 0,
            WordQuota.cooldown_until.is_(None),
        )
        .values(
            attempts_left=WordQuota.attempts_left - 1,
            cooldown_until=case(
                (WordQuota.attempts_left <= 1, literal(cooldown_until, WordQuota.cooldown_until.type)),
                else_=null(),
            ),
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    return bool(consumed.rowcount)


def _open_quota(db: Session, session: WordCloudSession, user_hash: str, now: datetime) -> bool:
    """Create the quota row for a first-time participant, consuming one attempt."""
    attempts_left = session.max_entries_per_user - 1
    cooldown_until = now + timedelta(minutes=session.cooldown_minutes) if attempts_left <= 0 else None
    try:
        with db.begin_nested():
            db.execute(
                insert(WordQuota).values(
                    session_id=session.id,
                    user_hash=user_hash,
                    attempts_left=max(attempts_left, 0),
                    cooldown_until=cooldown_until,
                    updated_at=now,
                )
            )
    except IntegrityError:
        # A concurrent first attempt created the row; compete for it instead.
        return _consume_attempt(db, session, user_hash, now)
    return True


def _reject(db: Session, session: WordCloudSession, user_hash: str, now: datetime) -> QuotaRejectedError:
    current = _read_quota(db, session.id, user_hash)
    attempts_left, cooldown_until = current if current is not None else (0, None)
    seconds = remaining_seconds(cooldown_until, now)
    reason = REASON_COOLDOWN if seconds > 0 else REASON_NO_ATTEMPTS
    return QuotaRejectedError(
        reason,
        attempts_left=attempts_left,
        cooldown_remaining_seconds=seconds,
    )


def attempt_submission(
    db: Session,
    session: WordCloudSession,
    user_hash: str,
    word: str,
    *,
    now: datetime | None = None,
) -> SubmissionResult:
    """Atomically consume one attempt and record the entry.

    Raises:
        QuotaRejectedError: The participant is cooling down or out of attempts.
            Nothing is persisted.
        QuotaUnavailableError: The quota table could not be used.
    """
    now = now or utcnow()
    try:
        _reset_expired(db, session, user_hash, now)
        accepted = _consume_attempt(db, session, user_hash, now)
        if not accepted and _read_quota(db, session.id, user_hash) is None:
            accepted = _open_quota(db, session, user_hash, now)

        if not accepted:
            rejection = _reject(db, session, user_hash, now)
            db.rollback()
            raise rejection

        entry_id = store.record_entry(db, session, user_hash, word, now=now).id
        attempts_left, cooldown_until = _read_quota(db, session.id, user_hash) or (0, None)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise QuotaUnavailableError("Quota operation failed") from exc

    return SubmissionResult(
        entry_id=entry_id,
        attempts_left=attempts_left,
        cooldown_remaining_seconds=remaining_seconds(cooldown_until, now),
    )


def submit_unguarded(
    db: Session,
    session: WordCloudSession,
    user_hash: str,
    word: str,
    *,
    now: datetime | None = None,
) -> SubmissionResult:
    """Record an entry with no quota enforcement.

    Used only when the quota operation is disabled or failing. Provides no
    backpressure at all.
    """
    entry_id = store.record_entry(db, session, user_hash, word, now=now).id
    db.commit()
    logger.warning(
        "Recorded entry %s for session %s without quota enforcement",
        entry_id,
        session.id,
    )
    return SubmissionResult(
        entry_id=entry_id,
        attempts_left=session.max_entries_per_user,
        cooldown_remaining_seconds=0,
        degraded=True,
    )


def reset_cooldowns(db: Session, session: WordCloudSession) -> int:
    """Forget every participant's quota for a session. Returns rows cleared."""
    cleared = db.execute(delete(WordQuota).where(WordQuota.session_id == session.id))
    db.commit()
    logger.info("Reset %d quota rows for session %s", cleared.rowcount, session.id)
    return cleared.rowcount
