"""Participant submission and quota endpoints."""

import logging

from fastapi import APIRouter, status

from wordcloud_stage.core.errors import InvalidInputError, QuotaUnavailableError
from wordcloud_stage.core.settings import settings
from wordcloud_stage.models.session import SESSION_STATUS_CLOSED
from wordcloud_stage.schemas.common import ErrorResponse
from wordcloud_stage.schemas.entry import (
    EntryCountResponse,
    LastSubmissionResponse,
    QuotaResponse,
    SubmissionAccepted,
    SubmissionQuotaRejected,
    SubmitWordRequest,
)
from wordcloud_stage.services import quota, store
from wordcloud_stage.services.text import validate_word

from ..dependencies import NotifierDep, SessionDep, UserHashDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["entries"])

DEGRADED_MESSAGE = "Word submitted (quota system not active)"


@router.post(
    "/{session_id}/entries",
    status_code=status.HTTP_201_CREATED,
    response_model=SubmissionAccepted,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_429_TOO_MANY_REQUESTS: {"model": SubmissionQuotaRejected},
    },
)
async def submit_entry(
    session_id: str,
    payload: SubmitWordRequest,
    db: SessionDep,
    notifier: NotifierDep,
) -> SubmissionAccepted:
    """Submit a word, consuming one of the participant's attempts."""
    session = store.get_session(db, session_id)
    if session.status == SESSION_STATUS_CLOSED:
        raise InvalidInputError("Session is closed")
    word = validate_word(payload.word, payload.surface)

    result = None
    if settings.quota_enforcement_enabled:
        try:
            result = quota.attempt_submission(db, session, payload.user_hash, word)
        except QuotaUnavailableError:
            logger.warning(
                "Quota unavailable for session %s; falling back to unguarded insert",
                session_id,
                exc_info=True,
            )
    if result is None:
        result = quota.submit_unguarded(db, session, payload.user_hash, word)

    await notifier.publish(session_id)
    return SubmissionAccepted(
        entry_id=result.entry_id,
        attempts_left=result.attempts_left,
        cooldown_remaining_seconds=result.cooldown_remaining_seconds,
        degraded=result.degraded,
        message=DEGRADED_MESSAGE if result.degraded else None,
    )


@router.get("/{session_id}/quota", response_model=QuotaResponse)
async def get_quota(session_id: str, user_hash: UserHashDep, db: SessionDep) -> QuotaResponse:
    """Return the participant's authoritative quota state."""
    session = store.get_session(db, session_id)
    snapshot = quota.quota_status(db, session, user_hash)
    return QuotaResponse(
        attempts_left=snapshot.attempts_left,
        cooldown_remaining_seconds=snapshot.cooldown_remaining_seconds,
        cooldown_until=snapshot.cooldown_until,
    )


@router.get("/{session_id}/entry-count", response_model=EntryCountResponse)
async def get_entry_count(session_id: str, user_hash: UserHashDep, db: SessionDep) -> EntryCountResponse:
    """Count the participant's entries in the session."""
    return EntryCountResponse(count=store.count_entries(db, session_id, user_hash))


@router.get("/{session_id}/last-submission", response_model=LastSubmissionResponse)
async def get_last_submission(
    session_id: str,
    user_hash: UserHashDep,
    db: SessionDep,
) -> LastSubmissionResponse:
    """Return when the participant last submitted, for display only."""
    return LastSubmissionResponse(
        last_submission=store.last_submission_at(db, session_id, user_hash)
    )
