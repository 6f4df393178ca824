"""Session lifecycle endpoints for presenters."""

from fastapi import APIRouter, status

from wordcloud_stage.schemas.common import ErrorResponse
from wordcloud_stage.schemas.entry import ResetCooldownResponse
from wordcloud_stage.schemas.session import (
    SessionCreate,
    SessionCreated,
    SessionListItem,
    SessionResponse,
    SessionUpdate,
    StatusUpdate,
)
from wordcloud_stage.services import quota, store
from wordcloud_stage.services.notifier import EVENT_SESSION_DELETED

from ..dependencies import NotifierDep, SessionDep

router = APIRouter(prefix="/sessions", tags=["sessions"])

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SessionCreated,
    responses=_ERRORS,
)
async def create_session(payload: SessionCreate, db: SessionDep) -> SessionCreated:
    """Create a draft session."""
    session = store.create_session(db, payload.model_dump())
    return SessionCreated(session_id=session.id)


@router.get("", response_model=list[SessionListItem])
async def list_sessions(db: SessionDep) -> list[SessionListItem]:
    """List sessions, newest first, with participation counts."""
    return [
        SessionListItem.model_validate(
            {
                **SessionResponse.model_validate(row["session"]).model_dump(),
                "participant_count": row["participant_count"],
                "word_count": row["word_count"],
                "total_entries": row["total_entries"],
            }
        )
        for row in store.list_sessions(db)
    ]


@router.get("/{session_id}", response_model=SessionResponse, responses=_ERRORS)
async def get_session(session_id: str, db: SessionDep) -> SessionResponse:
    """Return one session."""
    return SessionResponse.model_validate(store.get_session(db, session_id))


@router.patch("/{session_id}", response_model=SessionResponse, responses=_ERRORS)
async def update_session(session_id: str, payload: SessionUpdate, db: SessionDep) -> SessionResponse:
    """Update the fields present in the request body."""
    session = store.update_session(db, session_id, payload.model_dump(exclude_unset=True))
    return SessionResponse.model_validate(session)


@router.get("/{session_id}/status", response_model=SessionResponse, responses=_ERRORS)
async def get_status(session_id: str, db: SessionDep) -> SessionResponse:
    """Return the session including its lifecycle status."""
    return SessionResponse.model_validate(store.get_session(db, session_id))


@router.patch("/{session_id}/status", response_model=SessionResponse, responses=_ERRORS)
async def update_status(session_id: str, payload: StatusUpdate, db: SessionDep) -> SessionResponse:
    """Move the session to draft, live or closed."""
    return SessionResponse.model_validate(store.set_status(db, session_id, payload.status))


@router.delete("/{session_id}", responses=_ERRORS)
async def delete_session(session_id: str, db: SessionDep, notifier: NotifierDep) -> dict[str, str]:
    """Delete a session and everything recorded under it."""
    store.delete_session(db, session_id)
    await notifier.publish(session_id, EVENT_SESSION_DELETED)
    return {"message": "Session deleted successfully"}


@router.post(
    "/{session_id}/reset-cooldown",
    response_model=ResetCooldownResponse,
    responses=_ERRORS,
)
async def reset_cooldown(session_id: str, db: SessionDep) -> ResetCooldownResponse:
    """Give every participant of the session a fresh quota."""
    session = store.get_session(db, session_id)
    cooldown_minutes = session.cooldown_minutes
    cleared = quota.reset_cooldowns(db, session)
    return ResetCooldownResponse(success=True, cleared=cleared, cooldown_minutes=cooldown_minutes)
