"""Presenter-defined session ordering."""

from fastapi import APIRouter

from wordcloud_stage.schemas.session import SessionOrderItem, SessionOrderUpdate
from wordcloud_stage.services import store

from ..dependencies import SessionDep

router = APIRouter(prefix="/session-order", tags=["sessions"])


@router.get("")
async def get_session_order(db: SessionDep) -> dict[str, list[SessionOrderItem]]:
    """Return the saved ordering, first position first."""
    order = store.get_session_order(db)
    return {"order": [SessionOrderItem.model_validate(item) for item in order]}


@router.post("")
async def save_session_order(payload: SessionOrderUpdate, db: SessionDep) -> dict[str, object]:
    """Replace the whole ordering."""
    order = store.replace_session_order(db, payload.session_ids)
    return {
        "success": True,
        "order": [SessionOrderItem.model_validate(item) for item in order],
    }
