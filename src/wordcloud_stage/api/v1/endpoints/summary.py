"""Aggregate read, moderation and live notification endpoints."""

import asyncio
from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, WebSocket, WebSocketDisconnect, status

from wordcloud_stage.core.errors import SessionNotFoundError
from wordcloud_stage.core.settings import settings
from wordcloud_stage.schemas.common import ErrorResponse
from wordcloud_stage.schemas.summary import (
    AggregateEntryDelete,
    AggregateEntryDeleted,
    RenderItem,
    RenderResponse,
    SummaryItem,
    SummaryResponse,
    TopWordsResponse,
)
from wordcloud_stage.services import store
from wordcloud_stage.services.notifier import EVENT_SESSION_DELETED
from wordcloud_stage.services.render import render_items

from ..dependencies import NotifierDep, SessionDep

router = APIRouter(prefix="/sessions", tags=["summary"])

# Close code sent when a live subscription names an unknown session.
WS_CLOSE_NOT_FOUND = 4404


@router.get("/{session_id}/aggregate", response_model=SummaryResponse)
async def get_aggregate(session_id: str, db: SessionDep) -> SummaryResponse:
    """Return every clustered word, highest count first."""
    rows = store.get_aggregate(db, session_id)
    return SummaryResponse(items=[SummaryItem.model_validate(row) for row in rows])


@router.get("/{session_id}/top", response_model=TopWordsResponse)
async def get_top_words(
    session_id: str,
    db: SessionDep,
    n: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> TopWordsResponse:
    """Return the ``n`` most frequent clustered words."""
    rows = store.get_aggregate(db, session_id, limit=n or settings.top_words_default)
    return TopWordsResponse(words=[SummaryItem.model_validate(row) for row in rows])


@router.get("/{session_id}/render", response_model=RenderResponse)
async def get_render_items(session_id: str, db: SessionDep) -> RenderResponse:
    """Return renderer input: ``(text, weight, color)`` per clustered word."""
    items = render_items(store.get_aggregate(db, session_id))
    return RenderResponse(items=[RenderItem(**item) for item in items])


@router.delete(
    "/{session_id}/aggregate-entry",
    response_model=AggregateEntryDeleted,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def delete_aggregate_entry(
    session_id: str,
    db: SessionDep,
    notifier: NotifierDep,
    payload: Annotated[AggregateEntryDelete | None, Body()] = None,
    cluster_key: Annotated[str | None, Query()] = None,
) -> AggregateEntryDeleted:
    """Remove a clustered word and block the entries behind it."""
    key = payload.cluster_key if payload is not None and payload.cluster_key else cluster_key
    deleted = store.remove_aggregate_entry(db, session_id, key)
    await notifier.publish(session_id)
    return AggregateEntryDeleted(deleted=deleted)


async def _forward(websocket: WebSocket, queue: asyncio.Queue[dict[str, Any]]) -> None:
    while True:
        message = await queue.get()
        await websocket.send_json(message)
        if message["event"] == EVENT_SESSION_DELETED:
            await websocket.close()
            return


async def _drain(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/{session_id}/live")
async def live_updates(
    websocket: WebSocket,
    session_id: str,
    db: SessionDep,
    notifier: NotifierDep,
) -> None:
    """Push a notification each time the session aggregate changes.

    Clients re-fetch ``/aggregate`` on every message.
    """
    try:
        store.get_session(db, session_id)
    except SessionNotFoundError:
        await websocket.close(code=WS_CLOSE_NOT_FOUND)
        return
    finally:
        # The subscription may stay open for hours; give the connection back now.
        db.close()

    await websocket.accept()
    async with notifier.subscribe(session_id) as queue:
        await websocket.send_json({"event": "subscribed", "session_id": session_id})
        tasks = {
            asyncio.create_task(_forward(websocket, queue)),
            asyncio.create_task(_drain(websocket)),
        }
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                raise exc
