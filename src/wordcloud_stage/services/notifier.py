"""Summary change notifications for presenter views.

Presenters subscribe per session and re-fetch the whole aggregate whenever a
notification arrives; no deltas are streamed. Notifications fan out to
in-process subscribers and, when ``REDIS_URL`` is configured, are mirrored
to a Redis channel so other workers can relay them.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from wordcloud_stage.core.settings import settings

logger = logging.getLogger(__name__)

EVENT_SUMMARY_CHANGED = "summary_changed"
EVENT_SESSION_DELETED = "session_deleted"


def channel_name(session_id: str) -> str:
    """Return the pub/sub channel for a session's aggregate."""
    return f"wordcloud_summary:{session_id}"


class SummaryNotifier:
    """Fan-out of per-session notifications to subscribed queues."""

    def __init__(self, redis_url: str | None = None) -> None:
        self._subscribers: dict[str, set[asyncio.Queue[dict[str, Any]]]] = defaultdict(set)
        self._redis = aioredis.from_url(redis_url) if redis_url else None

    def subscriber_count(self, session_id: str) -> int:
        """Return how many local subscribers listen to ``session_id``."""
        return len(self._subscribers.get(session_id, ()))

    @asynccontextmanager
    async def subscribe(self, session_id: str) -> AsyncIterator[asyncio.Queue[dict[str, Any]]]:
        """Register a queue for the lifetime of the context."""
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._subscribers[session_id].add(queue)
        try:
            yield queue
        finally:
            listeners = self._subscribers.get(session_id)
            if listeners is not None:
                listeners.discard(queue)
                if not listeners:
                    del self._subscribers[session_id]

    async def publish(self, session_id: str, event: str = EVENT_SUMMARY_CHANGED) -> int:
        """Notify subscribers of ``session_id``. Returns local deliveries."""
        message = {"event": event, "session_id": session_id}
        listeners = list(self._subscribers.get(session_id, ()))
        for queue in listeners:
            queue.put_nowait(message)

        if self._redis is not None:
            try:
                await self._redis.publish(channel_name(session_id), json.dumps(message))
            except RedisError as exc:
                logger.warning("Failed to publish %s for session %s: %s", event, session_id, exc)
        return len(listeners)

    async def close(self) -> None:
        """Release the Redis connection pool, if any."""
        if self._redis is not None:
            await self._redis.aclose()


_notifier: SummaryNotifier | None = None


def get_notifier() -> SummaryNotifier:
    """Return the process-wide notifier."""
    global _notifier
    if _notifier is None:
        _notifier = SummaryNotifier(settings.redis_url)
    return _notifier
