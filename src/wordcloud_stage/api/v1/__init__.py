"""Version 1 API endpoints."""

from .endpoints import (
    entries_router,
    identity_router,
    order_router,
    sessions_router,
    summary_router,
    uploads_router,
)

__all__ = [
    "entries_router",
    "identity_router",
    "order_router",
    "sessions_router",
    "summary_router",
    "uploads_router",
]
