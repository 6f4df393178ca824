"""API endpoint modules for version 1."""

from .entries import router as entries_router
from .identity import router as identity_router
from .order import router as order_router
from .sessions import router as sessions_router
from .summary import router as summary_router
from .uploads import router as uploads_router

__all__ = [
    "entries_router",
    "identity_router",
    "order_router",
    "sessions_router",
    "summary_router",
    "uploads_router",
]
