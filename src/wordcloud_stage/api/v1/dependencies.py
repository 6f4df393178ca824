"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from wordcloud_stage.core.errors import InvalidInputError
from wordcloud_stage.db.session import get_db
from wordcloud_stage.services.notifier import SummaryNotifier, get_notifier

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_notifier_dep() -> SummaryNotifier:
    """Return the shared summary notifier."""
    return get_notifier()


NotifierDep = Annotated[SummaryNotifier, Depends(get_notifier_dep)]


def require_user_hash(user_hash: Annotated[str | None, Query()] = None) -> str:
    """Return the ``user_hash`` query parameter or reject the request with 400."""
    if not user_hash:
        raise InvalidInputError("user_hash is required")
    return user_hash


UserHashDep = Annotated[str, Depends(require_user_hash)]
