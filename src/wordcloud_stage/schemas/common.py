"""Tagged error bodies shared by every endpoint."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned for validation, not-found and server errors."""

    outcome: Literal["invalid_input", "not_found", "server_error"]
    detail: str = Field(..., description="Human-readable reason.")
