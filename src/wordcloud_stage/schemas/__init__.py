"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ErrorResponse
from .entry import (
    QuotaResponse,
    SubmissionAccepted,
    SubmissionQuotaRejected,
    SubmitWordRequest,
)
from .session import SessionCreate, SessionResponse, SessionUpdate, StatusUpdate
from .summary import RenderResponse, SummaryItem, SummaryResponse

__all__ = [
    "ErrorResponse",
    "QuotaResponse", "SubmissionAccepted", "SubmissionQuotaRejected", "SubmitWordRequest",
    "SessionCreate", "SessionResponse", "SessionUpdate", "StatusUpdate",
    "RenderResponse", "SummaryItem", "SummaryResponse",
]
