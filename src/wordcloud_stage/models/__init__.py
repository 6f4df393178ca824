"""SQLAlchemy models for the Word Cloud Stage application."""

from .entry import Entry
from .quota import WordQuota
from .session import SessionOrder, WordCloudSession
from .summary import Summary

__all__ = [
    "Entry",
    "WordQuota",
    "SessionOrder", "WordCloudSession",
    "Summary",
]
