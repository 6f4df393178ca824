"""Business logic services for the Word Cloud Stage application."""

from .notifier import SummaryNotifier, get_notifier
from .quota import QuotaStatus, SubmissionResult
from .render import color_for, font_size, render_items
from .text import cluster_key, normalize_text, validate_word

__all__ = [
    "SummaryNotifier", "get_notifier",
    "QuotaStatus", "SubmissionResult",
    "color_for", "font_size", "render_items",
    "cluster_key", "normalize_text", "validate_word",
]
