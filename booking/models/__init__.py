"""Data models for the booking layer."""

from .draft import BookingDraft, DATE_FIELDS, FIELD_ORDER
from .submission import SubmissionResult

__all__ = ["BookingDraft", "DATE_FIELDS", "FIELD_ORDER", "SubmissionResult"]
