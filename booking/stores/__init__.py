"""Booking store abstractions and implementations."""

from .base import SHEET_HEADERS, BookingStore, build_row
from .memory import MemoryBookingStore

__all__ = ["BookingStore", "MemoryBookingStore", "SHEET_HEADERS", "build_row"]
