"""Abstract base class for booking stores.

A booking store is an append-only row table: one header row, then one row
per booking. Any backend (Google Sheets, in-memory, ...) implements this ABC.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from booking.models.draft import FIELD_ORDER, format_locale_timestamp

SHEET_HEADERS: list[str] = [
    "Timestamp",
    "Full Name",
    "Phone Number",
    "Email Address",
    "Property Type",
    "Service Address",
    "Service Type",
    "Specific Service",
    "Urgency Level",
    "Budget Range",
    "Problem Description",
    "Preferred Date",
    "Preferred Time",
    "Alternative Date",
    "Alternative Time",
    "Access Instructions",
    "Special Requests",
    "Preferred Contact Method",
    "Best Time to Call",
]


def build_row(booking: dict[str, Any], timestamp: str) -> list[str]:
    """Timestamp followed by the booking fields in column order.

    Missing or empty values become empty strings.
    """
    row = [timestamp]
    for name in FIELD_ORDER:
        value = booking.get(name)
        row.append(str(value) if value else "")
    return row


def booking_timestamp(tz_name: str) -> str:
    """Server-side submission time, e.g. ``3/10/2025, 2:05:07 PM``."""
    return format_locale_timestamp(datetime.now(ZoneInfo(tz_name)))


class BookingStore(ABC):
    """Abstract booking backend.

    Subclasses must implement header creation, appending and listing.
    """

    @abstractmethod
    async def ensure_headers(self) -> None:
        """Write the header row if the store is empty. Safe to call repeatedly."""

    @abstractmethod
    async def add_booking(self, booking: dict[str, Any]) -> dict:
        """Append one booking row, creating headers on first use.

        Args:
            booking: Field name → value, dates already formatted for display.

        Returns:
            Dict containing at least ``"success"`` and ``"updatedRows"``.
        """

    @abstractmethod
    async def get_all_bookings(self) -> list[list[str]]:
        """Return every row, header row included."""
