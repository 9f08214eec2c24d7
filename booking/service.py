"""Server-side booking intake.

Applies the structural required-field guard, reformats ISO dates into the
locale date strings shown in the sheet, and appends the booking to the
configured store.
"""

from __future__ import annotations

import logging
from typing import Any

from booking.errors import BookingStoreError, MissingFieldsError
from booking.form.session import redact_pii
from booking.models.draft import DATE_FIELDS, format_locale_date, parse_iso_date
from booking.stores.base import BookingStore

log = logging.getLogger("booking.service")

REQUIRED_FIELDS: list[str] = [
    "fullName",
    "phoneNumber",
    "emailAddress",
    "serviceType",
]


def missing_fields(booking: dict[str, Any]) -> list[str]:
    """Required fields that are absent or empty, in declaration order."""
    return [name for name in REQUIRED_FIELDS if not booking.get(name)]


def format_dates(booking: dict[str, Any], tz_name: str) -> dict[str, Any]:
    """Copy of ``booking`` with its date fields as ``M/D/YYYY`` strings.

    Values that don't parse as a date are left untouched.
    """
    formatted = dict(booking)
    for name in DATE_FIELDS:
        raw = formatted.get(name)
        if not raw:
            continue
        parsed = parse_iso_date(raw, tz_name)
        if parsed is None:
            log.warning("Leaving unparseable %s as-is: %r", name, raw)
            continue
        formatted[name] = format_locale_date(parsed)
    return formatted


class BookingService:
    """Validates and persists submitted bookings."""

    def __init__(self, store: BookingStore, timezone: str = "Asia/Manila") -> None:
        self._store = store
        self._timezone = timezone

    @property
    def store(self) -> BookingStore:
        return self._store

    async def submit(self, booking: dict[str, Any]) -> dict:
        """Persist one booking and return the store's result.

        Raises:
            MissingFieldsError: a required field is absent or empty.
            BookingStoreError: the store didn't accept the row.
        """
        missing = missing_fields(booking)
        if missing:
            raise MissingFieldsError(missing)

        formatted = format_dates(booking, self._timezone)
        log.info(
            "Booking received: name=%s phone=%s email=%s service=%s",
            redact_pii(str(formatted.get("fullName", ""))),
            redact_pii(str(formatted.get("phoneNumber", ""))),
            redact_pii(str(formatted.get("emailAddress", ""))),
            formatted.get("serviceType"),
        )

        result = await self._store.add_booking(formatted)
        if not result.get("success"):
            raise BookingStoreError("Failed to add booking to sheet")
        return result

    async def list_bookings(self) -> list[list[str]]:
        return await self._store.get_all_bookings()
