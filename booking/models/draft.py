"""Pydantic model for the in-progress booking draft and its date handling."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel

EARLIEST_DATE = date(1900, 1, 1)

# Column order used by the payload and by every stored row.
FIELD_ORDER: list[str] = [
    "fullName",
    "phoneNumber",
    "emailAddress",
    "propertyType",
    "serviceAddress",
    "serviceType",
    "specificService",
    "urgencyLevel",
    "budgetRange",
    "problemDescription",
    "preferredDate",
    "preferredTime",
    "alternativeDate",
    "alternativeTime",
    "accessInstructions",
    "specialRequests",
    "preferredContactMethod",
    "bestTimeToCall",
]

DATE_FIELDS: tuple[str, ...] = ("preferredDate", "alternativeDate")


class BookingDraft(BaseModel):
    """Mutable record filled in field by field as the customer works through the form.

    Assignment is not validated: the draft holds whatever was entered and the
    step validator decides whether it is acceptable.
    """

    # Client information
    fullName: str = ""
    phoneNumber: str = ""
    emailAddress: str = ""
    propertyType: str = ""
    serviceAddress: str = ""

    # Service details
    serviceType: str = ""
    specificService: str = ""
    urgencyLevel: str = ""
    budgetRange: str = ""
    problemDescription: str = ""

    # Preferred schedule
    preferredDate: Optional[date] = None
    preferredTime: str = ""
    alternativeDate: Optional[date] = None
    alternativeTime: str = ""

    # Additional information
    accessInstructions: str = ""
    specialRequests: str = ""
    preferredContactMethod: str = ""
    bestTimeToCall: str = ""

    def is_empty(self) -> bool:
        return self == BookingDraft()

    def to_payload(self, tz_name: str) -> dict[str, Any]:
        """Serialize for the submission collaborator.

        Dates become ISO-8601 UTC timestamps of local midnight in ``tz_name``
        (``None`` when unset); every other field is passed through.
        """
        payload: dict[str, Any] = {}
        for name in FIELD_ORDER:
            value = getattr(self, name)
            if name in DATE_FIELDS:
                payload[name] = to_iso_timestamp(value, tz_name) if value else None
            else:
                payload[name] = value
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any], tz_name: str) -> "BookingDraft":
        """Rebuild a draft from a serialized payload, recovering calendar dates."""
        data: dict[str, Any] = {}
        for name in FIELD_ORDER:
            value = payload.get(name)
            if value is None:
                continue
            if name in DATE_FIELDS:
                data[name] = parse_iso_date(value, tz_name)
            else:
                data[name] = str(value)
        return cls(**data)


# ── Date helpers ─────────────────────────────────────────────────

def local_today(tz_name: str) -> date:
    """Today's calendar date in the given timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def to_iso_timestamp(value: date, tz_name: str) -> str:
    """Local midnight of ``value`` as a UTC timestamp, e.g. ``2025-03-09T16:00:00.000Z``."""
    local_midnight = datetime.combine(value, time.min, tzinfo=ZoneInfo(tz_name))
    utc = local_midnight.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso_date(value: Any, tz_name: str) -> date | None:
    """Best-effort conversion of user or wire input to a calendar date.

    Accepts ``date`` objects, ``YYYY-MM-DD`` strings and ISO timestamps.
    Aware timestamps are converted to ``tz_name`` before taking the date.
    Returns None for anything that isn't a recognisable date.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(ZoneInfo(tz_name)).date()
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parse_iso_date(parsed, tz_name)


def format_locale_date(value: date) -> str:
    """``en-PH`` short date, e.g. ``3/10/2025``."""
    return f"{value.month}/{value.day}/{value.year}"


def format_locale_timestamp(value: datetime) -> str:
    """``en-PH`` date and time, e.g. ``3/10/2025, 2:05:07 PM``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{format_locale_date(value.date())}, "
        f"{hour}:{value.minute:02d}:{value.second:02d} {meridiem}"
    )
