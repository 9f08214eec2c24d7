"""Field rules for the booking draft and per-step validation.

There is one rule per field. Step validation and full-draft validation both
run these same rules; a step simply restricts which fields are evaluated.
Messages are customer-facing and shown next to the offending input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from booking.catalog import (
    CALL_TIMES,
    CONTACT_METHODS,
    PROPERTY_TYPES,
    SERVICE_TYPES,
    TIME_BANDS,
    URGENCY_LEVELS,
    specific_services_for,
)
from booking.form.steps import FORM_STEPS
from booking.models.draft import FIELD_ORDER, BookingDraft

PHONE_PATTERN = re.compile(r"^\+?[\d\s\-\(\)]{10,}$")

_email_adapter = TypeAdapter(EmailStr)

Rule = Callable[[Any, BookingDraft], Optional[str]]


@dataclass
class FieldResult:
    """Outcome of checking one field."""

    passed: bool
    message: str = ""


@dataclass
class StepValidation:
    """Outcome of checking a set of fields."""

    results: dict[str, FieldResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(r.passed for r in self.results.values())

    @property
    def errors(self) -> dict[str, str]:
        """Failing fields mapped to their message, in evaluation order."""
        return {name: r.message for name, r in self.results.items() if not r.passed}

    @property
    def fields(self) -> list[str]:
        return list(self.results)


# ── Rule builders ────────────────────────────────────────────────

def _min_length(length: int, message: str) -> Rule:
    def rule(value: Any, draft: BookingDraft) -> Optional[str]:
        if not isinstance(value, str) or len(value) < length:
            return message
        return None
    return rule


def _one_of(options: dict[str, str], message: str) -> Rule:
    def rule(value: Any, draft: BookingDraft) -> Optional[str]:
        if not isinstance(value, str) or value not in options:
            return message
        return None
    return rule


def _optional_text(value: Any, draft: BookingDraft) -> Optional[str]:
    if not isinstance(value, str):
        return "Must be text."
    return None


def _phone(value: Any, draft: BookingDraft) -> Optional[str]:
    if not isinstance(value, str) or len(value) < 10:
        return "Please enter a valid phone number."
    if not PHONE_PATTERN.match(value):
        return "Please enter a valid phone number format."
    return None


def _email(value: Any, draft: BookingDraft) -> Optional[str]:
    if not isinstance(value, str):
        return "Please enter a valid email address."
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return "Please enter a valid email address."
    return None


def _specific_service(value: Any, draft: BookingDraft) -> Optional[str]:
    if not isinstance(value, str) or value not in specific_services_for(draft.serviceType):
        return "Please select a specific service."
    return None


def _is_calendar_date(value: Any) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


def _preferred_date(value: Any, draft: BookingDraft) -> Optional[str]:
    if not _is_calendar_date(value):
        return "Please select a preferred date."
    return None


def _alternative_date(value: Any, draft: BookingDraft) -> Optional[str]:
    if value is None:
        return None
    if not _is_calendar_date(value):
        return "Please select a valid alternative date."
    if _is_calendar_date(draft.preferredDate) and value <= draft.preferredDate:
        return "Alternative date must be after the preferred date."
    return None


def _alternative_time(value: Any, draft: BookingDraft) -> Optional[str]:
    if value in ("", None):
        return None
    if not isinstance(value, str) or value not in TIME_BANDS:
        return "Please select a valid alternative time."
    return None


FIELD_RULES: dict[str, Rule] = {
    "fullName": _min_length(2, "Full name must be at least 2 characters."),
    "phoneNumber": _phone,
    "emailAddress": _email,
    "propertyType": _one_of(PROPERTY_TYPES, "Please select a property type."),
    "serviceAddress": _min_length(
        10,
        "Please provide a complete address including barangay, city, and landmarks.",
    ),
    "serviceType": _one_of(SERVICE_TYPES, "Please select a service type."),
    "specificService": _specific_service,
    "urgencyLevel": _one_of(URGENCY_LEVELS, "Please select an urgency level."),
    "budgetRange": _optional_text,
    "problemDescription": _min_length(10, "Please provide a detailed problem description."),
    "preferredDate": _preferred_date,
    "preferredTime": _one_of(TIME_BANDS, "Please select a preferred time."),
    "alternativeDate": _alternative_date,
    "alternativeTime": _alternative_time,
    "accessInstructions": _optional_text,
    "specialRequests": _optional_text,
    "preferredContactMethod": _one_of(
        CONTACT_METHODS, "Please select a preferred contact method."
    ),
    "bestTimeToCall": _one_of(CALL_TIMES, "Please select the best time to call."),
}


# ── Public API ───────────────────────────────────────────────────

def validate_field(name: str, draft: BookingDraft) -> FieldResult:
    rule = FIELD_RULES[name]
    message = rule(getattr(draft, name), draft)
    if message:
        return FieldResult(passed=False, message=message)
    return FieldResult(passed=True)


def validate_fields(draft: BookingDraft, names: Iterable[str]) -> StepValidation:
    return StepValidation(
        results={name: validate_field(name, draft) for name in names}
    )


def validate_step(draft: BookingDraft, step: int) -> StepValidation:
    """Check only the fields that gate the given step."""
    return validate_fields(draft, FORM_STEPS[step].validated)


def validate_draft(draft: BookingDraft) -> StepValidation:
    """Check every field, as a last gate before the draft is persisted."""
    return validate_fields(draft, FIELD_ORDER)
