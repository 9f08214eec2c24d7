"""Four-step booking wizard definition.

Each field belongs to exactly one step. ``validated`` lists the fields that
must pass before the wizard may leave the step going forward; the remaining
members are optional and only checked by full-draft validation.
"""

from __future__ import annotations

from pydantic import BaseModel

from booking.models.draft import FIELD_ORDER


class FormStep(BaseModel):
    """One page of the booking wizard."""

    number: int
    title: str
    fields: list[str]                      # every field shown on this step
    validated: list[str]                   # fields gating Next on this step


FORM_STEPS: dict[int, FormStep] = {
    1: FormStep(
        number=1,
        title="Client Information",
        fields=["fullName", "phoneNumber", "emailAddress", "propertyType", "serviceAddress"],
        validated=["fullName", "phoneNumber", "emailAddress", "propertyType", "serviceAddress"],
    ),
    2: FormStep(
        number=2,
        title="Service Details",
        fields=[
            "serviceType", "specificService", "urgencyLevel", "budgetRange",
            "problemDescription",
        ],
        validated=["serviceType", "specificService", "urgencyLevel", "problemDescription"],
    ),
    3: FormStep(
        number=3,
        title="Preferred Schedule",
        fields=["preferredDate", "preferredTime", "alternativeDate", "alternativeTime"],
        validated=["preferredDate", "preferredTime"],
    ),
    4: FormStep(
        number=4,
        title="Additional Information",
        fields=[
            "accessInstructions", "specialRequests", "preferredContactMethod",
            "bestTimeToCall",
        ],
        validated=["preferredContactMethod", "bestTimeToCall"],
    ),
}

FIRST_STEP: int = min(FORM_STEPS)
LAST_STEP: int = max(FORM_STEPS)

STEP_OF_FIELD: dict[str, int] = {
    name: step.number for step in FORM_STEPS.values() for name in step.fields
}


def _check_membership() -> None:
    """Every draft field must sit on exactly one step."""
    seen: list[str] = [name for step in FORM_STEPS.values() for name in step.fields]
    if sorted(seen) != sorted(FIELD_ORDER):
        missing = set(FIELD_ORDER) - set(seen)
        extra = [name for name in seen if seen.count(name) > 1 or name not in FIELD_ORDER]
        raise ValueError(f"Bad step membership: missing={sorted(missing)} extra={sorted(set(extra))}")
    for step in FORM_STEPS.values():
        stray = set(step.validated) - set(step.fields)
        if stray:
            raise ValueError(f"Step {step.number} validates fields it doesn't own: {sorted(stray)}")


_check_membership()


def get_step(number: int) -> FormStep:
    return FORM_STEPS[number]
