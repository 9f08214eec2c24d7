"""Per-customer booking form session — drives the four-step wizard FSM.

Each form session:
  1. Holds the BookingDraft (every answer entered so far)
  2. Tracks the current step (1-4) and the errors from the last Next
  3. Validates only the current step's fields before moving forward
  4. On the last step, validates the whole draft and hands it to the
     submission collaborator, then resets on success

States: step_1 ↔ step_2 ↔ step_3 ↔ step_4 → submitting → (reset) step_1.
Forward moves are validated; backward moves never are.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional, Protocol

from booking.catalog import options_for
from booking.config import settings
from booking.form.steps import FIRST_STEP, FORM_STEPS, LAST_STEP
from booking.form.validator import validate_draft, validate_step
from booking.models.draft import (
    EARLIEST_DATE,
    FIELD_ORDER,
    BookingDraft,
    local_today,
)
from booking.models.submission import GENERIC_FAILURE_MESSAGE, SUCCESS_MESSAGE, SubmissionResult

log = logging.getLogger("booking.form.session")

SUBMITTING = "submitting"

_EXPIRED_DATE_MESSAGES = {
    "preferredDate": "Please select a preferred date.",
    "alternativeDate": "Please select a valid alternative date.",
}


def redact_pii(value: str) -> str:
    """Mask PII for logging — show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


class Submitter(Protocol):
    """Anything that can take a serialized draft and report back."""

    async def submit(self, payload: dict[str, Any]) -> SubmissionResult | dict: ...


@dataclass
class NavigationResult:
    """What happened on a Next / Previous / Submit action."""

    step: int
    moved: bool = False
    submitted: bool = False
    rejected: bool = False            # refused because a submission is in flight
    errors: dict[str, str] = field(default_factory=dict)
    message: str = ""


# ── Session registry ─────────────────────────────────────────────

_active_sessions: dict[str, "FormSession"] = {}


def register_session(session: "FormSession") -> str:
    """Register a session and return its unique ID."""
    session_id = secrets.token_urlsafe(18)
    session._session_id = session_id
    session._started_at = time.time()
    _active_sessions[session_id] = session
    log.info("Session registered: %s", session_id)
    return session_id


def unregister_session(session_id: str) -> None:
    """Remove a session from the registry."""
    _active_sessions.pop(session_id, None)
    log.info("Session unregistered: %s", session_id)


def get_active_sessions() -> dict[str, "FormSession"]:
    """Return all active sessions."""
    return _active_sessions


def get_session(session_id: str) -> "FormSession | None":
    """Look up a session by ID."""
    return _active_sessions.get(session_id)


def prune_sessions(max_age: float, now: float | None = None) -> list[str]:
    """Unregister sessions started more than ``max_age`` seconds ago.

    Sessions mid-submission are left alone. Returns the removed IDs.
    """
    cutoff = (now if now is not None else time.time()) - max_age
    expired = [
        sid for sid, s in _active_sessions.items()
        if s._started_at < cutoff and not s.is_submitting
    ]
    for sid in expired:
        _active_sessions.pop(sid, None)
    if expired:
        log.info("Pruned %d expired session(s)", len(expired))
    return expired


class FormSession:
    """One customer's pass through the booking wizard.

    Typical lifecycle::

        session = FormSession(submitter=HttpSubmitter("http://localhost:8080"))
        session.set_field("fullName", "Juan Dela Cruz")
        ...
        result = await session.go_next()      # validates step 1, moves to 2
        ...
        result = await session.go_next()      # at step 4: validates and submits
    """

    def __init__(
        self,
        submitter: Optional[Submitter] = None,
        timezone: str = "",
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self._submitter = submitter
        self._timezone = timezone or settings.business_timezone
        self._today = today or (lambda: local_today(self._timezone))

        # Registry metadata (set by register_session)
        self._session_id: str = ""
        self._started_at: float = 0.0

        self._draft = BookingDraft()
        self._current_step: int = FIRST_STEP
        self._errors: dict[str, str] = {}
        self._dirty: set[str] = set()

        self._submitting = False
        self._submission_count = 0
        self._last_result: SubmissionResult | None = None

    # ── Public API ────────────────────────────────────────────

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def state(self) -> str:
        if self._submitting:
            return SUBMITTING
        return f"step_{self._current_step}"

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def dirty_fields(self) -> set[str]:
        return set(self._dirty)

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def submission_count(self) -> int:
        return self._submission_count

    @property
    def last_result(self) -> SubmissionResult | None:
        return self._last_result

    @property
    def timezone(self) -> str:
        return self._timezone

    def set_field(self, name: str, value: Any) -> bool:
        """Store a field value. Never raises and never changes the step.

        ``serviceType`` and the date fields are routed through their own
        setters so the dependent-field rules always hold. Returns False
        when nothing was stored.
        """
        if self._submitting:
            log.warning("Ignoring edit to %s while submitting", name)
            return False
        if name not in FIELD_ORDER:
            log.warning("Ignoring edit to unknown field %r", name)
            return False

        if name == "serviceType":
            return self.set_service_type(value)
        if name == "preferredDate":
            return self.set_preferred_date(value)
        if name == "alternativeDate":
            return self.set_alternative_date(value)

        setattr(self._draft, name, value)
        self._touch(name)
        return True

    def set_service_type(self, value: Any) -> bool:
        """Select a service type; the specific service always starts over."""
        if self._submitting:
            log.warning("Ignoring service type change while submitting")
            return False
        self._draft.serviceType = value
        self._draft.specificService = ""
        self._touch("serviceType")
        self._touch("specificService")
        log.debug("Service type now %r, specific service cleared", value)
        return True

    def specific_service_options(self) -> list[str]:
        return list(options_for("specificService", self._draft.serviceType))

    def set_preferred_date(self, value: Any) -> bool:
        """Set the preferred date, dropping an alternative that no longer follows it.

        Dates before today (or before 1900-01-01) are refused.
        """
        if self._submitting:
            log.warning("Ignoring preferred date change while submitting")
            return False
        if not self._selectable(value):
            log.info("Refusing preferred date %r", value)
            return False

        self._draft.preferredDate = value
        self._touch("preferredDate")

        alternative = self._draft.alternativeDate
        if alternative is not None and alternative <= value:
            self._draft.alternativeDate = None
            self._touch("alternativeDate")
            log.info("Alternative date %s cleared (not after %s)", alternative, value)
        return True

    def set_alternative_date(self, value: Any) -> bool:
        """Set or clear (``None``) the alternative date.

        Must be selectable and strictly after the preferred date when one
        is set.
        """
        if self._submitting:
            log.warning("Ignoring alternative date change while submitting")
            return False
        if value is None:
            self._draft.alternativeDate = None
            self._touch("alternativeDate")
            return True
        if not self._selectable(value):
            log.info("Refusing alternative date %r", value)
            return False
        preferred = self._draft.preferredDate
        if preferred is not None and value <= preferred:
            log.info("Refusing alternative date %s (not after %s)", value, preferred)
            return False

        self._draft.alternativeDate = value
        self._touch("alternativeDate")
        return True

    async def go_next(self) -> NavigationResult:
        """Validate the current step, then advance or (on the last step) submit."""
        if self._submitting:
            log.warning("Next ignored: submission in flight")
            return NavigationResult(step=self._current_step, rejected=True)

        step = self._current_step
        result = validate_step(self._draft, step)
        if not result.ok:
            self._errors = result.errors
            log.info("Step %d blocked: %s", step, ", ".join(result.errors))
            return NavigationResult(step=step, errors=dict(self._errors))

        self._errors = {}
        if step < LAST_STEP:
            self._current_step = step + 1
            log.info("FSM advance: step_%d → step_%d", step, self._current_step)
            return NavigationResult(step=self._current_step, moved=True)

        return await self._submit_validated()

    def go_previous(self) -> NavigationResult:
        """Step back without validation. A no-op on the first step."""
        if self._submitting:
            log.warning("Previous ignored: submission in flight")
            return NavigationResult(step=self._current_step, rejected=True)
        if self._current_step <= FIRST_STEP:
            return NavigationResult(step=self._current_step)

        step = self._current_step
        self._current_step = step - 1
        log.info("FSM retreat: step_%d → step_%d", step, self._current_step)
        return NavigationResult(step=self._current_step, moved=True)

    async def submit(self) -> NavigationResult:
        """Submit from the last step (same path as Next on step 4)."""
        if self._current_step != LAST_STEP:
            log.warning("Submit ignored on step %d", self._current_step)
            return NavigationResult(
                step=self._current_step,
                message="Please complete every step before submitting.",
            )
        return await self.go_next()

    def reset(self) -> None:
        """Back to an empty draft on the first step."""
        self._draft = BookingDraft()
        self._current_step = FIRST_STEP
        self._errors = {}
        self._dirty = set()

    def step_options(self, step: int | None = None) -> dict[str, dict[str, str]]:
        """Option tables for the select fields on a step."""
        number = step or self._current_step
        options: dict[str, dict[str, str]] = {}
        for name in FORM_STEPS[number].fields:
            choices = options_for(name, self._draft.serviceType)
            if choices or name == "specificService":
                options[name] = choices
        return options

    def to_dict(self, detail: bool = False) -> dict[str, Any]:
        """Serialize session state for the API.

        With detail=False: summary suitable for listing.
        With detail=True: adds the draft, the step's fields and options.
        """
        step = FORM_STEPS[self._current_step]
        d: dict[str, Any] = {
            "session_id": self._session_id,
            "state": self.state,
            "current_step": self._current_step,
            "step_title": step.title,
            "is_submitting": self._submitting,
            "started_at": self._started_at,
            "errors": dict(self._errors),
            "submission_count": self._submission_count,
            "last_result": self._last_result.model_dump() if self._last_result else None,
        }
        if detail:
            d["draft"] = self._draft.to_payload(self._timezone)
            d["step_fields"] = list(step.fields)
            d["required_fields"] = list(step.validated)
            d["options"] = self.step_options()
            d["dirty_fields"] = sorted(self._dirty)
        return d

    # ── Internal ──────────────────────────────────────────────

    def _touch(self, name: str) -> None:
        self._dirty.add(name)
        self._errors.pop(name, None)

    def _selectable(self, value: Any) -> bool:
        if not isinstance(value, date) or isinstance(value, datetime):
            return False
        return value >= EARLIEST_DATE and value >= self._today()

    async def _submit_validated(self) -> NavigationResult:
        """Full-draft gate, then one call to the collaborator."""
        errors = validate_draft(self._draft).errors
        # Dates chosen earlier may have slipped into the past since
        for name, message in _EXPIRED_DATE_MESSAGES.items():
            value = getattr(self._draft, name)
            if name not in errors and value is not None and not self._selectable(value):
                errors[name] = message
        if errors:
            self._errors = errors
            log.info("Draft blocked at submit: %s", ", ".join(errors))
            return NavigationResult(
                step=self._current_step,
                errors=dict(self._errors),
                message="Some answers on earlier steps need attention.",
            )

        if self._submitter is None:
            log.error("No submitter configured for session %s", self._session_id)
            self._last_result = SubmissionResult(success=False, message=GENERIC_FAILURE_MESSAGE)
            return NavigationResult(step=self._current_step, message=GENERIC_FAILURE_MESSAGE)

        payload = self._draft.to_payload(self._timezone)
        self._submitting = True
        log.info(
            "FSM advance: step_%d → %s (name=%s phone=%s)",
            self._current_step,
            SUBMITTING,
            redact_pii(self._draft.fullName),
            redact_pii(self._draft.phoneNumber),
        )
        try:
            raw = await self._submitter.submit(payload)
            result = raw if isinstance(raw, SubmissionResult) else SubmissionResult.from_response(raw)
        except Exception as e:
            log.error("Submission failed for session %s: %s", self._session_id, e)
            result = SubmissionResult(success=False, message=GENERIC_FAILURE_MESSAGE)
        finally:
            self._submitting = False

        if not result.success:
            message = result.message or GENERIC_FAILURE_MESSAGE
            self._last_result = SubmissionResult(success=False, message=message)
            log.info("FSM return: %s → step_%d (%s)", SUBMITTING, self._current_step, message)
            return NavigationResult(step=self._current_step, message=message)

        self._submission_count += 1
        self._last_result = SubmissionResult(success=True, message=SUCCESS_MESSAGE)
        log.info("FSM advance: %s → submitted; draft reset", SUBMITTING)
        self.reset()
        return NavigationResult(
            step=self._current_step, moved=True, submitted=True, message=SUCCESS_MESSAGE,
        )
