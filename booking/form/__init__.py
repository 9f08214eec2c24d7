"""Multi-step booking form: step table, field validation and the session FSM."""

from .session import FormSession, NavigationResult
from .steps import FIRST_STEP, FORM_STEPS, LAST_STEP, FormStep
from .validator import StepValidation, validate_draft, validate_step

__all__ = [
    "FIRST_STEP",
    "FORM_STEPS",
    "FormSession",
    "FormStep",
    "LAST_STEP",
    "NavigationResult",
    "StepValidation",
    "validate_draft",
    "validate_step",
]
