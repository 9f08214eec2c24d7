"""Pydantic model for the result of handing a draft to the submission collaborator."""

from typing import Any

from pydantic import BaseModel

GENERIC_FAILURE_MESSAGE = (
    "There was an error submitting your request. Please try again."
)
SUCCESS_MESSAGE = (
    "Booking request submitted successfully! We will contact you soon."
)


class SubmissionResult(BaseModel):
    """Outcome reported back by a submission collaborator."""

    success: bool
    message: str = ""

    @classmethod
    def from_response(cls, body: Any) -> "SubmissionResult":
        """Read a ``{success, message}`` response body, tolerating junk."""
        if not isinstance(body, dict):
            return cls(success=False, message=GENERIC_FAILURE_MESSAGE)
        message = body.get("message")
        return cls(
            success=body.get("success") is True,
            message=message if isinstance(message, str) else "",
        )
