"""Submission collaborators handed to FormSession.

``HttpSubmitter`` posts the serialized draft to a running booking API;
``ServiceSubmitter`` calls the in-process BookingService directly (used by
the server-side wizard endpoints).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from booking.errors import MissingFieldsError
from booking.models.submission import SubmissionResult
from booking.service import BookingService

log = logging.getLogger("booking.submitters")

BOOKINGS_PATH = "/api/bookings"


class HttpSubmitter:
    """POST the draft to ``{base_url}/api/bookings``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def submit(self, payload: dict[str, Any]) -> SubmissionResult:
        url = f"{self._base_url}{BOOKINGS_PATH}"
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(url, json=payload)
        log.info("POST %s → %d", url, resp.status_code)
        # Error statuses still carry a {success, message} body
        return SubmissionResult.from_response(resp.json())


class ServiceSubmitter:
    """Hand the draft straight to a BookingService."""

    def __init__(self, service: BookingService) -> None:
        self._service = service

    async def submit(self, payload: dict[str, Any]) -> SubmissionResult:
        try:
            await self._service.submit(payload)
        except MissingFieldsError as e:
            return SubmissionResult(success=False, message=str(e))
        return SubmissionResult(success=True, message="Booking submitted successfully!")
