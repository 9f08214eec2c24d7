"""In-process booking store used when no spreadsheet is configured."""

from __future__ import annotations

import logging
from typing import Any

from .base import SHEET_HEADERS, BookingStore, booking_timestamp, build_row

logger = logging.getLogger(__name__)


class MemoryBookingStore(BookingStore):
    """Keeps rows in a list for the lifetime of the process."""

    def __init__(self, timezone: str = "Asia/Manila") -> None:
        self._timezone = timezone
        self._rows: list[list[str]] = []

    @property
    def rows(self) -> list[list[str]]:
        return [list(r) for r in self._rows]

    async def ensure_headers(self) -> None:
        if not self._rows:
            self._rows.append(list(SHEET_HEADERS))
            logger.info("Headers added to in-memory store")

    async def add_booking(self, booking: dict[str, Any]) -> dict:
        await self.ensure_headers()
        self._rows.append(build_row(booking, booking_timestamp(self._timezone)))
        return {"success": True, "updatedRows": 1}

    async def get_all_bookings(self) -> list[list[str]]:
        return self.rows
