"""Google Sheets booking store.

Uses a Google Cloud service account to append rows through the Sheets API
v4. Credentials come from a service-account JSON key file or from an info
dict assembled from individual ``GOOGLE_*`` settings.
"""

from __future__ import annotations

import asyncio
import logging
import os
from functools import partial
from typing import Any

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from booking.errors import BookingStoreError, StoreNotConfiguredError

from .base import SHEET_HEADERS, BookingStore, booking_timestamp, build_row

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class GoogleSheetsStore(BookingStore):
    """BookingStore backed by a single Google Sheets tab."""

    def __init__(
        self,
        spreadsheet_id: str,
        sheet_name: str = "Sheet1",
        service_account_path: str | None = None,
        service_account_info: dict[str, Any] | None = None,
        timezone: str = "Asia/Manila",
    ) -> None:
        if not spreadsheet_id:
            raise StoreNotConfiguredError(
                "A spreadsheet ID must be provided via constructor argument "
                "or GOOGLE_SHEET_ID env var."
            )
        sa_path = service_account_path or os.environ.get(
            "GOOGLE_SERVICE_ACCOUNT_JSON", ""
        )
        if service_account_info:
            self._credentials = Credentials.from_service_account_info(
                service_account_info, scopes=SCOPES
            )
        elif sa_path:
            self._credentials = Credentials.from_service_account_file(
                sa_path, scopes=SCOPES
            )
        else:
            raise StoreNotConfiguredError(
                "Google service account credentials must be provided as a "
                "JSON key path or as service account info."
            )
        self._service = build(
            "sheets", "v4", credentials=self._credentials, cache_discovery=False
        )
        self._spreadsheet_id = spreadsheet_id
        self._sheet_name = sheet_name
        self._timezone = timezone
        logger.info("Google Sheets store initialized for sheet %s", sheet_name)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run a synchronous Google API call in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, partial(func, *args, **kwargs)
        )

    @property
    def _header_range(self) -> str:
        return f"{self._sheet_name}!1:1"

    @property
    def _data_range(self) -> str:
        # 19 columns: timestamp + 18 booking fields
        return f"{self._sheet_name}!A:S"

    def _values(self):
        return self._service.spreadsheets().values()

    # ------------------------------------------------------------------
    # BookingStore interface
    # ------------------------------------------------------------------

    async def ensure_headers(self) -> None:
        """Write the header row when the first row of the sheet is empty."""
        try:
            response = await self._run_in_executor(
                self._values()
                .get(spreadsheetId=self._spreadsheet_id, range=self._header_range)
                .execute
            )
            if response.get("values"):
                return

            await self._run_in_executor(
                self._values()
                .update(
                    spreadsheetId=self._spreadsheet_id,
                    range=self._header_range,
                    valueInputOption="USER_ENTERED",
                    body={"values": [SHEET_HEADERS]},
                )
                .execute
            )
        except HttpError as e:
            logger.error("Error adding headers: %s", e)
            raise BookingStoreError(f"Failed to write sheet headers: {e}") from e

        logger.info("Headers added to %s", self._sheet_name)

    async def add_booking(self, booking: dict[str, Any]) -> dict:
        """Append the booking as one row below the existing data."""
        await self.ensure_headers()

        row = build_row(booking, booking_timestamp(self._timezone))
        try:
            response = await self._run_in_executor(
                self._values()
                .append(
                    spreadsheetId=self._spreadsheet_id,
                    range=self._data_range,
                    valueInputOption="USER_ENTERED",
                    body={"values": [row]},
                )
                .execute
            )
        except HttpError as e:
            logger.error("Error adding booking data: %s", e)
            raise BookingStoreError(f"Failed to append booking: {e}") from e

        updated_rows = response.get("updates", {}).get("updatedRows")
        logger.info("Booking appended to %s (%s rows)", self._sheet_name, updated_rows)
        return {"success": True, "updatedRows": updated_rows}

    async def get_all_bookings(self) -> list[list[str]]:
        try:
            response = await self._run_in_executor(
                self._values()
                .get(spreadsheetId=self._spreadsheet_id, range=self._data_range)
                .execute
            )
        except HttpError as e:
            logger.error("Error getting bookings: %s", e)
            raise BookingStoreError(f"Failed to read bookings: {e}") from e
        return response.get("values", [])
