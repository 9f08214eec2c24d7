"""FastAPI application — booking API and server-side wizard sessions.

Endpoints:

  GET    /health                              Health check
  GET    /api/bookings                        Liveness probe for the booking route
  POST   /api/bookings                        Submit a booking (appends a sheet row)
  GET    /api/bookings/records                Every stored row (admin token)
  GET    /api/options                         Option tables and step titles
  POST   /api/wizard/sessions                 Start a wizard session
  GET    /api/wizard/sessions                 Live sessions (admin token)
  GET    /api/wizard/sessions/{id}            Session state, draft and errors
  PATCH  /api/wizard/sessions/{id}/fields     Edit draft fields
  POST   /api/wizard/sessions/{id}/next       Validate step and advance / submit (ends the session)
  POST   /api/wizard/sessions/{id}/previous   Step back
  DELETE /api/wizard/sessions/{id}            Drop a session
"""

from __future__ import annotations

# Load .env into os.environ early so GOOGLE_* variables are visible to
# anything that reads os.environ directly.
from dotenv import load_dotenv
load_dotenv()

import dataclasses
import logging
import time

# Configure root logger early so all app loggers have a handler and are
# visible when run via `uvicorn booking.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from booking import catalog
from booking.auth import require_admin_token
from booking.config import settings
from booking.errors import MissingFieldsError
from booking.form.session import (
    FormSession,
    get_active_sessions,
    get_session,
    prune_sessions,
    register_session,
    unregister_session,
)
from booking.form.steps import FORM_STEPS
from booking.models.draft import DATE_FIELDS, parse_iso_date
from booking.service import BookingService
from booking.stores.base import BookingStore
from booking.stores.memory import MemoryBookingStore
from booking.submitters import ServiceSubmitter

log = logging.getLogger("booking.app")
logging.getLogger().setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

_START_TIME = time.time()


def create_app(service: BookingService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        service: Optional BookingService to use. When omitted, one is built
                 from settings (Google Sheets if configured, else memory).
    """
    app = FastAPI(
        title="Home Service Booking",
        description="Multi-step booking form backed by Google Sheets",
        version="0.1.0",
    )

    booking_service = service or BookingService(
        store=_create_store(), timezone=settings.business_timezone,
    )
    app.state.booking_service = booking_service

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check — confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Booking route ──────────────────────────────────────────

    @app.get("/api/bookings")
    async def bookings_probe() -> JSONResponse:
        return JSONResponse({
            "message": "Booking API endpoint is working. Use POST to submit bookings.",
        })

    @app.post("/api/bookings")
    async def create_booking(request: Request) -> JSONResponse:
        """Validate the minimum fields, reformat dates and append a sheet row."""
        try:
            booking = await request.json()
            if not isinstance(booking, dict):
                booking = {}
            result = await booking_service.submit(booking)
        except MissingFieldsError as e:
            log.info("Booking rejected: %s", e)
            return JSONResponse(
                {"success": False, "message": str(e)},
                status_code=400,
            )
        except Exception as e:
            log.error("Booking API error: %s", e, exc_info=True)
            return JSONResponse(
                {
                    "success": False,
                    "message": "Internal server error. Please try again.",
                    "error": str(e) if settings.debug else "Server error",
                },
                status_code=500,
            )

        return JSONResponse({
            "success": True,
            "message": "Booking submitted successfully!",
            "data": result,
        })

    @app.get("/api/bookings/records", dependencies=[Depends(require_admin_token)])
    async def list_booking_records() -> JSONResponse:
        """Return every stored row, header row first."""
        try:
            rows = await booking_service.list_bookings()
        except Exception as e:
            log.error("Error getting bookings: %s", e, exc_info=True)
            return JSONResponse(
                {
                    "success": False,
                    "message": "Internal server error. Please try again.",
                    "error": str(e) if settings.debug else "Server error",
                },
                status_code=500,
            )
        return JSONResponse({"success": True, "data": rows})

    # ── Option tables ──────────────────────────────────────────

    @app.get("/api/options")
    async def get_options() -> JSONResponse:
        data = catalog.as_dict()
        data["steps"] = {
            str(number): {"title": step.title, "fields": step.fields}
            for number, step in FORM_STEPS.items()
        }
        return JSONResponse(data)

    # ── Wizard sessions ────────────────────────────────────────

    @app.post("/api/wizard/sessions")
    async def create_wizard_session() -> JSONResponse:
        session = FormSession(
            submitter=ServiceSubmitter(booking_service),
            timezone=settings.business_timezone,
        )
        prune_sessions(settings.wizard_session_ttl)
        register_session(session)
        return JSONResponse(session.to_dict(detail=True), status_code=201)

    @app.get("/api/wizard/sessions", dependencies=[Depends(require_admin_token)])
    async def list_wizard_sessions() -> JSONResponse:
        sessions = get_active_sessions()
        return JSONResponse({
            "sessions": [s.to_dict() for s in sessions.values()],
            "count": len(sessions),
        })

    @app.get("/api/wizard/sessions/{session_id}")
    async def get_wizard_session(session_id: str) -> JSONResponse:
        session = get_session(session_id)
        if not session:
            return JSONResponse({"error": "Session not found"}, status_code=404)
        return JSONResponse(session.to_dict(detail=True))

    @app.patch("/api/wizard/sessions/{session_id}/fields")
    async def update_wizard_fields(session_id: str, request: Request) -> JSONResponse:
        """Apply field edits. Dates accept ``YYYY-MM-DD`` or ISO timestamps."""
        session = get_session(session_id)
        if not session:
            return JSONResponse({"error": "Session not found"}, status_code=404)
        if session.is_submitting:
            return JSONResponse({"error": "Submission in progress"}, status_code=409)

        try:
            body = await request.json()
        except ValueError:
            return JSONResponse({"error": "Body must be valid JSON"}, status_code=400)
        if not isinstance(body, dict):
            return JSONResponse({"error": "Body must be an object"}, status_code=400)

        refused: list[str] = []
        for name, value in body.items():
            if name in DATE_FIELDS and value is not None:
                value = parse_iso_date(value, session.timezone)
                if value is None:
                    refused.append(name)
                    continue
            if not session.set_field(name, value):
                refused.append(name)

        data = session.to_dict(detail=True)
        data["refused"] = refused
        return JSONResponse(data)

    @app.post("/api/wizard/sessions/{session_id}/next")
    async def wizard_next(session_id: str) -> JSONResponse:
        session = get_session(session_id)
        if not session:
            return JSONResponse({"error": "Session not found"}, status_code=404)
        result = await session.go_next()
        if result.submitted:
            # One booking per server-side session
            unregister_session(session_id)
        status_code = 409 if result.rejected else 200
        return JSONResponse(
            {"result": dataclasses.asdict(result), "session": session.to_dict(detail=True)},
            status_code=status_code,
        )

    @app.post("/api/wizard/sessions/{session_id}/previous")
    async def wizard_previous(session_id: str) -> JSONResponse:
        session = get_session(session_id)
        if not session:
            return JSONResponse({"error": "Session not found"}, status_code=404)
        result = session.go_previous()
        status_code = 409 if result.rejected else 200
        return JSONResponse(
            {"result": dataclasses.asdict(result), "session": session.to_dict(detail=True)},
            status_code=status_code,
        )

    @app.delete("/api/wizard/sessions/{session_id}")
    async def delete_wizard_session(session_id: str) -> JSONResponse:
        if not get_session(session_id):
            return JSONResponse({"error": "Session not found"}, status_code=404)
        unregister_session(session_id)
        return JSONResponse({"deleted": session_id})

    return app


# ── Helper functions ──────────────────────────────────────────────

def _create_store() -> BookingStore:
    """Build the configured booking store.

    Falls back to an in-memory store when Google Sheets isn't configured
    or can't be initialized.
    """
    for warning in settings.validate_startup():
        log.warning(warning)

    if settings.has_google_credentials:
        try:
            from booking.stores.google_sheets import GoogleSheetsStore

            info = None
            if not settings.google_service_account_json:
                info = settings.google_service_account_info()
            return GoogleSheetsStore(
                spreadsheet_id=settings.google_sheet_id,
                sheet_name=settings.google_sheet_name,
                service_account_path=settings.google_service_account_json or None,
                service_account_info=info,
                timezone=settings.business_timezone,
            )
        except Exception as e:
            log.warning("Google Sheets not configured: %s", e)

    log.info("Using in-memory booking store")
    return MemoryBookingStore(timezone=settings.business_timezone)


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "booking.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )
