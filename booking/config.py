"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("booking.config")


class Settings(BaseSettings):
    # Google Sheets
    google_service_account_json: str = ""
    google_client_email: str = ""
    google_private_key: str = ""
    google_project_id: str = ""
    google_private_key_id: str = ""
    google_client_id: str = ""
    google_sheet_id: str = ""
    google_sheet_name: str = "Sheet1"

    # Dates shown to the customer and written to the sheet
    business_timezone: str = "Asia/Manila"

    # Admin auth
    admin_api_key: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    # Server-side wizard sessions older than this are dropped (seconds)
    wizard_session_ttl: int = 3600

    # Terminal wizard
    api_base_url: str = "http://127.0.0.1:8080"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def has_google_credentials(self) -> bool:
        if self.google_service_account_json:
            return True
        return bool(self.google_client_email and self.google_private_key)

    def google_service_account_info(self) -> dict[str, str]:
        """Build a service-account info dict from the individual GOOGLE_* fields.

        Private keys pasted into .env usually carry literal ``\\n`` sequences,
        which are turned back into newlines here.
        """
        return {
            "type": "service_account",
            "project_id": self.google_project_id,
            "private_key_id": self.google_private_key_id,
            "private_key": self.google_private_key.replace("\\n", "\n"),
            "client_email": self.google_client_email,
            "client_id": self.google_client_id,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
        }

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []
        _placeholders = {"your-sheet-id", "path/to/service-account.json"}

        if self.has_google_credentials and not self.google_sheet_id:
            raise ValueError(
                "Google credentials are set but GOOGLE_SHEET_ID is missing. "
                "Set it in .env so bookings have somewhere to go."
            )

        if not self.has_google_credentials:
            warnings.append(
                "Google credentials not set. Bookings are kept in memory only."
            )

        if self.google_sheet_id in _placeholders:
            warnings.append("GOOGLE_SHEET_ID is a placeholder — sheet writes will fail.")

        if self.google_service_account_json in _placeholders:
            warnings.append(
                "GOOGLE_SERVICE_ACCOUNT_JSON is a placeholder — sheet writes will fail."
            )

        if not self.admin_api_key:
            if self.debug:
                warnings.append(
                    "ADMIN_API_KEY not set. Booking records are open (DEBUG=true)."
                )
            else:
                warnings.append(
                    "ADMIN_API_KEY not set. Booking records are locked in production. "
                    "Set ADMIN_API_KEY in .env to enable admin access."
                )

        return warnings


settings = Settings()
