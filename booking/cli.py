"""Terminal booking wizard — walks the four steps and submits over HTTP.

Usage:
    # Submit to a local API (default)
    python -m booking.cli

    # Submit to a different deployment
    python -m booking.cli --url https://bookings.example.com
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Callable

from booking.config import settings
from booking.form.session import FormSession
from booking.form.steps import FORM_STEPS, LAST_STEP
from booking.models.draft import DATE_FIELDS, FIELD_ORDER, parse_iso_date
from booking.stores.base import SHEET_HEADERS
from booking.submitters import HttpSubmitter

# Sheet headers double as prompt labels (same column order, minus Timestamp)
FIELD_LABELS: dict[str, str] = dict(zip(FIELD_ORDER, SHEET_HEADERS[1:]))

Ask = Callable[[str], str]
Out = Callable[[str], None]


def prompt_field(session: FormSession, name: str, ask: Ask, out: Out) -> None:
    """Prompt for one field. A blank answer keeps the current value."""
    label = FIELD_LABELS[name]
    options = session.step_options().get(name)
    current = getattr(session.draft, name)

    if options is not None:
        if not options:
            out(f"{label}: choose a service type first.")
            return
        keys = list(options)
        out(f"{label}:")
        for i, key in enumerate(keys, 1):
            out(f"  {i}. {options[key]}")

    hint = f" [{current}]" if current else ""
    if name in DATE_FIELDS:
        hint += " (YYYY-MM-DD)"
    raw = ask(f"{label}{hint}: ").strip()
    if not raw:
        return

    if name in DATE_FIELDS:
        parsed = parse_iso_date(raw, session.timezone)
        if parsed is None or not session.set_field(name, parsed):
            out("  That date can't be selected.")
        return

    value = raw
    if options and raw.isdigit() and 1 <= int(raw) <= len(options):
        value = list(options)[int(raw) - 1]
    session.set_field(name, value)


async def run_wizard(session: FormSession, ask: Ask = input, out: Out = print) -> bool:
    """Drive the session until it submits (True) or the user quits (False)."""
    pending: list[str] | None = None

    while True:
        step = FORM_STEPS[session.current_step]
        out(f"\nStep {step.number} of {LAST_STEP}: {step.title}")
        for name in pending or step.fields:
            prompt_field(session, name, ask, out)

        action = "submit" if step.number == LAST_STEP else "next"
        choice = ask(f"[Enter] {action}  [b] back  [q] quit: ").strip().lower()
        if choice == "q":
            return False
        if choice == "b":
            session.go_previous()
            pending = None
            continue

        result = await session.go_next()
        if result.submitted:
            out(result.message)
            return True

        pending = None
        if result.errors:
            for name, message in result.errors.items():
                out(f"  ✗ {FIELD_LABELS[name]}: {message}")
            pending = [name for name in result.errors if name in step.fields] or None
            if pending is None:
                out("  Go back to fix the answers above.")
        elif result.message:
            out(result.message)


def main():
    parser = argparse.ArgumentParser(
        description="Book a home service from the terminal",
        prog="python -m booking.cli",
    )
    parser.add_argument(
        "--url",
        default=settings.api_base_url,
        help=f"Booking API base URL (default: {settings.api_base_url})",
    )
    parser.add_argument(
        "--timeout", type=float, default=30.0,
        help="Seconds to wait for the API (default: 30)",
    )
    args = parser.parse_args()

    session = FormSession(submitter=HttpSubmitter(args.url, timeout=args.timeout))
    try:
        submitted = asyncio.run(run_wizard(session))
    except (KeyboardInterrupt, EOFError):
        print("\nCancelled.")
        submitted = False
    sys.exit(0 if submitted else 1)


if __name__ == "__main__":
    main()
