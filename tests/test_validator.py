"""Tests for the field rules and per-step validation."""

from datetime import date, datetime

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from booking.form.steps import FORM_STEPS
from booking.form.validator import (
    FIELD_RULES,
    validate_draft,
    validate_field,
    validate_step,
)
from booking.models.draft import FIELD_ORDER, BookingDraft


def _valid_draft(**overrides) -> BookingDraft:
    values = {
        "fullName": "Juan Dela Cruz",
        "phoneNumber": "+639123456789",
        "emailAddress": "juan@example.com",
        "propertyType": "house",
        "serviceAddress": "123 Main St, Brgy. Uno, Quezon City",
        "serviceType": "plumbing",
        "specificService": "Leak Repair",
        "urgencyLevel": "normal",
        "problemDescription": "Kitchen sink is leaking under the cabinet.",
        "preferredDate": date(2025, 3, 10),
        "preferredTime": "8am-10am",
        "preferredContactMethod": "sms-text",
        "bestTimeToCall": "morning",
    }
    values.update(overrides)
    return BookingDraft(**values)


class TestFieldRules:
    def test_every_field_has_a_rule(self):
        assert set(FIELD_RULES) == set(FIELD_ORDER)

    def test_full_name_too_short(self):
        result = validate_field("fullName", _valid_draft(fullName="J"))
        assert not result.passed
        assert result.message == "Full name must be at least 2 characters."

    def test_full_name_two_chars_ok(self):
        assert validate_field("fullName", _valid_draft(fullName="Jo")).passed

    def test_non_text_value_fails(self):
        draft = _valid_draft()
        draft.fullName = 12345
        assert not validate_field("fullName", draft).passed

    @pytest.mark.parametrize("phone", ["+639123456789", "(02) 8123-4567", "0917 123 4567"])
    def test_phone_accepted(self, phone):
        assert validate_field("phoneNumber", _valid_draft(phoneNumber=phone)).passed

    def test_phone_too_short(self):
        result = validate_field("phoneNumber", _valid_draft(phoneNumber="12345"))
        assert result.message == "Please enter a valid phone number."

    def test_phone_bad_characters(self):
        result = validate_field("phoneNumber", _valid_draft(phoneNumber="call me at 9123"))
        assert result.message == "Please enter a valid phone number format."

    def test_phone_plus_only_at_start(self):
        result = validate_field("phoneNumber", _valid_draft(phoneNumber="63+9123456789"))
        assert not result.passed

    @pytest.mark.parametrize("email", ["juan@", "juan", "@example.com", ""])
    def test_email_rejected(self, email):
        result = validate_field("emailAddress", _valid_draft(emailAddress=email))
        assert result.message == "Please enter a valid email address."

    def test_email_accepted(self):
        assert validate_field("emailAddress", _valid_draft()).passed

    def test_property_type_must_be_listed(self):
        assert not validate_field("propertyType", _valid_draft(propertyType="")).passed
        result = validate_field("propertyType", _valid_draft(propertyType="castle"))
        assert result.message == "Please select a property type."

    def test_service_address_min_length(self):
        result = validate_field("serviceAddress", _valid_draft(serviceAddress="QC"))
        assert result.message == (
            "Please provide a complete address including barangay, city, and landmarks."
        )

    def test_specific_service_follows_service_type(self):
        assert validate_field("specificService", _valid_draft()).passed
        mismatched = _valid_draft(serviceType="air-conditioning", specificService="Leak Repair")
        result = validate_field("specificService", mismatched)
        assert result.message == "Please select a specific service."

    def test_specific_service_empty(self):
        result = validate_field("specificService", _valid_draft(specificService=""))
        assert not result.passed

    def test_problem_description_min_length(self):
        result = validate_field("problemDescription", _valid_draft(problemDescription="leak"))
        assert result.message == "Please provide a detailed problem description."

    def test_preferred_date_required(self):
        result = validate_field("preferredDate", _valid_draft(preferredDate=None))
        assert result.message == "Please select a preferred date."

    def test_preferred_date_must_be_a_date(self):
        draft = _valid_draft()
        draft.preferredDate = "2025-03-10"
        assert not validate_field("preferredDate", draft).passed
        draft.preferredDate = datetime(2025, 3, 10, 9, 0)
        assert not validate_field("preferredDate", draft).passed

    def test_preferred_time_from_time_bands(self):
        assert not validate_field("preferredTime", _valid_draft(preferredTime="")).passed
        result = validate_field("preferredTime", _valid_draft(preferredTime="noon"))
        assert result.message == "Please select a preferred time."

    def test_alternative_date_optional(self):
        assert validate_field("alternativeDate", _valid_draft()).passed

    def test_alternative_date_after_preferred(self):
        draft = _valid_draft(alternativeDate=date(2025, 3, 10))
        result = validate_field("alternativeDate", draft)
        assert result.message == "Alternative date must be after the preferred date."
        assert validate_field(
            "alternativeDate", _valid_draft(alternativeDate=date(2025, 3, 11))
        ).passed

    def test_alternative_time_optional_but_listed(self):
        assert validate_field("alternativeTime", _valid_draft()).passed
        assert validate_field("alternativeTime", _valid_draft(alternativeTime="3pm-5pm")).passed
        assert not validate_field("alternativeTime", _valid_draft(alternativeTime="midnight")).passed

    def test_contact_fields(self):
        result = validate_field("preferredContactMethod", _valid_draft(preferredContactMethod=""))
        assert result.message == "Please select a preferred contact method."
        result = validate_field("bestTimeToCall", _valid_draft(bestTimeToCall=""))
        assert result.message == "Please select the best time to call."

    def test_optional_text_fields_accept_empty(self):
        draft = _valid_draft()
        for name in ("budgetRange", "accessInstructions", "specialRequests"):
            assert validate_field(name, draft).passed


class TestStepValidation:
    def test_step_only_evaluates_its_fields(self):
        # Step 2 onwards is empty, step 1 still passes
        draft = BookingDraft(
            fullName="Juan Dela Cruz",
            phoneNumber="+639123456789",
            emailAddress="juan@example.com",
            propertyType="house",
            serviceAddress="123 Main St, Brgy. Uno, Quezon City",
        )
        result = validate_step(draft, 1)
        assert result.ok
        assert result.fields == FORM_STEPS[1].validated

    def test_invalid_other_steps_do_not_block(self):
        draft = _valid_draft(fullName="", emailAddress="nope")
        assert validate_step(draft, 2).ok

    def test_step_two_skips_budget(self):
        result = validate_step(_valid_draft(), 2)
        assert "budgetRange" not in result.results

    def test_step_three_fields(self):
        result = validate_step(BookingDraft(), 3)
        assert set(result.errors) == {"preferredDate", "preferredTime"}

    def test_step_four_fields(self):
        result = validate_step(BookingDraft(), 4)
        assert set(result.errors) == {"preferredContactMethod", "bestTimeToCall"}

    def test_errors_in_evaluation_order(self):
        result = validate_step(BookingDraft(), 1)
        assert list(result.errors) == FORM_STEPS[1].validated


class TestDraftValidation:
    def test_complete_draft_passes(self):
        assert validate_draft(_valid_draft()).ok

    def test_empty_draft_lists_required_fields(self):
        errors = validate_draft(BookingDraft()).errors
        required = {name for step in FORM_STEPS.values() for name in step.validated}
        assert set(errors) == required

    def test_catches_optional_field_problems(self):
        result = validate_draft(_valid_draft(alternativeTime="midnight"))
        assert not result.ok
        assert list(result.errors) == ["alternativeTime"]
