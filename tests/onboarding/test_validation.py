"""
Tests for the field validator.
"""

import pytest

from onboarding.draft import ProfileDraft
from onboarding.schema import PROFILE_SCHEMA
from onboarding.validation import is_valid, validate, validate_field


class TestRequiredFields:

    @pytest.mark.parametrize("missing", ["firstName", "lastName"])
    def test_missing_name_reports_exactly_that_field(self, minimal_draft, missing):
        errors = validate(minimal_draft.unset(missing))
        assert list(errors) == [missing]

    def test_empty_string_counts_as_missing(self, minimal_draft):
        errors = validate(minimal_draft.set("firstName", ""))
        assert errors == {"firstName": "First name is required"}

    def test_minimal_draft_is_valid(self, minimal_draft):
        assert validate(minimal_draft) == {}
        assert is_valid(minimal_draft)

    def test_full_draft_is_valid(self, full_draft):
        assert validate(full_draft) == {}

    def test_absent_optional_fields_produce_no_error(self, minimal_draft):
        errors = validate(minimal_draft)
        assert "phoneNumber" not in errors
        assert "heightCm" not in errors

    def test_empty_optional_string_is_not_checked(self, minimal_draft):
        assert validate(minimal_draft.set("phoneNumber", "")) == {}


class TestPhoneNumbers:

    @pytest.mark.parametrize("phone", ["+14155550123", "14155550123", "+44", "+123456789012345"])
    def test_valid_international_numbers(self, minimal_draft, phone):
        assert validate(minimal_draft.update({"phoneNumber": phone, "emergencyContactPhone": phone})) == {}

    @pytest.mark.parametrize(
        "phone",
        ["+0123456789", "0123456789", "+1 415 555", "+1415abc", "+1", "+1234567890123456", "+4\uff141234", "+\u0664\u0665\u0666\u0667"],
    )
    def test_invalid_numbers(self, minimal_draft, phone):
        errors = validate(minimal_draft.update({"phoneNumber": phone, "emergencyContactPhone": phone}))
        assert errors["phoneNumber"] == "Please provide a valid phone number"
        assert errors["emergencyContactPhone"] == "Please provide a valid emergency contact phone"


class TestRanges:

    @pytest.mark.parametrize(
        "field,low,high",
        [
            ("heightCm", 100, 250),
            ("currentWeightKg", 30, 300),
            ("targetWeightKg", 30, 300),
            ("workoutFrequency", 1, 7),
            ("workoutDuration", 15, 180),
        ],
    )
    def test_bounds_are_inclusive(self, minimal_draft, field, low, high):
        assert validate(minimal_draft.set(field, low)) == {}
        assert validate(minimal_draft.set(field, high)) == {}
        assert field in validate(minimal_draft.set(field, low - 1))
        assert field in validate(minimal_draft.set(field, high + 1))

    def test_range_messages(self, minimal_draft):
        assert validate(minimal_draft.set("heightCm", 99))["heightCm"] == "Height must be at least 100cm"
        assert validate(minimal_draft.set("workoutDuration", 200))["workoutDuration"] == "Maximum 180 minutes"

    def test_name_length_limit(self, minimal_draft):
        errors = validate(minimal_draft.set("firstName", "A" * 51))
        assert errors["firstName"] == "First name must not exceed 50 characters"


class TestTypes:

    def test_non_numeric_height(self, minimal_draft):
        assert validate(minimal_draft.set("heightCm", "tall"))["heightCm"] == "Height (cm) must be a number"

    def test_bool_is_not_a_number(self, minimal_draft):
        assert "workoutFrequency" in validate(minimal_draft.set("workoutFrequency", True))

    def test_boolean_field_rejects_text(self, minimal_draft):
        assert "emailNotifications" in validate(minimal_draft.set("emailNotifications", "maybe"))

    def test_enum_outside_set(self, minimal_draft):
        errors = validate(minimal_draft.set("privacyLevel", "SECRET"))
        assert errors == {"privacyLevel": "Please select a valid privacy level"}

    def test_array_of_enum_rejects_unknown(self, minimal_draft):
        errors = validate(minimal_draft.set("preferredActivityTypes", ["YOGA", "BASE_JUMPING"]))
        assert "BASE_JUMPING" in errors["preferredActivityTypes"]

    def test_free_text_arrays_accept_custom_entries(self, minimal_draft):
        assert validate(minimal_draft.set("dietaryRestrictions", ["Nut-Free"])) == {}

    def test_language_code(self, minimal_draft):
        assert validate(minimal_draft.set("language", "fr")) == {}
        assert "language" in validate(minimal_draft.set("language", "FRA"))


class TestValidatePass:

    def test_errors_are_recomputed_not_merged(self, minimal_draft):
        broken = minimal_draft.update({"heightCm": 20, "phoneNumber": "abc"})
        assert set(validate(broken)) == {"heightCm", "phoneNumber"}

        fixed = broken.set("heightCm", 170)
        assert set(validate(fixed)) == {"phoneNumber"}

    def test_error_keys_subset_of_schema(self):
        errors = validate(ProfileDraft({"heightCm": 1, "gender": "X"}))
        assert set(errors) <= set(PROFILE_SCHEMA)

    def test_restrict_to_fields(self, empty_draft):
        assert validate(empty_draft, fields=["heightCm", "firstName"]) == {"firstName": "First name is required"}

    def test_is_deterministic(self, full_draft):
        broken = full_draft.set("heightCm", 500)
        assert validate(broken) == validate(broken)

    def test_validate_field_direct(self):
        assert validate_field(PROFILE_SCHEMA["gender"], "FEMALE") is None
        assert validate_field(PROFILE_SCHEMA["lastName"], None) == "Last name is required"
