"""Tests for the schema-driven validation engine."""

from typing import Any, Dict, List

import pytest

from dynreg.models.field_schema.field_schema import FieldDefinition
from dynreg.services.validation.validation import as_text, validate_fields
from dynreg.utils.logger_utils import logger


def make_field(**overrides: Any) -> FieldDefinition:
    data: Dict[str, Any] = {"id": "value", "label": "Value", "type": "text", "validation": {}}
    data.update(overrides)
    return FieldDefinition.model_validate(data)


class TestScenarios:
    """End-to-end verdicts on the Project A schema."""

    def test_short_valid_name_and_bad_email(self, basic_schema: List[FieldDefinition]) -> None:
        """A two letter name passes minLength 2; only email fails."""
        result = validate_fields(basic_schema, {"name": "Jo", "email": "bad"})

        assert result.is_valid is False
        assert list(result.errors) == ["email"]
        assert result.errors["email"] == "Please enter a valid email address"
        assert result.validated_fields == {"name": "Jo"}

    def test_empty_required_name(self, basic_schema: List[FieldDefinition]) -> None:
        result = validate_fields(basic_schema, {"name": "", "email": "a@b.com"})

        assert result.errors == {"name": "Full Name is required"}
        assert result.validated_fields == {"email": "a@b.com"}

    def test_valid_submission(self, basic_schema: List[FieldDefinition]) -> None:
        result = validate_fields(basic_schema, {"name": "Jane Doe", "email": "jane@example.com"})

        assert result.is_valid is True
        assert result.errors == {}
        assert result.validated_fields == {"name": "Jane Doe", "email": "jane@example.com"}

    def test_unknown_keys_are_dropped(self, basic_schema: List[FieldDefinition]) -> None:
        result = validate_fields(
            basic_schema, {"name": "Jane", "email": "jane@example.com", "isAdmin": True}
        )

        assert result.is_valid is True
        assert "isAdmin" not in result.validated_fields

    def test_same_input_same_result(self, basic_schema: List[FieldDefinition]) -> None:
        data = {"name": "J", "email": "nope"}

        first = validate_fields(basic_schema, data)
        second = validate_fields(basic_schema, data)

        assert first == second
        assert data == {"name": "J", "email": "nope"}


class TestRequired:
    """Required and optional handling."""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_blank_required_value_fails(self, value: Any) -> None:
        field = make_field(validation={"required": True})

        result = validate_fields([field], {"value": value})

        assert result.errors == {"value": "Value is required"}

    def test_missing_key_fails(self) -> None:
        field = make_field(validation={"required": True})

        assert validate_fields([field], {}).errors == {"value": "Value is required"}

    def test_custom_message_used_for_required(self) -> None:
        field = make_field(validation={"required": True}, errorMessage="Tell us your value")

        assert validate_fields([field], {}).errors == {"value": "Tell us your value"}

    def test_optional_empty_value_is_skipped(self) -> None:
        """Empty optional fields skip every other rule and are not accepted."""
        field = make_field(type="email", validation={"minLength": 5, "pattern": "^x"})

        result = validate_fields([field], {"value": "  "})

        assert result.is_valid is True
        assert result.validated_fields == {}

    def test_zero_and_false_count_as_present(self) -> None:
        fields = [
            make_field(id="count", type="number", validation={"required": True}),
            make_field(id="agree", validation={"required": True}),
        ]

        result = validate_fields(fields, {"count": 0, "agree": False})

        assert result.is_valid is True
        assert result.validated_fields == {"count": 0, "agree": False}


class TestLength:
    """minLength / maxLength use a computed message."""

    def test_below_min_length(self) -> None:
        field = make_field(validation={"minLength": 3}, errorMessage="custom")

        result = validate_fields([field], {"value": "ab"})

        assert result.errors == {"value": "Value must be at least 3 characters"}

    def test_above_max_length(self) -> None:
        field = make_field(validation={"maxLength": 3}, errorMessage="custom")

        result = validate_fields([field], {"value": "abcd"})

        assert result.errors == {"value": "Value must not exceed 3 characters"}

    def test_length_is_not_trimmed(self) -> None:
        field = make_field(validation={"minLength": 4})

        assert validate_fields([field], {"value": " ab "}).is_valid is True

    def test_numbers_are_measured_as_text(self) -> None:
        field = make_field(type="number", validation={"maxLength": 3})

        assert validate_fields([field], {"value": 1234}).errors == {"value": "Value must not exceed 3 characters"}
        assert validate_fields([field], {"value": 123}).is_valid is True

    def test_min_length_checked_before_pattern(self) -> None:
        field = make_field(validation={"minLength": 5, "pattern": "^[0-9]+$"}, errorMessage="digits only")

        result = validate_fields([field], {"value": "ab"})

        assert result.errors == {"value": "Value must be at least 5 characters"}


class TestPattern:
    """Admin supplied regular expressions."""

    def test_pattern_mismatch_uses_custom_message(self) -> None:
        field = make_field(validation={"pattern": "^[A-Z]{3}$"}, errorMessage="Three capitals")

        assert validate_fields([field], {"value": "abc"}).errors == {"value": "Three capitals"}
        assert validate_fields([field], {"value": "ABC"}).is_valid is True

    def test_pattern_mismatch_default_message(self) -> None:
        field = make_field(validation={"pattern": "^[0-9]+$"})

        assert validate_fields([field], {"value": "12a"}).errors == {"value": "Value format is invalid"}

    def test_pattern_searches_unanchored(self) -> None:
        field = make_field(validation={"pattern": "[0-9]"})

        assert validate_fields([field], {"value": "abc1"}).is_valid is True

    def test_malformed_pattern_is_ignored_and_logged(self) -> None:
        messages: List[str] = []
        handler_id = logger.add(messages.append, level="WARNING")
        try:
            field = make_field(validation={"required": True, "pattern": "([a-z"})
            result = validate_fields([field], {"value": "anything"})
        finally:
            logger.remove(handler_id)

        assert result.is_valid is True
        assert result.validated_fields == {"value": "anything"}
        assert any("Invalid regex pattern" in message for message in messages)

    def test_pattern_checked_before_type(self) -> None:
        """A custom pattern narrows the email type and reports first."""
        field = make_field(
            type="email",
            validation={"pattern": "@example\\.com$"},
            errorMessage="Company address required",
        )

        assert validate_fields([field], {"value": "jo@gmail.com"}).errors == {"value": "Company address required"}
        assert validate_fields([field], {"value": "jo@example.com"}).is_valid is True

    def test_type_check_still_runs_after_pattern(self) -> None:
        field = make_field(type="email", validation={"pattern": "example"})

        result = validate_fields([field], {"value": "example"})

        assert result.errors == {"value": "Please enter a valid email address"}


class TestTypes:
    """Type-specific checks."""

    @pytest.mark.parametrize("value", ["a@b.co", "first.last+tag@sub.domain.org"])
    def test_valid_email(self, value: str) -> None:
        assert validate_fields([make_field(type="email")], {"value": value}).is_valid is True

    @pytest.mark.parametrize("value", ["bad", "a@b", "a b@c.com", "@b.com", "a@b.com\n"])
    def test_invalid_email(self, value: str) -> None:
        result = validate_fields([make_field(type="email")], {"value": value})

        assert result.errors == {"value": "Please enter a valid email address"}

    @pytest.mark.parametrize("value", ["1234567890", "(555) 123-4567", "1 555 123 4567", "123456789012345"])
    def test_valid_phone(self, value: str) -> None:
        assert validate_fields([make_field(type="phone")], {"value": value}).is_valid is True

    @pytest.mark.parametrize("value", ["123456789", "1234567890123456", "555-CALL-NOW", "+15551234567"])
    def test_invalid_phone(self, value: str) -> None:
        result = validate_fields([make_field(type="phone", errorMessage="10-15 digits")], {"value": value})

        assert result.errors == {"value": "10-15 digits"}

    @pytest.mark.parametrize("value", ["42", "-3.5", " 7 ", "1e3", ".5", "0x1A", "0o17", "0B101", 12, 2.5])
    def test_valid_number(self, value: Any) -> None:
        assert validate_fields([make_field(type="number")], {"value": value}).is_valid is True

    @pytest.mark.parametrize("value", ["abc", "12abc", "nan", "1_000", "-0x1A", "0x", "0b2", True])
    def test_invalid_number(self, value: Any) -> None:
        result = validate_fields([make_field(type="number")], {"value": value})

        assert result.errors == {"value": "Please enter a valid number"}

    def test_select_value_must_be_an_option(self) -> None:
        field = make_field(
            type="select",
            options=[{"label": "X", "value": "x"}, {"label": "Y", "value": "y"}],
            validation={"required": True},
        )

        assert validate_fields([field], {"value": "z"}).errors == {"value": "Please select a valid option"}
        assert validate_fields([field], {"value": "x"}).validated_fields == {"value": "x"}

    def test_select_without_options_accepts_anything(self) -> None:
        field = make_field(type="select", options=[])

        assert validate_fields([field], {"value": "whatever"}).is_valid is True

    def test_textarea_has_no_type_check(self) -> None:
        field = make_field(type="textarea")

        assert validate_fields([field], {"value": "line one\nline two"}).is_valid is True


class TestValueShapes:
    """The engine reports bad shapes instead of raising."""

    @pytest.mark.parametrize("value", [["a", "b"], {"nested": "x"}])
    def test_non_scalar_value_fails_the_field(self, value: Any) -> None:
        result = validate_fields([make_field()], {"value": value})

        assert result.errors == {"value": "Value format is invalid"}
        assert result.validated_fields == {}

    def test_text_form_of_scalars(self) -> None:
        assert as_text(True) == "true"
        assert as_text(False) == "false"
        assert as_text(3.0) == "3"
        assert as_text(3.25) == "3.25"
        assert as_text(10) == "10"

    def test_errors_follow_schema_order(self) -> None:
        fields = [make_field(id=name, label=name.title(), validation={"required": True}) for name in ("c", "a", "b")]

        result = validate_fields(fields, {})

        assert list(result.errors) == ["c", "a", "b"]


class TestSchemaModel:
    """Field schema constraints enforced on write."""

    def test_duplicate_field_ids_rejected(self) -> None:
        from pydantic import ValidationError

        from dynreg.models.field_schema.field_schema import FieldSchema

        with pytest.raises(ValidationError, match="Duplicate field ids: email"):
            FieldSchema.model_validate({
                "tenantId": "xyz",
                "fields": [
                    {"id": "email", "label": "Email", "type": "email"},
                    {"id": "email", "label": "Email again", "type": "email"},
                ],
            })

    def test_unknown_type_rejected(self) -> None:
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            make_field(type="date")

    def test_camel_case_round_trip(self) -> None:
        field = make_field(validation={"minLength": 2, "maxLength": 4}, errorMessage="oops")

        dumped = field.model_dump(by_alias=True)

        assert dumped["errorMessage"] == "oops"
        assert dumped["validation"]["minLength"] == 2
        assert field.model_dump()["validation"]["max_length"] == 4
