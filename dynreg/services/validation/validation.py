"""Schema-driven validation of registration submissions.

``validate_fields`` is the single rule set used both for advisory checks (a form
asking whether its input would be accepted) and for the authoritative check
before a record is stored. It never touches storage and never raises on bad
data: every problem ends up in ``ValidationResult.errors``.
"""

import math
import re
from typing import Any, Dict, Mapping, Optional, Sequence

from dynreg.models.field_schema.field_schema import FieldDefinition, FieldOption
from dynreg.models.validation.validation import ValidationResult
from dynreg.utils.logger_utils import logger

EMAIL_REGEX = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_REGEX = re.compile(r"[0-9]{10,15}")
PHONE_FORMATTING_REGEX = re.compile(r"[\s\-()]")
# Same literals a browser Number() accepts: signed decimals, Infinity and unsigned 0x/0o/0b integers
NUMBER_REGEX = re.compile(
    r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?"
    r"|[+-]?Infinity"
    r"|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
)

SCALAR_TYPES = (str, int, float, bool)


def validate_fields(schema_fields: Sequence[FieldDefinition], submitted_data: Mapping[str, Any]) -> ValidationResult:
    """
    Validate submitted data against a tenant's field schema.

    Fields are checked in schema order and the first failing rule on a field
    wins. Only fields that were present and passed every check are copied to
    ``validated_fields``; keys not declared in the schema are dropped.

    Args:
        schema_fields: Field definitions in display order
        submitted_data: Raw key/value mapping from the submitter

    Returns:
        ValidationResult with the verdict, per-field errors and accepted values

    """
    errors: Dict[str, str] = {}
    validated_fields: Dict[str, Any] = {}

    for field in schema_fields:
        value = submitted_data.get(field.id)

        if _is_empty(value):
            if field.validation.required:
                errors[field.id] = field.error_message or f"{field.label} is required"
            continue

        error = _check_field(field, value)
        if error:
            errors[field.id] = error
            continue

        validated_fields[field.id] = value

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        validated_fields=validated_fields,
    )


def _check_field(field: FieldDefinition, value: Any) -> Optional[str]:
    """Run length, pattern and type rules on a present value."""
    if not isinstance(value, SCALAR_TYPES):
        return field.error_message or f"{field.label} format is invalid"

    text = as_text(value)
    rules = field.validation

    if rules.min_length is not None and len(text) < rules.min_length:
        return f"{field.label} must be at least {rules.min_length} characters"

    if rules.max_length is not None and len(text) > rules.max_length:
        return f"{field.label} must not exceed {rules.max_length} characters"

    if rules.pattern:
        regex = compile_pattern(rules.pattern)
        if regex is not None and not regex.search(text):
            return field.error_message or f"{field.label} format is invalid"

    return validate_by_type(field, value, text)


def validate_by_type(field: FieldDefinition, value: Any, text: str) -> Optional[str]:
    """Type-specific check; returns an error message or None."""
    if field.type == "email":
        if not EMAIL_REGEX.fullmatch(text):
            return field.error_message or "Please enter a valid email address"
    elif field.type == "phone":
        if not PHONE_REGEX.fullmatch(PHONE_FORMATTING_REGEX.sub("", text)):
            return field.error_message or "Please enter a valid phone number"
    elif field.type == "number":
        if not _is_number(value, text):
            return field.error_message or "Please enter a valid number"
    elif field.type == "select":
        if not _is_option(text, field.options):
            return field.error_message or "Please select a valid option"
    return None


def compile_pattern(pattern: str) -> Optional[re.Pattern]:
    """Compile an admin-supplied pattern; a broken one counts as no constraint."""
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.warning(f"Invalid regex pattern {pattern!r} ignored: {e}")
        return None


def as_text(value: Any) -> str:
    """String form of a scalar, spelled the way a browser form would send it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _is_number(value: Any, text: str) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not math.isnan(value)
    return NUMBER_REGEX.fullmatch(text.strip()) is not None


def _is_option(text: str, options: Sequence[FieldOption]) -> bool:
    # No options configured means any value is allowed
    if not options:
        return True
    return text in [option.value for option in options]
