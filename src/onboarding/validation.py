"""
Profile Field Validator.

Applies PROFILE_SCHEMA to a draft and returns one human-readable message per
invalid field. Pure: the same draft always yields the same errors, and the
result is a fresh dict each pass (fields that became valid simply disappear).

Per field, checks run in order and stop at the first failure:
1. required-ness
2. type
3. pattern / range / allowed values
"""

import logging
import math
import re
from typing import Any, Iterable

from .draft import ProfileDraft, is_filled
from .schema import PROFILE_SCHEMA, FieldRule, FieldSchema, FieldType

logger = logging.getLogger(__name__)

ValidationErrors = dict[str, str]


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _format_bound(bound: float) -> str:
    return f"{bound:g}"


def _check_type(rule: FieldRule, value: Any) -> str | None:
    if rule.type in (FieldType.STRING, FieldType.ENUM):
        if not isinstance(value, str):
            return f"{rule.label} must be text"
    elif rule.type == FieldType.NUMBER:
        if not _is_number(value):
            return f"{rule.label} must be a number"
    elif rule.type == FieldType.BOOLEAN:
        if not isinstance(value, bool):
            return f"{rule.label} must be yes or no"
    elif rule.type == FieldType.ARRAY:
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            return f"{rule.label} must be a list of options"
    return None


def _check_constraints(rule: FieldRule, value: Any) -> str | None:
    if rule.type == FieldType.NUMBER:
        if rule.min is not None and value < rule.min:
            return rule.message("min", f"{rule.label} must be at least {_format_bound(rule.min)}")
        if rule.max is not None and value > rule.max:
            return rule.message("max", f"{rule.label} must not exceed {_format_bound(rule.max)}")

    elif rule.type == FieldType.STRING:
        if rule.min is not None and len(value) < rule.min:
            return rule.message(
                "min", f"{rule.label} must be at least {_format_bound(rule.min)} characters"
            )
        if rule.max is not None and len(value) > rule.max:
            return rule.message(
                "max", f"{rule.label} must not exceed {_format_bound(rule.max)} characters"
            )
        if rule.pattern and not re.fullmatch(rule.pattern, value):
            return rule.message("pattern", f"{rule.label} is not in a valid format")

    elif rule.type == FieldType.ENUM:
        if rule.allowed is not None and value not in rule.allowed:
            return rule.message("allowed", f"Please select a valid {rule.label.lower()}")

    elif rule.type == FieldType.ARRAY:
        if rule.allowed is not None:
            unknown = [v for v in value if v not in rule.allowed]
            if unknown:
                return rule.message(
                    "allowed", f"Unknown {rule.label.lower()}: {', '.join(unknown)}"
                )

    return None


def validate_field(rule: FieldRule, value: Any) -> str | None:
    """Validate one value against its rule. Returns the error message or None."""
    if not is_filled(value):
        if rule.required:
            return rule.message("required", f"{rule.label} is required")
        # Optional and empty: nothing else to check
        return None

    return _check_type(rule, value) or _check_constraints(rule, value)


def validate(
    draft: ProfileDraft,
    schema: FieldSchema = PROFILE_SCHEMA,
    fields: Iterable[str] | None = None,
) -> ValidationErrors:
    """
    Validate a draft.

    Args:
        draft: Current form values
        schema: Field rules to apply
        fields: Restrict the pass to these field names (default: every schema field)

    Returns:
        Mapping of field name -> error message, only for invalid fields
    """
    names = list(schema) if fields is None else [name for name in fields if name in schema]

    errors: ValidationErrors = {}
    for name in names:
        message = validate_field(schema[name], draft.get(name))
        if message:
            errors[name] = message

    if errors:
        logger.debug(f"Validation found {len(errors)} invalid field(s): {sorted(errors)}")
    return errors


def is_valid(draft: ProfileDraft, schema: FieldSchema = PROFILE_SCHEMA) -> bool:
    return not validate(draft, schema)
