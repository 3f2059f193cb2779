"""
Profile Draft.

The in-progress, partially filled profile. Every mutation returns a new
snapshot, so the wizard can swap drafts atomically and tests can compare
before/after values directly.

Array values are stored as tuples; to_dict() hands lists back out.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .schema import ARRAY_FIELDS, PROFILE_SCHEMA, FieldType

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"y", "yes", "true", "1", "on"}
_FALSE_WORDS = {"n", "no", "false", "0", "off"}


def is_filled(value: Any) -> bool:
    """A value counts as filled unless absent, an empty string or an empty sequence."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


def _check_field(name: str) -> None:
    if name not in PROFILE_SCHEMA:
        raise KeyError(f"Unknown profile field: {name}")


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


@dataclass(frozen=True)
class ProfileDraft:
    """Immutable snapshot of the profile form values."""
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {}
        for name, value in dict(self.values).items():
            _check_field(name)
            if value is not None:
                frozen[name] = _freeze(value)
        object.__setattr__(self, "values", MappingProxyType(frozen))

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def is_filled(self, name: str) -> bool:
        return is_filled(self.values.get(name))

    # -------------------------------------------------------------------------
    # Mutations (each returns a new draft)
    # -------------------------------------------------------------------------

    def set(self, name: str, value: Any) -> "ProfileDraft":
        """Set a field. None removes it."""
        _check_field(name)
        updated = dict(self.values)
        if value is None:
            updated.pop(name, None)
        else:
            updated[name] = value
        return ProfileDraft(updated)

    def unset(self, name: str) -> "ProfileDraft":
        return self.set(name, None)

    def update(self, changes: Mapping[str, Any]) -> "ProfileDraft":
        draft = self
        for name, value in changes.items():
            draft = draft.set(name, value)
        return draft

    def toggle(self, name: str, value: str) -> "ProfileDraft":
        return toggle_array_value(self, name, value)

    def set_from_input(self, name: str, raw: str) -> "ProfileDraft":
        """Set a field from text-box input, coercing to the field's type."""
        return self.set(name, coerce_input(name, raw))

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Plain dict with lists for array fields."""
        return {
            name: list(value) if isinstance(value, tuple) else value
            for name, value in self.values.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProfileDraft":
        return cls(dict(data))

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "ProfileDraft":
        return cls.from_dict(json.loads(json_str))


# =============================================================================
# Array Field Toggle
# =============================================================================


def toggle_array_value(draft: ProfileDraft, name: str, value: str) -> ProfileDraft:
    """
    Add value to an array field, or remove it if already present.

    Values behave as a set: only the first occurrence is removed and a value
    is never appended twice. Insertion order of the rest is preserved.
    Blank values are rejected.
    """
    _check_field(name)
    if name not in ARRAY_FIELDS:
        raise ValueError(f"Field {name} is not a multi-select field")
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Cannot toggle a blank value on {name}")

    current = list(draft.get(name, ()))
    if value in current:
        current.remove(value)
    else:
        current.append(value)
    return draft.set(name, tuple(current))


# =============================================================================
# Text Input Coercion
# =============================================================================


def coerce_input(name: str, raw: str) -> Any:
    """
    Convert raw text input into the value stored in the draft.

    Blank input clears the field. Text that cannot be converted is kept as-is
    so the validator reports a type error instead of silently dropping it.
    """
    _check_field(name)
    rule = PROFILE_SCHEMA[name]
    text = raw.strip()

    if rule.type == FieldType.ARRAY:
        separator = "\n" if name == "medications" else ","
        items = [item.strip() for item in raw.split(separator)]
        return tuple(item for item in items if item)

    if not text:
        return None

    if rule.type == FieldType.NUMBER:
        try:
            number = float(text)
        except ValueError:
            logger.debug(f"Non-numeric input for {name}: {text!r}")
            return text
        if not math.isfinite(number):
            return text
        return int(number) if number.is_integer() else number

    if rule.type == FieldType.BOOLEAN:
        lowered = text.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        return text

    if rule.type == FieldType.ENUM:
        return text.upper()

    return text
