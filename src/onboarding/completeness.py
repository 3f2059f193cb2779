"""Profile completeness score, derived from the draft on every call."""

from .draft import ProfileDraft, is_filled
from .schema import PROFILE_SCHEMA, FieldSchema


def filled_fields(draft: ProfileDraft, schema: FieldSchema = PROFILE_SCHEMA) -> list[str]:
    return [name for name in schema if is_filled(draft.get(name))]


def completeness_score(draft: ProfileDraft, schema: FieldSchema = PROFILE_SCHEMA) -> int:
    """
    Percentage of schema fields currently filled, rounded to a whole number.

    Returns 0 for an empty schema.
    """
    total = len(schema)
    if total == 0:
        return 0
    return round(100 * len(filled_fields(draft, schema)) / total)
