"""
Profile Setup Payload.

The ProfileSetupRequest is the contract between the wizard and the backend.
JSON field names are camelCase; absent optional fields are left out of the
serialized body entirely rather than sent as empty strings or zeros.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .draft import ProfileDraft
from .schema import ActivityType, FitnessLevel, Gender, PrimaryGoal, PrivacyLevel

# Applied when the user never filled the field
PAYLOAD_DEFAULTS: dict[str, Any] = {
    "language": "en",
    "emailNotifications": True,
    "pushNotifications": True,
    "privacyLevel": PrivacyLevel.FRIENDS.value,
}


class ProfileSetupRequest(BaseModel):
    """Composite payload sent to the profile-setup endpoint."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    # Personal
    first_name: str
    last_name: str
    date_of_birth: str | None = None
    gender: Gender | None = None
    phone_number: str | None = None
    height_cm: int | float | None = None
    current_weight_kg: int | float | None = None
    target_weight_kg: int | float | None = None
    profile_image_url: str | None = None

    # Fitness
    fitness_level: FitnessLevel | None = None
    primary_goal: PrimaryGoal | None = None
    secondary_goals: list[str] | None = None
    preferred_activity_types: list[ActivityType] | None = None
    workout_frequency: int | float | None = None
    workout_duration: int | float | None = None
    preferred_workout_days: list[str] | None = None
    preferred_workout_times: list[str] | None = None

    # Health
    dietary_restrictions: list[str] | None = None
    health_conditions: list[str] | None = None
    medications: list[str] | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None

    # Preferences
    timezone: str | None = None
    language: str = "en"
    email_notifications: bool = True
    push_notifications: bool = True
    privacy_level: PrivacyLevel = PrivacyLevel.FRIENDS

    def to_dict(self) -> dict:
        """Serialize for the wire: camelCase keys, enum values, absent fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def build_payload(draft: ProfileDraft, image_url: str | None = None) -> ProfileSetupRequest:
    """
    Compose the final request from the draft.

    Copies every filled draft field, fills in PAYLOAD_DEFAULTS for the
    untouched preference fields and attaches the uploaded image URL if any.
    Raises pydantic.ValidationError if the draft does not satisfy the contract;
    callers validate the draft first.
    """
    data = {name: value for name, value in draft.to_dict().items() if draft.is_filled(name)}

    for name, default in PAYLOAD_DEFAULTS.items():
        data.setdefault(name, default)

    if image_url:
        data["profileImageUrl"] = image_url

    return ProfileSetupRequest.model_validate(data)
