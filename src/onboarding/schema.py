"""
Profile Field Schema.

Declarative rules for every field of the profile setup form. Defined once at
import time and never mutated; the validator, the completeness tracker and the
payload builder all read from PROFILE_SCHEMA.

Only firstName and lastName are required. Everything else is optional and may
be left absent until submission.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


# =============================================================================
# Enumerations (wire values are the canonical payload contract)
# =============================================================================


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"
    PREFER_NOT_TO_SAY = "PREFER_NOT_TO_SAY"


class FitnessLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


class PrimaryGoal(str, Enum):
    WEIGHT_LOSS = "WEIGHT_LOSS"
    MUSCLE_GAIN = "MUSCLE_GAIN"
    STRENGTH_BUILDING = "STRENGTH_BUILDING"
    ENDURANCE = "ENDURANCE"
    FLEXIBILITY = "FLEXIBILITY"
    GENERAL_FITNESS = "GENERAL_FITNESS"


class ActivityType(str, Enum):
    CARDIO = "CARDIO"
    STRENGTH_TRAINING = "STRENGTH_TRAINING"
    YOGA = "YOGA"
    PILATES = "PILATES"
    HIIT = "HIIT"
    DANCING = "DANCING"
    OUTDOOR = "OUTDOOR"


class PrivacyLevel(str, Enum):
    PUBLIC = "PUBLIC"
    FRIENDS = "FRIENDS"
    PRIVATE = "PRIVATE"


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    ARRAY = "array"


# =============================================================================
# Option Lists
# =============================================================================
# Suggestions for the multi-select fields. Only preferredActivityTypes is
# restricted to its option set; the rest accept custom entries.

ACTIVITY_TYPE_OPTIONS = [
    {"id": "CARDIO", "label": "Cardio"},
    {"id": "STRENGTH_TRAINING", "label": "Strength Training"},
    {"id": "YOGA", "label": "Yoga"},
    {"id": "PILATES", "label": "Pilates"},
    {"id": "HIIT", "label": "HIIT"},
    {"id": "DANCING", "label": "Dancing"},
    {"id": "OUTDOOR", "label": "Outdoor Activities"},
]

WORKOUT_DAYS = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

WORKOUT_TIMES = [
    "Early Morning (5-8 AM)",
    "Morning (8-11 AM)",
    "Afternoon (11 AM-2 PM)",
    "Late Afternoon (2-5 PM)",
    "Evening (5-8 PM)",
    "Night (8-11 PM)",
]

COMMON_DIETARY_RESTRICTIONS = [
    "Vegetarian",
    "Vegan",
    "Gluten-Free",
    "Dairy-Free",
    "Keto",
    "Paleo",
    "Low-Carb",
    "Low-Fat",
    "Halal",
    "Kosher",
]

COMMON_HEALTH_CONDITIONS = [
    "Diabetes",
    "High Blood Pressure",
    "Heart Disease",
    "Asthma",
    "Arthritis",
    "Back Problems",
    "Knee Problems",
    "None",
]

# International format: optional "+", 2-15 digits, first digit non-zero
PHONE_PATTERN = r"^[+]?[1-9][0-9]{1,14}$"
LANGUAGE_PATTERN = r"^[a-z]{2}$"


# =============================================================================
# Field Rules
# =============================================================================


@dataclass(frozen=True)
class FieldRule:
    """
    Validation rules for a single profile field.

    min/max bound the value for numbers and the length for strings.
    allowed restricts enum values, or each element of an array.
    """
    name: str
    type: FieldType
    section: str
    label: str
    required: bool = False
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    allowed: tuple[str, ...] | None = None
    messages: Mapping[str, str] = field(default_factory=dict)

    def message(self, key: str, default: str) -> str:
        return self.messages.get(key, default)


def _values(enum_cls: type[Enum]) -> tuple[str, ...]:
    return tuple(member.value for member in enum_cls)


_RULES = [
    # Personal
    FieldRule(
        "firstName", FieldType.STRING, "personal", "First Name",
        required=True, max=50,
        messages={
            "required": "First name is required",
            "max": "First name must not exceed 50 characters",
        },
    ),
    FieldRule(
        "lastName", FieldType.STRING, "personal", "Last Name",
        required=True, max=50,
        messages={
            "required": "Last name is required",
            "max": "Last name must not exceed 50 characters",
        },
    ),
    FieldRule("dateOfBirth", FieldType.STRING, "personal", "Date of Birth"),
    FieldRule(
        "gender", FieldType.ENUM, "personal", "Gender",
        allowed=_values(Gender),
    ),
    FieldRule(
        "phoneNumber", FieldType.STRING, "personal", "Phone Number",
        pattern=PHONE_PATTERN,
        messages={"pattern": "Please provide a valid phone number"},
    ),
    FieldRule(
        "heightCm", FieldType.NUMBER, "personal", "Height (cm)",
        min=100, max=250,
        messages={
            "min": "Height must be at least 100cm",
            "max": "Height must not exceed 250cm",
        },
    ),
    FieldRule(
        "currentWeightKg", FieldType.NUMBER, "personal", "Current Weight (kg)",
        min=30, max=300,
        messages={
            "min": "Weight must be at least 30kg",
            "max": "Weight must not exceed 300kg",
        },
    ),
    FieldRule(
        "targetWeightKg", FieldType.NUMBER, "personal", "Target Weight (kg)",
        min=30, max=300,
        messages={
            "min": "Target weight must be at least 30kg",
            "max": "Target weight must not exceed 300kg",
        },
    ),
    # Fitness
    FieldRule(
        "fitnessLevel", FieldType.ENUM, "fitness", "Fitness Level",
        allowed=_values(FitnessLevel),
    ),
    FieldRule(
        "primaryGoal", FieldType.ENUM, "fitness", "Primary Goal",
        allowed=_values(PrimaryGoal),
    ),
    FieldRule("secondaryGoals", FieldType.ARRAY, "fitness", "Secondary Goals"),
    FieldRule(
        "preferredActivityTypes", FieldType.ARRAY, "fitness", "Preferred Activity Types",
        allowed=_values(ActivityType),
    ),
    FieldRule(
        "workoutFrequency", FieldType.NUMBER, "fitness", "Workouts per Week",
        min=1, max=7,
        messages={
            "min": "Minimum 1 workout per week",
            "max": "Maximum 7 workouts per week",
        },
    ),
    FieldRule(
        "workoutDuration", FieldType.NUMBER, "fitness", "Workout Duration (minutes)",
        min=15, max=180,
        messages={"min": "Minimum 15 minutes", "max": "Maximum 180 minutes"},
    ),
    FieldRule("preferredWorkoutDays", FieldType.ARRAY, "fitness", "Preferred Workout Days"),
    FieldRule("preferredWorkoutTimes", FieldType.ARRAY, "fitness", "Preferred Workout Times"),
    # Health
    FieldRule("dietaryRestrictions", FieldType.ARRAY, "health", "Dietary Restrictions"),
    FieldRule("healthConditions", FieldType.ARRAY, "health", "Health Conditions"),
    FieldRule("medications", FieldType.ARRAY, "health", "Current Medications"),
    FieldRule(
        "emergencyContactName", FieldType.STRING, "health", "Emergency Contact Name",
        max=100,
        messages={"max": "Name must not exceed 100 characters"},
    ),
    FieldRule(
        "emergencyContactPhone", FieldType.STRING, "health", "Emergency Contact Phone",
        pattern=PHONE_PATTERN,
        messages={"pattern": "Please provide a valid emergency contact phone"},
    ),
    # Preferences
    FieldRule("timezone", FieldType.STRING, "preferences", "Timezone"),
    FieldRule(
        "language", FieldType.STRING, "preferences", "Language",
        pattern=LANGUAGE_PATTERN,
        messages={"pattern": "Language must be a valid 2-letter language code"},
    ),
    FieldRule("emailNotifications", FieldType.BOOLEAN, "preferences", "Email Notifications"),
    FieldRule("pushNotifications", FieldType.BOOLEAN, "preferences", "Push Notifications"),
    FieldRule(
        "privacyLevel", FieldType.ENUM, "preferences", "Privacy Level",
        allowed=_values(PrivacyLevel),
    ),
]

FieldSchema = Mapping[str, FieldRule]

PROFILE_SCHEMA: FieldSchema = MappingProxyType({rule.name: rule for rule in _RULES})

REQUIRED_FIELDS = frozenset(name for name, rule in PROFILE_SCHEMA.items() if rule.required)
ARRAY_FIELDS = frozenset(
    name for name, rule in PROFILE_SCHEMA.items() if rule.type == FieldType.ARRAY
)

# Multi-selects driven by toggle clicks (medications and secondaryGoals are free text)
TOGGLE_FIELDS = (
    "preferredActivityTypes",
    "preferredWorkoutDays",
    "preferredWorkoutTimes",
    "dietaryRestrictions",
    "healthConditions",
)


def fields_in_section(section_id: str, schema: FieldSchema = PROFILE_SCHEMA) -> list[str]:
    """Field names belonging to a section, in declaration order."""
    return [name for name, rule in schema.items() if rule.section == section_id]


# =============================================================================
# API Response Helpers
# =============================================================================


def get_form_options() -> dict[str, Any]:
    """
    Get all form options for frontend rendering.

    Returns enum choices for the select boxes and suggestion lists for the
    multi-select checkboxes.
    """
    return {
        "genders": list(_values(Gender)),
        "fitness_levels": list(_values(FitnessLevel)),
        "primary_goals": list(_values(PrimaryGoal)),
        "privacy_levels": list(_values(PrivacyLevel)),
        "activity_types": ACTIVITY_TYPE_OPTIONS,
        "workout_days": WORKOUT_DAYS,
        "workout_times": WORKOUT_TIMES,
        "dietary_restrictions": COMMON_DIETARY_RESTRICTIONS,
        "health_conditions": COMMON_HEALTH_CONDITIONS,
    }
