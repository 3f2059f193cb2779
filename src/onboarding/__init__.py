"""
SheShape Onboarding.

Progressive profile wizard engine. Collects the user's profile over four
sections and submits it once as a single payload.

Sections:
1. Personal - name, birth date, contact, body measurements
2. Fitness - level, goals, activities, schedule
3. Health - diet, conditions, medications, emergency contact
4. Preferences - timezone, language, notifications, privacy
"""

from .draft import ProfileDraft, toggle_array_value
from .schema import PROFILE_SCHEMA, FieldRule, FieldType
from .validation import validate
from .completeness import completeness_score
from .sections import SECTIONS, SectionNavigator, ValidationScope
from .images import ImageFile, ImageStager, StagedImage
from .submission import SubmissionOrchestrator, SubmissionState, SubmissionStatus
from .wizard import ProfileWizard

__all__ = [
    "ProfileDraft",
    "toggle_array_value",
    "PROFILE_SCHEMA",
    "FieldRule",
    "FieldType",
    "validate",
    "completeness_score",
    "SECTIONS",
    "SectionNavigator",
    "ValidationScope",
    "ImageFile",
    "ImageStager",
    "StagedImage",
    "SubmissionOrchestrator",
    "SubmissionState",
    "SubmissionStatus",
    "ProfileWizard",
]
