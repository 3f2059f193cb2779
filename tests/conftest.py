"""
Pytest configuration and fixtures for SheShape onboarding tests.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment before importing sheshape modules
os.environ["SHESHAPE_ENV"] = "development"
os.environ.setdefault("API_URL", "http://api.test")

from onboarding.draft import ProfileDraft
from onboarding.images import ImageFile


@pytest.fixture
def empty_draft():
    return ProfileDraft()


@pytest.fixture
def minimal_draft():
    """Only the two required fields."""
    return ProfileDraft({"firstName": "Ava", "lastName": "Lee"})


@pytest.fixture
def full_draft():
    """Every field filled with a valid value."""
    return ProfileDraft({
        "firstName": "Ava",
        "lastName": "Lee",
        "dateOfBirth": "1992-04-18",
        "gender": "FEMALE",
        "phoneNumber": "+447911123456",
        "heightCm": 168,
        "currentWeightKg": 64.5,
        "targetWeightKg": 60,
        "fitnessLevel": "INTERMEDIATE",
        "primaryGoal": "STRENGTH_BUILDING",
        "secondaryGoals": ["Run a 10k"],
        "preferredActivityTypes": ["YOGA", "HIIT"],
        "workoutFrequency": 4,
        "workoutDuration": 45,
        "preferredWorkoutDays": ["Monday", "Thursday"],
        "preferredWorkoutTimes": ["Evening (5-8 PM)"],
        "dietaryRestrictions": ["Vegetarian"],
        "healthConditions": ["Asthma"],
        "medications": ["Salbutamol"],
        "emergencyContactName": "Mia Lee",
        "emergencyContactPhone": "+14155550123",
        "timezone": "Europe/London",
        "language": "en",
        "emailNotifications": False,
        "pushNotifications": True,
        "privacyLevel": "PRIVATE",
    })


@pytest.fixture
def png_file():
    return ImageFile(filename="me.png", content_type="image/png", data=b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)


@pytest.fixture
def mock_collaborator():
    """Profile backend with instant success on both calls."""
    collaborator = MagicMock()
    collaborator.upload_profile_image = AsyncMock(return_value="https://cdn.test/profiles/me.png")
    collaborator.setup_profile = AsyncMock(return_value={"profileCompleted": True})
    return collaborator
