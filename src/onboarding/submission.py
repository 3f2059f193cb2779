"""
Submission Orchestrator.

Runs the final submit, at most one at a time:
1. upload the staged image (if any) and keep its URL
2. build the payload with defaults
3. hand it to the profile-setup collaborator

Upload and setup are sequential: the payload needs the image URL. A second
submit while one is in flight is ignored, not queued. Failures never raise
out of submit(); they land in SubmissionState as failed(message) and the
in-flight flag is cleared so the user can fix the data and try again.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from pydantic import ValidationError

from .draft import ProfileDraft
from .images import StagedImage
from .payload import build_payload
from .services import ProfileCollaborator

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Your profile has been successfully set up! Redirecting to your dashboard..."
SETUP_FAILED_MESSAGE = "Profile setup failed. Please try again."
UPLOAD_FAILED_MESSAGE = "Profile image upload failed. Please try again."
INVALID_PAYLOAD_MESSAGE = "Please fix the highlighted fields before submitting."


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SubmissionError(str, Enum):
    IMAGE_UPLOAD_FAILED = "image_upload_failed"
    SETUP_FAILED = "setup_failed"
    INVALID_PAYLOAD = "invalid_payload"


@dataclass(frozen=True)
class SubmissionState:
    status: SubmissionStatus = SubmissionStatus.IDLE
    message: str = ""


@dataclass
class SubmissionResult:
    """
    Outcome of one submit() call.

    ignored is True when the call was dropped because another submission
    was already in flight.
    """
    success: bool
    error: SubmissionError | None = None
    message: str = ""
    ignored: bool = False


def error_message(exc: Exception, fallback: str) -> str:
    """Prefer the message from the collaborator's structured error payload."""
    payload = getattr(exc, "payload", None)
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return fallback


class SubmissionOrchestrator:
    """Owns SubmissionState; everyone else observes it."""

    def __init__(self, collaborator: ProfileCollaborator):
        self.collaborator = collaborator
        self._state = SubmissionState()
        self._in_flight = False
        self._listeners: list[Callable[[SubmissionState], None]] = []

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def subscribe(self, listener: Callable[[SubmissionState], None]) -> None:
        self._listeners.append(listener)

    def _transition(self, status: SubmissionStatus, message: str = "") -> None:
        self._state = SubmissionState(status, message)
        for listener in self._listeners:
            listener(self._state)

    async def submit(
        self,
        draft: ProfileDraft,
        staged_image: StagedImage | None = None,
    ) -> SubmissionResult:
        if self._in_flight:
            logger.info("Submission already in flight, ignoring")
            return SubmissionResult(success=False, ignored=True)

        self._in_flight = True
        self._transition(SubmissionStatus.IN_FLIGHT)
        try:
            return await self._run(draft, staged_image)
        finally:
            self._in_flight = False

    async def _run(
        self,
        draft: ProfileDraft,
        staged_image: StagedImage | None,
    ) -> SubmissionResult:
        image_url = None
        if staged_image is not None:
            try:
                image_url = await self.collaborator.upload_profile_image(staged_image)
            except Exception as e:
                logger.error(f"Profile image upload failed: {e}")
                return self._fail(
                    SubmissionError.IMAGE_UPLOAD_FAILED,
                    error_message(e, UPLOAD_FAILED_MESSAGE),
                )

        try:
            payload = build_payload(draft, image_url).to_dict()
        except ValidationError as e:
            logger.error(f"Draft does not satisfy the payload contract: {e}")
            return self._fail(SubmissionError.INVALID_PAYLOAD, INVALID_PAYLOAD_MESSAGE)

        try:
            await self.collaborator.setup_profile(payload)
        except Exception as e:
            logger.error(f"Profile setup failed: {e}")
            return self._fail(
                SubmissionError.SETUP_FAILED,
                error_message(e, SETUP_FAILED_MESSAGE),
            )

        logger.info("Profile submitted")
        self._transition(SubmissionStatus.SUCCEEDED, SUCCESS_MESSAGE)
        return SubmissionResult(success=True, message=SUCCESS_MESSAGE)

    def _fail(self, error: SubmissionError, message: str) -> SubmissionResult:
        self._transition(SubmissionStatus.FAILED, message)
        return SubmissionResult(success=False, error=error, message=message)
