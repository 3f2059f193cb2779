"""
Profile Wizard.

Owns the draft and wires the engine together for a front-end:

    edit -> on-change validation (touched fields) -> completeness
    next -> navigator gate -> advance
    submit (last section) -> whole-draft validation -> orchestrator

The draft is replaced, never mutated in place. Completeness is computed on
every read so it cannot drift from the draft.
"""

import logging
from types import MappingProxyType
from typing import Any, Mapping

from .completeness import completeness_score
from .draft import ProfileDraft
from .images import MAX_IMAGE_BYTES, ImageFile, ImageStager, StagedImage, StageResult
from .schema import PROFILE_SCHEMA, FieldSchema
from .sections import (
    SECTIONS,
    NavigationResult,
    Section,
    SectionNavigator,
    SectionStatus,
    ValidationScope,
)
from .services import ProfileCollaborator
from .submission import SubmissionOrchestrator, SubmissionResult, SubmissionState
from .validation import ValidationErrors, validate

logger = logging.getLogger(__name__)

INVALID_SUBMIT_MESSAGE = "Please fix the highlighted fields before submitting."
NOT_LAST_SECTION_MESSAGE = "Finish the remaining sections before submitting."


class ProfileWizard:
    """
    Progressive profile setup.

    Args:
        collaborator: Image upload + profile setup backend
        scope: Fields re-checked on next (whole draft or active section)
        gate_jumps: Validate forward tab clicks like next
        lock_navigation_during_submit: Refuse section moves while submitting
        max_image_bytes: Staging size limit
    """

    def __init__(
        self,
        collaborator: ProfileCollaborator,
        *,
        scope: ValidationScope | str = ValidationScope.ALL,
        gate_jumps: bool = False,
        lock_navigation_during_submit: bool = False,
        max_image_bytes: int = MAX_IMAGE_BYTES,
        schema: FieldSchema = PROFILE_SCHEMA,
        sections: tuple[Section, ...] = SECTIONS,
        draft: ProfileDraft | None = None,
    ):
        self.schema = schema
        self.navigator = SectionNavigator(
            sections, scope=ValidationScope(scope), gate_jumps=gate_jumps, schema=schema
        )
        self.stager = ImageStager(max_bytes=max_image_bytes)
        self.orchestrator = SubmissionOrchestrator(collaborator)
        self.lock_navigation_during_submit = lock_navigation_during_submit

        self._draft = draft or ProfileDraft()
        self._touched: set[str] = set()
        self._errors: ValidationErrors = {}
        self.image_message = ""

    @classmethod
    def from_settings(cls, collaborator: ProfileCollaborator, settings: Any = None) -> "ProfileWizard":
        """Build a wizard with the navigation policies from settings."""
        if settings is None:
            from sheshape.config import settings
        return cls(
            collaborator,
            scope=settings.wizard_validation_scope,
            gate_jumps=settings.wizard_gate_jumps,
            lock_navigation_during_submit=settings.wizard_lock_navigation_during_submit,
            max_image_bytes=settings.max_profile_image_bytes,
        )

    # -------------------------------------------------------------------------
    # Observed state
    # -------------------------------------------------------------------------

    @property
    def draft(self) -> ProfileDraft:
        return self._draft

    @property
    def errors(self) -> Mapping[str, str]:
        return MappingProxyType(self._errors)

    @property
    def completeness(self) -> int:
        return completeness_score(self._draft, self.schema)

    @property
    def current_section(self) -> Section:
        return self.navigator.current

    @property
    def primary_action(self) -> str:
        return self.navigator.primary_action

    @property
    def staged_image(self) -> StagedImage | None:
        return self.stager.staged

    @property
    def submission_state(self) -> SubmissionState:
        return self.orchestrator.state

    @property
    def can_submit(self) -> bool:
        """False while a submission is in flight; front-ends disable the button."""
        return self.navigator.is_last and not self.orchestrator.in_flight

    def section_states(self) -> list[tuple[Section, SectionStatus]]:
        return self.navigator.section_states()

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def _replace(self, draft: ProfileDraft, touched: list[str]) -> ValidationErrors:
        self._draft = draft
        self._touched.update(touched)
        self._errors = validate(draft, self.schema, sorted(self._touched))
        return self._errors

    def set_value(self, name: str, value: Any) -> ValidationErrors:
        return self._replace(self._draft.set(name, value), [name])

    def set_from_input(self, name: str, raw: str) -> ValidationErrors:
        return self._replace(self._draft.set_from_input(name, raw), [name])

    def update(self, changes: Mapping[str, Any]) -> ValidationErrors:
        return self._replace(self._draft.update(changes), list(changes))

    def toggle(self, name: str, value: str) -> ValidationErrors:
        return self._replace(self._draft.toggle(name, value), [name])

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def _sync_lock(self) -> None:
        self.navigator.locked = (
            self.lock_navigation_during_submit and self.orchestrator.in_flight
        )

    def _surface(self, result: NavigationResult) -> NavigationResult:
        if result.errors:
            self._touched.update(result.errors)
            self._errors = result.errors
        return result

    def next(self) -> NavigationResult:
        self._sync_lock()
        return self._surface(self.navigator.next(self._draft))

    def previous(self) -> NavigationResult:
        self._sync_lock()
        return self.navigator.previous()

    def jump_to(self, target: int | str) -> NavigationResult:
        self._sync_lock()
        return self._surface(self.navigator.jump_to(target, self._draft))

    # -------------------------------------------------------------------------
    # Image
    # -------------------------------------------------------------------------

    def stage_image(self, file: ImageFile) -> StageResult:
        result = self.stager.stage(file)
        self.image_message = result.message
        return result

    def clear_image(self) -> None:
        self.stager.clear()
        self.image_message = ""

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    async def submit(self) -> SubmissionResult:
        """
        Validate the whole draft and submit it.

        Refused without calling the backend unless the last section is active
        and every field is valid. A call made while one runs is ignored.
        """
        if self.orchestrator.in_flight:
            return SubmissionResult(success=False, ignored=True)

        if not self.navigator.is_last:
            logger.info(f"Submit refused: on section {self.current_section.id}")
            return SubmissionResult(success=False, message=NOT_LAST_SECTION_MESSAGE)

        errors = validate(self._draft, self.schema)
        if errors:
            self._touched.update(errors)
            self._errors = errors
            logger.info(f"Submit refused: {len(errors)} invalid field(s)")
            return SubmissionResult(success=False, message=INVALID_SUBMIT_MESSAGE)

        result = await self.orchestrator.submit(self._draft, self.stager.staged)
        if result.success:
            self.stager.clear()
        return result
