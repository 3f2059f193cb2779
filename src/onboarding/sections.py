"""
Section Navigation.

Finite-state machine over the ordered wizard sections. The state is just the
active index, always within [0, len(sections) - 1].

Events:
- next:     validate, then advance (clamped at the last section)
- previous: step back (clamped at the first section), never validated
- jump_to:  direct tab click, gated only when gate_jumps is on

A refused move is a normal outcome, reported through NavigationResult.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .draft import ProfileDraft
from .schema import PROFILE_SCHEMA, FieldSchema, fields_in_section
from .validation import ValidationErrors, validate

logger = logging.getLogger(__name__)


class ValidationScope(str, Enum):
    """Which fields a forward move re-checks."""
    ALL = "all"          # Whole draft, every section
    SECTION = "section"  # Only the section being left


class SectionStatus(str, Enum):
    COMPLETED = "completed"
    ACTIVE = "active"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class Section:
    id: str
    label: str
    icon: str


SECTIONS: tuple[Section, ...] = (
    Section("personal", "Personal Info", "user"),
    Section("fitness", "Fitness Profile", "activity"),
    Section("health", "Health Info", "alert-circle"),
    Section("preferences", "Preferences", "settings"),
)


@dataclass
class NavigationResult:
    """Outcome of a navigation event."""
    moved: bool
    index: int
    errors: ValidationErrors = field(default_factory=dict)
    reason: str = ""


class SectionNavigator:
    """
    Tracks the active section.

    locked is raised by the wizard while a submission is in flight when the
    lock-navigation policy is enabled; all moves are refused while set.
    """

    def __init__(
        self,
        sections: tuple[Section, ...] = SECTIONS,
        *,
        scope: ValidationScope = ValidationScope.ALL,
        gate_jumps: bool = False,
        schema: FieldSchema = PROFILE_SCHEMA,
    ):
        if not sections:
            raise ValueError("At least one section is required")
        self.sections = sections
        self.scope = ValidationScope(scope)
        self.gate_jumps = gate_jumps
        self.schema = schema
        self.locked = False
        self._index = 0

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Section:
        return self.sections[self._index]

    @property
    def last_index(self) -> int:
        return len(self.sections) - 1

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == self.last_index

    @property
    def primary_action(self) -> str:
        """Label of the forward button: "submit" on the last section, else "next"."""
        return "submit" if self.is_last else "next"

    def index_of(self, section_id: str) -> int:
        for i, section in enumerate(self.sections):
            if section.id == section_id:
                return i
        raise KeyError(f"Unknown section: {section_id}")

    def section_states(self) -> list[tuple[Section, SectionStatus]]:
        """Each section with its tab status relative to the active one."""
        states = []
        for i, section in enumerate(self.sections):
            if i < self._index:
                status = SectionStatus.COMPLETED
            elif i == self._index:
                status = SectionStatus.ACTIVE
            else:
                status = SectionStatus.UPCOMING
            states.append((section, status))
        return states

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def gate_errors(self, draft: ProfileDraft) -> ValidationErrors:
        """Errors that block leaving the active section under the current scope."""
        if self.scope == ValidationScope.SECTION:
            return validate(draft, self.schema, fields_in_section(self.current.id, self.schema))
        return validate(draft, self.schema)

    def next(self, draft: ProfileDraft) -> NavigationResult:
        if self.locked:
            return self._refused("Navigation is locked while the profile is submitting")

        errors = self.gate_errors(draft)
        if errors:
            logger.info(
                f"Staying on section '{self.current.id}': {len(errors)} invalid field(s)"
            )
            return NavigationResult(
                moved=False,
                index=self._index,
                errors=errors,
                reason="Please fix the highlighted fields before continuing",
            )

        return self._move_to(min(self._index + 1, self.last_index))

    def previous(self) -> NavigationResult:
        if self.locked:
            return self._refused("Navigation is locked while the profile is submitting")
        return self._move_to(max(self._index - 1, 0))

    def jump_to(self, target: int | str, draft: ProfileDraft | None = None) -> NavigationResult:
        """
        Jump directly to a section by index or id.

        With gate_jumps on, jumping forward is validated like next; jumping
        backward never is.
        """
        index = self.index_of(target) if isinstance(target, str) else target
        if not 0 <= index <= self.last_index:
            raise IndexError(f"Section index {index} out of range 0..{self.last_index}")

        if self.locked:
            return self._refused("Navigation is locked while the profile is submitting")

        if self.gate_jumps and index > self._index:
            if draft is None:
                raise ValueError("A draft is required to validate a gated jump")
            errors = self.gate_errors(draft)
            if errors:
                return NavigationResult(
                    moved=False,
                    index=self._index,
                    errors=errors,
                    reason="Please fix the highlighted fields before continuing",
                )

        return self._move_to(index)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _move_to(self, index: int) -> NavigationResult:
        moved = index != self._index
        if moved:
            logger.info(
                f"Section '{self.current.id}' -> '{self.sections[index].id}'"
            )
        self._index = index
        return NavigationResult(moved=moved, index=index)

    def _refused(self, reason: str) -> NavigationResult:
        logger.warning(reason)
        return NavigationResult(moved=False, index=self._index, reason=reason)
