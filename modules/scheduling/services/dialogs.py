"""
Per-row action dialogs.

Each dialog belongs to one schedule row and one SISSchedulesTab. It owns the
modal state (selected faculty, conflicts, checking flag) and decides whether
submission is allowed; the actual mutation is delegated to the tab handler.

Conflicts are scoped to an open dialog and discarded on close. Overlapping
conflict checks are not sequenced: the last response to arrive wins.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from core.exceptions import HrmsError
from modules.scheduling.schemas.schedule import (
    ConflictCheckRequest,
    ConflictResult,
    Faculty,
    ScheduleRecord,
)

if TYPE_CHECKING:
    from modules.scheduling.services.schedules_tab import SISSchedulesTab

logger = logging.getLogger(__name__)


class _FacultyDialog(ABC):
    """Shared state of the faculty-picking dialogs."""

    def __init__(self, tab: "SISSchedulesTab", record: ScheduleRecord) -> None:
        self.tab = tab
        self.record = record
        self.is_open = False
        self.selected_faculty_id: Optional[int] = None
        self.conflicts: list[ConflictResult] = []
        self.checking_conflicts = False

    @property
    @abstractmethod
    def busy(self) -> bool:
        """True while this row's mutation of this kind is in flight."""

    @property
    def options(self) -> list[Faculty]:
        return self.tab.faculties

    async def open(self) -> None:
        self.is_open = True
        self.selected_faculty_id = None
        self.conflicts = []

    def close(self) -> None:
        self.is_open = False
        self.conflicts = []

    def _wants_conflict_check(self, faculty_id: Optional[int]) -> bool:
        return faculty_id is not None

    def _conflict_schedule_id(self) -> Optional[int]:
        return None

    async def select_faculty(self, faculty_id: Optional[int]) -> list[ConflictResult]:
        self.selected_faculty_id = faculty_id
        if self._wants_conflict_check(faculty_id):
            await self.check_conflicts(faculty_id)
        else:
            self.conflicts = []
        return self.conflicts

    async def check_conflicts(self, faculty_id: int) -> list[ConflictResult]:
        record = self.record
        if not faculty_id or not record.is_mirrored:
            self.conflicts = []
            return self.conflicts

        self.checking_conflicts = True
        try:
            response = await self.tab.client.check_conflicts(
                ConflictCheckRequest(
                    faculty_id=faculty_id,
                    subject_id=record.subject_id,
                    class_section_id=record.class_section_id,
                    day=record.day,
                    time=record.time,
                    schedule_id=self._conflict_schedule_id(),
                )
            )
            self.conflicts = response.conflicts if response.has_conflicts else []
        except HrmsError as e:
            logger.error(f"Error checking conflicts for SIS schedule {record.sis_id}: {e}")
            self.conflicts = []
        finally:
            self.checking_conflicts = False
        return self.conflicts

    @property
    def can_submit(self) -> bool:
        return (
            self.selected_faculty_id is not None
            and not self.busy
            and not self.conflicts
            and not self.checking_conflicts
        )

    @property
    def selection_error(self) -> Optional[str]:
        """Why the current selection cannot be submitted, ignoring busy and conflicts."""
        if self.selected_faculty_id is None:
            return "Select a teacher."
        return None


class AssignTeacherDialog(_FacultyDialog):
    """Assign a teacher to an unassigned slot."""

    @property
    def busy(self) -> bool:
        return self.tab.assigning == self.record.sis_id

    async def submit(self) -> bool:
        if not self.can_submit:
            return False
        ok = await self.tab.handle_assign_teacher(self.record, self.selected_faculty_id)
        if ok:
            self.close()
            self.selected_faculty_id = None
        return ok


class EditFacultyDialog(_FacultyDialog):
    """
    Change the teacher of an assigned slot.

    Opening refreshes the faculty roster so load counts are current, and
    preselects the row's teacher. Reselecting the current teacher skips the
    conflict check and disables submission.
    """

    @property
    def busy(self) -> bool:
        return self.tab.editing_faculty == self.record.sis_id

    async def open(self) -> None:
        self.is_open = True
        await self.tab.fetch_faculties()
        self.conflicts = []
        self.selected_faculty_id = self.record.faculty_id

    def _wants_conflict_check(self, faculty_id: Optional[int]) -> bool:
        return faculty_id is not None and faculty_id != self.record.faculty_id

    def _conflict_schedule_id(self) -> Optional[int]:
        # Excludes the row's own HRMS schedule from the teacher/section check.
        return self.record.hrms_schedule_id

    @property
    def can_submit(self) -> bool:
        return super().can_submit and self.selected_faculty_id != self.record.faculty_id

    @property
    def selection_error(self) -> Optional[str]:
        if self.selected_faculty_id is not None and self.selected_faculty_id == self.record.faculty_id:
            return "Select a different teacher."
        return super().selection_error

    async def submit(self) -> bool:
        if not self.can_submit:
            return False
        ok = await self.tab.handle_edit_faculty(self.record, self.selected_faculty_id)
        if ok:
            self.close()
        return ok


class SubstituteTeacherDialog(_FacultyDialog):
    """
    Seat a substitute while the assigned teacher is on leave.

    Candidates come from the available-teachers endpoint, which already
    excludes busy and on-leave faculty, so no conflict check is run; a
    selection outside that list is never submitted.
    """

    @property
    def busy(self) -> bool:
        return self.tab.substituting == self.record.sis_id

    @property
    def options(self) -> list[Faculty]:
        return self.tab.available_teachers.get(self.record.sis_id, [])

    async def open(self) -> None:
        await super().open()
        if self.record.sis_id not in self.tab.available_teachers:
            await self.tab.fetch_available_teachers(self.record)

    def _wants_conflict_check(self, faculty_id: Optional[int]) -> bool:
        return False

    def is_available(self, faculty_id: Optional[int]) -> bool:
        """True when ``faculty_id`` is among the fetched available teachers."""
        return any(faculty.faculty_id == faculty_id for faculty in self.options)

    @property
    def can_submit(self) -> bool:
        return super().can_submit and self.is_available(self.selected_faculty_id)

    @property
    def selection_error(self) -> Optional[str]:
        if self.selected_faculty_id is not None and not self.is_available(self.selected_faculty_id):
            return "Selected teacher is not available for this time slot."
        return super().selection_error

    async def submit(self) -> bool:
        if not self.can_submit:
            return False
        faculty_id = self.selected_faculty_id
        self.close()
        self.selected_faculty_id = None
        return await self.tab.handle_assign_substitute(self.record, faculty_id)


class RestoreOriginalAction:
    """One-click restore of the original teacher; no modal state."""

    def __init__(self, tab: "SISSchedulesTab", record: ScheduleRecord) -> None:
        self.tab = tab
        self.record = record

    @property
    def busy(self) -> bool:
        return self.tab.substituting == self.record.sis_id

    @property
    def can_submit(self) -> bool:
        return (
            not self.busy
            and self.record.hrms_schedule_id is not None
            and self.record.original_faculty_id is not None
        )

    async def submit(self) -> bool:
        if self.busy:
            return False
        return await self.tab.handle_restore_original(self.record)
