"""
SIS Schedules Tab.

State holder and action handlers for the schedule reconciliation screen:
the merged SIS/HRMS schedule list, the faculty roster with derived load,
independent busy flags per operation, search/status filtering, pagination
and the bulk sync actions.

Consistency model:
    Every successful mutation is followed by re-fetching both the schedule
    list and the faculty roster. Nothing is patched locally, so the tab always
    reflects the last server response.

Error handling:
    Handlers never raise HrmsError to the caller. Failures are logged and
    surfaced as an error notification; busy flags are reset in ``finally``.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from core.exceptions import HrmsError, ScheduleActionError
from modules.scheduling.schemas.schedule import (
    AssignTeacherRequest,
    Faculty,
    MutationResult,
    RestoreOriginalRequest,
    ScheduleRecord,
    UpdateScheduleRequest,
)
from modules.scheduling.services.dialogs import (
    AssignTeacherDialog,
    EditFacultyDialog,
    RestoreOriginalAction,
    SubstituteTeacherDialog,
)
from modules.scheduling.services.faculty_load import fetch_faculties_with_load
from modules.scheduling.services.hrms_client import HrmsScheduleClient
from modules.scheduling.services.notifications import NotificationCenter
from modules.scheduling.services.row_actions import (
    ACTION_LABELS,
    BUSY_LABELS,
    RowAction,
    derive_row_action,
    disabled_reason,
    is_action_enabled,
)

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


class StatusFilter(str, Enum):
    ALL = "all"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"


@dataclass(frozen=True)
class TableQuery:
    """Filter, search and page of one table view."""

    status_filter: StatusFilter = StatusFilter.ALL
    search_term: str = ""
    page: int = 1


@dataclass
class SchedulePage:
    """One page of the filtered schedule list."""

    records: list[ScheduleRecord]
    page: int
    total_pages: int
    total: int
    start_index: int
    end_index: int

    @property
    def showing_from(self) -> int:
        """1-based index of the first row shown, 0 when empty."""
        return 0 if self.total == 0 else self.start_index + 1

    @property
    def showing_to(self) -> int:
        return min(self.end_index, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass
class ScheduleRow:
    """A rendered table row: the record plus its derived action state."""

    record: ScheduleRecord
    action: RowAction
    action_enabled: bool
    action_label: str
    busy: bool
    disabled_reason: Optional[str]
    subject_missing: bool
    section_missing: bool
    leave_label: Optional[str]


class SISSchedulesTab:
    """
    Controller for the SIS schedules tab.

    Args:
        client: HRMS client used for every request.
        notifications: Toast channel; a private one is created if omitted.
        items_per_page: Page size; defaults to the scheduling settings.
    """

    def __init__(
        self,
        client: HrmsScheduleClient,
        notifications: Optional[NotificationCenter] = None,
        items_per_page: Optional[int] = None,
    ) -> None:
        self._client = client
        self.notifications = notifications or NotificationCenter()
        self.items_per_page = items_per_page or client.settings.items_per_page

        self.schedules: list[ScheduleRecord] = []
        self.faculties: list[Faculty] = []
        self.available_teachers: dict[int, list[Faculty]] = {}

        # Independent busy flags; the per-row ones hold the busy sisId.
        self.loading = False
        self.syncing = False
        self.syncing_existing = False
        self.assigning: Optional[int] = None
        self.substituting: Optional[int] = None
        self.editing_faculty: Optional[int] = None

        self.status_filter = StatusFilter.ALL
        self.search_term = ""
        self.current_page = 1

    @property
    def client(self) -> HrmsScheduleClient:
        return self._client

    # =========================================================================
    # Fetching
    # =========================================================================

    async def load(self) -> None:
        """Initial load: schedules and faculty in parallel."""
        await asyncio.gather(self.fetch_sis_schedules(), self.fetch_faculties())

    async def fetch_sis_schedules(self) -> bool:
        """
        Replace the schedule list with a fresh fetch.

        On failure the previous list is kept and an error is notified.
        """
        self.loading = True
        try:
            self.schedules = await self._client.fetch_sis_schedules()
            return True
        except HrmsError as e:
            logger.error(f"Error fetching SIS schedules: {e}")
            self.notifications.error(str(e) or "Failed to fetch schedules from SIS")
            return False
        finally:
            self.loading = False

    async def fetch_faculties(self) -> bool:
        """Refresh the faculty roster and its derived load. Failures are only logged."""
        try:
            self.faculties = await fetch_faculties_with_load(self._client)
            return True
        except HrmsError as e:
            logger.error(f"Error fetching faculties: {e}")
            return False

    async def fetch_available_teachers(self, record: ScheduleRecord) -> list[Faculty]:
        """Fetch and cache substitute candidates for ``record``'s slot."""
        try:
            teachers = await self._client.fetch_available_teachers(
                record.day, record.time, exclude_faculty_id=record.faculty_id
            )
        except HrmsError as e:
            logger.error(f"Error fetching available teachers: {e}")
            return self.available_teachers.get(record.sis_id, [])
        self.available_teachers[record.sis_id] = teachers
        return teachers

    async def refresh_after_mutation(self) -> None:
        await asyncio.gather(self.fetch_sis_schedules(), self.fetch_faculties())

    def find_schedule(self, sis_id: int) -> Optional[ScheduleRecord]:
        for record in self.schedules:
            if record.sis_id == sis_id:
                return record
        return None

    def dialog_for(self, record: ScheduleRecord) -> Union[
        AssignTeacherDialog, EditFacultyDialog, SubstituteTeacherDialog, RestoreOriginalAction
    ]:
        """Dialog matching the row's derived action."""
        action = derive_row_action(record)
        if action is RowAction.ASSIGN:
            return AssignTeacherDialog(self, record)
        if action is RowAction.EDIT:
            return EditFacultyDialog(self, record)
        if action is RowAction.ASSIGN_SUBSTITUTE:
            return SubstituteTeacherDialog(self, record)
        return RestoreOriginalAction(self, record)

    # =========================================================================
    # Per-row mutations
    # =========================================================================

    @staticmethod
    def _require_mirrored(record: ScheduleRecord, message: str) -> tuple[int, int]:
        if record.subject_id is None or record.class_section_id is None:
            raise ScheduleActionError(message)
        return record.subject_id, record.class_section_id

    @staticmethod
    def _assign_request(
        record: ScheduleRecord, faculty_id: int, subject_id: int, class_section_id: int
    ) -> AssignTeacherRequest:
        return AssignTeacherRequest(
            sis_schedule_id=record.sis_id,
            faculty_id=faculty_id,
            subject_id=subject_id,
            class_section_id=class_section_id,
            day=record.day,
            time=record.time,
            duration=record.duration,
        )

    async def handle_assign_teacher(self, record: ScheduleRecord, faculty_id: int) -> bool:
        """Assign a teacher to an unassigned slot."""
        self.assigning = record.sis_id
        try:
            subject_id, section_id = self._require_mirrored(
                record,
                "Cannot assign: Subject or Section not found in HRMS. Please create them first.",
            )
            result = await self._client.assign_teacher(
                self._assign_request(record, faculty_id, subject_id, section_id)
            )
            self.notifications.success(result.message or "Teacher assigned successfully!")
            await self.refresh_after_mutation()
            return True
        except HrmsError as e:
            logger.error(f"Error assigning teacher to SIS schedule {record.sis_id}: {e}")
            self.notifications.error(str(e) or "Failed to assign teacher")
            return False
        finally:
            self.assigning = None

    async def handle_edit_faculty(self, record: ScheduleRecord, new_faculty_id: int) -> bool:
        """
        Change the teacher of an assigned slot.

        Rows not yet mirrored in HRMS (no ``hrmsScheduleId``) go through
        assign-teacher, which creates the HRMS schedule.
        """
        self.editing_faculty = record.sis_id
        try:
            subject_id, section_id = self._require_mirrored(
                record, "Cannot edit: Subject or Section not found in HRMS."
            )

            if record.hrms_schedule_id is None:
                result = await self._client.assign_teacher(
                    self._assign_request(record, new_faculty_id, subject_id, section_id)
                )
                self.notifications.success(
                    result.message
                    or "Teacher assigned and schedule created in HRMS successfully!"
                )
            else:
                result = await self._client.update_schedule(
                    record.hrms_schedule_id,
                    UpdateScheduleRequest(
                        faculty_id=new_faculty_id,
                        subject_id=subject_id,
                        class_section_id=section_id,
                        day=record.day,
                        time=record.time,
                        duration=record.duration,
                        sis_schedule_id=record.sis_id or None,
                    ),
                )
                self.notifications.success(self._edit_message(record, result))

            await self.refresh_after_mutation()
            return True
        except HrmsError as e:
            logger.error(f"Error editing faculty for SIS schedule {record.sis_id}: {e}")
            self.notifications.error(str(e) or "Failed to update faculty assignment")
            return False
        finally:
            self.editing_faculty = None

    @staticmethod
    def _edit_message(record: ScheduleRecord, result: MutationResult) -> str:
        # The HRMS update succeeded in every branch; only the SIS push varies.
        sync = result.sync
        if sync is not None:
            if sync.synced:
                return "Faculty assignment updated and synced to SIS successfully!"
            return "Faculty assignment updated in HRMS. " + (
                sync.message or "Sync to SIS was not completed."
            )
        if record.sis_id:
            return (
                "Faculty assignment updated in HRMS. Could not sync to SIS "
                "(missing Employee ID or sync not configured)."
            )
        return "Faculty assignment updated successfully!"

    async def handle_assign_substitute(self, record: ScheduleRecord, substitute_faculty_id: int) -> bool:
        """Seat a substitute while the assigned teacher is on leave."""
        self.substituting = record.sis_id
        try:
            subject_id, section_id = self._require_mirrored(
                record, "Cannot assign: Subject or Section not found in HRMS."
            )
            await self._client.assign_substitute(
                self._assign_request(record, substitute_faculty_id, subject_id, section_id)
            )
            self.notifications.success("Substitute teacher assigned successfully!")
            await self.refresh_after_mutation()
            return True
        except HrmsError as e:
            logger.error(f"Error assigning substitute for SIS schedule {record.sis_id}: {e}")
            self.notifications.error(str(e) or "Failed to assign substitute teacher")
            return False
        finally:
            self.substituting = None

    async def handle_restore_original(self, record: ScheduleRecord) -> bool:
        """Put the original teacher back once their leave has ended."""
        if record.hrms_schedule_id is None or record.original_faculty_id is None:
            self.notifications.error(
                "Cannot restore: Missing schedule or original teacher information."
            )
            return False

        self.substituting = record.sis_id
        try:
            await self._client.restore_original_teacher(
                RestoreOriginalRequest(
                    hrms_schedule_id=record.hrms_schedule_id,
                    original_faculty_id=record.original_faculty_id,
                    sis_schedule_id=record.sis_id,
                )
            )
            self.notifications.success("Original teacher restored successfully!")
            await self.refresh_after_mutation()
            return True
        except HrmsError as e:
            logger.error(f"Error restoring original teacher for SIS schedule {record.sis_id}: {e}")
            self.notifications.error(str(e) or "Failed to restore original teacher")
            return False
        finally:
            self.substituting = None

    # =========================================================================
    # Bulk sync
    # =========================================================================

    @property
    def can_refresh(self) -> bool:
        """Refresh and both sync buttons share the same disabled condition."""
        return not (self.loading or self.syncing or self.syncing_existing)

    can_sync = can_refresh

    async def handle_sync_subjects_sections(self, clear_existing: bool = False) -> bool:
        """Import subjects and sections from SIS, then refresh the schedule list."""
        self.syncing = True
        try:
            results = await self._client.sync_subjects_sections(clear_existing)
            message = (
                f"Successfully synced! {results.subjects.created} subjects and "
                f"{results.sections.created} sections imported."
            )
            if clear_existing and results.subjects.deleted > 0:
                removed = results.subjects.deleted + results.sections.deleted
                message += f" Removed {removed} unused items."
            self.notifications.success(message)

            # Rows previously marked "Not in HRMS" may now be actionable.
            await self.fetch_sis_schedules()
            return True
        except HrmsError as e:
            logger.error(f"Error syncing subjects/sections: {e}")
            self.notifications.error(str(e) or "Failed to sync subjects and sections")
            return False
        finally:
            self.syncing = False

    async def handle_sync_existing_assignments(self) -> bool:
        """Push existing HRMS assignments to SIS, then refresh the schedule list."""
        self.syncing_existing = True
        try:
            summary = await self._client.sync_existing_assignments()
            parts = ["Sync complete!"]
            if summary.synced > 0:
                parts.append(f"{summary.synced} assignment(s) synced to SIS.")
            if summary.skipped > 0:
                parts.append(f"{summary.skipped} skipped (no matching SIS schedule).")
            if summary.errors > 0:
                parts.append(f"{summary.errors} error(s).")
            message = " ".join(parts)

            if summary.synced > 0:
                self.notifications.success(message)
            else:
                self.notifications.error(message)

            await self.fetch_sis_schedules()
            return True
        except HrmsError as e:
            logger.error(f"Error syncing existing assignments: {e}")
            self.notifications.error(str(e) or "Failed to sync existing assignments")
            return False
        finally:
            self.syncing_existing = False

    # =========================================================================
    # Filtering and pagination
    # =========================================================================

    @property
    def query(self) -> TableQuery:
        """The tab's own filter, search and page as a TableQuery."""
        return TableQuery(self.status_filter, self.search_term, self.current_page)

    def set_filter(self, status_filter: Union[StatusFilter, str]) -> None:
        self.status_filter = StatusFilter(status_filter)
        self.current_page = 1

    def set_search(self, search_term: str) -> None:
        self.search_term = search_term
        self.current_page = 1

    @staticmethod
    def _matches(record: ScheduleRecord, query: TableQuery) -> bool:
        if query.status_filter is StatusFilter.ASSIGNED and not record.is_assigned:
            return False
        if query.status_filter is StatusFilter.UNASSIGNED and record.is_assigned:
            return False
        if query.search_term:
            needle = query.search_term.lower()
            return any(
                needle in value.lower()
                for value in (record.subject_name, record.section_name, record.day, record.instructor)
            )
        return True

    def filtered_schedules(self, query: Optional[TableQuery] = None) -> list[ScheduleRecord]:
        """Filtered rows; with the ``all`` filter unassigned rows come first."""
        query = query or self.query
        rows = [record for record in self.schedules if self._matches(record, query)]
        if query.status_filter is StatusFilter.ALL:
            rows.sort(key=lambda record: record.is_assigned)
        return rows

    def total_pages(self, query: Optional[TableQuery] = None) -> int:
        return max(1, math.ceil(len(self.filtered_schedules(query)) / self.items_per_page))

    def _clamped_page(self, query: TableQuery) -> int:
        return min(max(1, query.page), self.total_pages(query))

    def go_to_page(self, page: int) -> int:
        """Move to ``page``, clamped to the valid range."""
        self.current_page = min(max(1, page), self.total_pages())
        return self.current_page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    def page(self, query: Optional[TableQuery] = None) -> SchedulePage:
        """
        One page of the filtered list.

        Without ``query`` the tab's own state is used; with one, the tab's
        filter, search and page are left untouched.
        """
        query = query or self.query
        rows = self.filtered_schedules(query)
        total_pages = max(1, math.ceil(len(rows) / self.items_per_page))
        current = min(max(1, query.page), total_pages)
        start = (current - 1) * self.items_per_page
        end = start + self.items_per_page
        return SchedulePage(
            records=rows[start:end],
            page=current,
            total_pages=total_pages,
            total=len(rows),
            start_index=start,
            end_index=end,
        )

    def page_numbers(self, query: Optional[TableQuery] = None) -> list[Union[int, str]]:
        """
        Page buttons to show: first, last, current and its neighbours, with
        an ellipsis two pages away from the current one.
        """
        query = query or self.query
        total_pages = self.total_pages(query)
        current = self._clamped_page(query)
        items: list[Union[int, str]] = []
        for page in range(1, total_pages + 1):
            if page == 1 or page == total_pages or current - 1 <= page <= current + 1:
                items.append(page)
            elif page in (current - 2, current + 2):
                items.append(ELLIPSIS)
        return items

    # =========================================================================
    # Rendering
    # =========================================================================

    def is_row_busy(self, record: ScheduleRecord, action: Optional[RowAction] = None) -> bool:
        action = action or derive_row_action(record)
        if action is RowAction.ASSIGN:
            return self.assigning == record.sis_id
        if action is RowAction.EDIT:
            return self.editing_faculty == record.sis_id
        return self.substituting == record.sis_id

    def render_row(self, record: ScheduleRecord) -> ScheduleRow:
        action = derive_row_action(record)
        busy = self.is_row_busy(record, action)
        return ScheduleRow(
            record=record,
            action=action,
            action_enabled=is_action_enabled(record),
            action_label=BUSY_LABELS[action] if busy else ACTION_LABELS[action],
            busy=busy,
            disabled_reason=disabled_reason(record),
            subject_missing=record.subject_id is None,
            section_missing=record.class_section_id is None,
            leave_label=record.leave_label if record.is_assigned else None,
        )

    def render_rows(self, query: Optional[TableQuery] = None) -> list[ScheduleRow]:
        return [self.render_row(record) for record in self.page(query).records]

    def stats(self) -> dict[str, int]:
        return {
            "total": len(self.schedules),
            "unassigned": sum(1 for record in self.schedules if not record.is_assigned),
        }

    def empty_message(self, query: Optional[TableQuery] = None) -> Optional[str]:
        if not self.schedules:
            return 'No schedules found. Click "Refresh from SIS" to fetch schedules.'
        if not self.filtered_schedules(query):
            return "No schedules match your filters."
        return None
