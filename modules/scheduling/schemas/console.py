"""
Schedules Console API Schemas.

Request/response models of the ``/scheduling`` router, which presents the
SIS schedules tab as JSON to a front end.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from modules.scheduling.schemas.schedule import ConflictingSchedule, ConflictResult, ScheduleRecord
from modules.scheduling.services.notifications import Notification


class _ConsoleModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# Requests
# =============================================================================


class FacultySelection(_ConsoleModel):
    """Body of assign / edit / substitute / conflict-check requests."""

    faculty_id: int = Field(..., alias="facultyId", gt=0)


class SubjectSectionSyncRequest(_ConsoleModel):
    clear_existing: bool = Field(False, alias="clearExisting")


# =============================================================================
# Responses
# =============================================================================


class NotificationOut(_ConsoleModel):
    message: str
    type: str
    created_at: str = Field(..., alias="createdAt")

    @classmethod
    def from_notification(cls, notification: Optional[Notification]) -> Optional["NotificationOut"]:
        if notification is None:
            return None
        return cls(
            message=notification.message,
            type=notification.type.value,
            created_at=notification.created_at.isoformat(),
        )


class ScheduleRowOut(_ConsoleModel):
    schedule: ScheduleRecord
    action: str
    action_enabled: bool = Field(..., alias="actionEnabled")
    action_label: str = Field(..., alias="actionLabel")
    busy: bool
    disabled_reason: Optional[str] = Field(None, alias="disabledReason")
    subject_missing: bool = Field(..., alias="subjectMissing")
    section_missing: bool = Field(..., alias="sectionMissing")
    leave_label: Optional[str] = Field(None, alias="leaveLabel")


class PaginationOut(_ConsoleModel):
    page: int
    total_pages: int = Field(..., alias="totalPages")
    total: int
    showing_from: int = Field(..., alias="showingFrom")
    showing_to: int = Field(..., alias="showingTo")
    has_previous: bool = Field(..., alias="hasPrevious")
    has_next: bool = Field(..., alias="hasNext")
    page_numbers: list[Union[int, str]] = Field(..., alias="pageNumbers")


class TabFlagsOut(_ConsoleModel):
    loading: bool
    syncing: bool
    syncing_existing: bool = Field(..., alias="syncingExisting")
    can_refresh: bool = Field(..., alias="canRefresh")
    can_sync: bool = Field(..., alias="canSync")


class ScheduleListResponse(_ConsoleModel):
    rows: list[ScheduleRowOut]
    pagination: PaginationOut
    stats: dict[str, int]
    flags: TabFlagsOut
    status_filter: str = Field(..., alias="statusFilter")
    search: str
    empty_message: Optional[str] = Field(None, alias="emptyMessage")
    notification: Optional[NotificationOut] = None


class ActionResponse(_ConsoleModel):
    """Outcome of a mutation or sync; the toast carries the user-facing text."""

    success: bool
    notification: Optional[NotificationOut] = None


class ConflictOut(_ConsoleModel):
    """A conflict as the dialog shows it, with its heading."""

    type: str
    heading: str
    message: str
    conflicting_schedule: Optional[ConflictingSchedule] = Field(None, alias="conflictingSchedule")

    @classmethod
    def from_result(cls, result: ConflictResult) -> "ConflictOut":
        return cls(
            type=result.type,
            heading=result.heading,
            message=result.message,
            conflicting_schedule=result.conflicting_schedule,
        )


class ConflictCheckOut(_ConsoleModel):
    has_conflicts: bool = Field(..., alias="hasConflicts")
    conflicts: list[ConflictOut]


class ConflictBlockedDetail(_ConsoleModel):
    message: str
    conflicts: list[ConflictOut]


class ConflictBlockedResponse(_ConsoleModel):
    """409 body when a selection still has conflicts."""

    detail: ConflictBlockedDetail


class FacultyOptionOut(_ConsoleModel):
    faculty_id: int = Field(..., alias="facultyId")
    full_name: str = Field(..., alias="fullName")
    position: Optional[str] = None
    designation: str
    load: int
    label: str
