"""
Schedule Reconciliation Schemas.

Pydantic models for the data exchanged with the HRMS backend: merged SIS/HRMS
schedule rows, faculty roster entries, conflict-check results, mutation
request bodies and bulk sync responses.

Field names are snake_case; aliases match the backend's JSON keys so
responses validate directly and request bodies serialise with
``model_dump(by_alias=True, exclude_none=True)``.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _HrmsModel(BaseModel):
    """Base for backend payloads: accepts aliases or field names, ignores extras."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        """JSON body as the backend expects it (aliases, no null optionals)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Leave overlay
# =============================================================================


class LeaveInfo(_HrmsModel):
    """Approved leave currently covering a faculty member."""

    leave_id: int = Field(..., alias="LeaveID")
    leave_type: Optional[str] = Field(None, alias="LeaveType")
    start_date: Optional[datetime] = Field(None, alias="StartDate")
    end_date: Optional[datetime] = Field(None, alias="EndDate")
    reason: str = Field("", alias="Reason")


class FacultyLeaveStatus(_HrmsModel):
    """Leave status of the faculty assigned to a schedule row."""

    is_on_leave: bool = Field(False, alias="isOnLeave")
    leave: Optional[LeaveInfo] = None


# =============================================================================
# Schedule rows
# =============================================================================


class SyncStatus(str, Enum):
    """Whether a schedule row is mirrored in SIS, HRMS, both, or unassigned."""

    SYNCED = "synced"
    HRMS_ONLY = "hrms-only"
    SIS_ONLY = "sis-only"
    UNASSIGNED = "unassigned"


class ScheduleRecord(_HrmsModel):
    """
    One row of the merged SIS/HRMS schedule view.

    ``hrms_schedule_id`` is None when the row exists only in SIS.
    ``subject_id`` / ``class_section_id`` are None when the subject or
    section has not been mirrored into HRMS yet; such rows accept no
    assignment actions.
    """

    sis_id: int = Field(..., alias="sisId")
    hrms_schedule_id: Optional[int] = Field(None, alias="hrmsScheduleId")

    subject_id: Optional[int] = Field(None, alias="subjectId")
    subject_name: str = Field("", alias="subjectName")
    subject_code: Optional[str] = Field(None, alias="subjectCode")
    class_section_id: Optional[int] = Field(None, alias="classSectionId")
    section_name: str = Field("", alias="sectionName")

    day: str = ""
    time: str = ""
    room: str = ""
    duration: int | float = 1

    faculty_id: Optional[int] = Field(None, alias="facultyId")
    faculty_name: str = Field("", alias="facultyName")
    instructor: str = ""
    is_assigned: bool = Field(False, alias="isAssigned")

    sync_status: Optional[SyncStatus] = Field(None, alias="syncStatus")
    is_assigned_in_sis: Optional[bool] = Field(None, alias="isAssignedInSIS")
    exists_in_hrms: Optional[bool] = Field(None, alias="existsInHRMS")

    faculty_leave_status: Optional[FacultyLeaveStatus] = Field(None, alias="facultyLeaveStatus")

    original_faculty_id: Optional[int] = Field(None, alias="originalFacultyId")
    original_faculty_name: Optional[str] = Field(None, alias="originalFacultyName")
    should_restore_original: bool = Field(False, alias="shouldRestoreOriginal")

    year_level: Optional[str] = Field(None, alias="yearLevel")
    term_id: Optional[int] = Field(None, alias="termId")

    @property
    def is_mirrored(self) -> bool:
        """True when both subject and section exist in HRMS."""
        return self.subject_id is not None and self.class_section_id is not None

    @property
    def is_on_leave(self) -> bool:
        """True when the assigned faculty is currently on approved leave."""
        return bool(self.faculty_leave_status and self.faculty_leave_status.is_on_leave)

    @property
    def leave_label(self) -> Optional[str]:
        """Badge text for the teacher column, e.g. ``On Leave (Sick Leave)``."""
        status = self.faculty_leave_status
        if not (status and status.is_on_leave and status.leave):
            return None
        return f"On Leave ({status.leave.leave_type or 'Leave'})"


# =============================================================================
# Faculty roster
# =============================================================================


class FacultyUser(_HrmsModel):
    first_name: str = Field("", alias="FirstName")
    last_name: str = Field("", alias="LastName")
    email: str = Field("", alias="Email")


class EmploymentDetail(_HrmsModel):
    designation: Optional[str] = Field(None, alias="Designation")


class FacultyEmployee(_HrmsModel):
    employee_id: Optional[str] = Field(None, alias="EmployeeID")
    # /api/faculty returns a single detail, available-teachers returns a list.
    employment_detail: Optional[EmploymentDetail] = Field(None, alias="EmploymentDetail")
    employment_details: list[EmploymentDetail] = Field(default_factory=list, alias="employmentDetails")


class FacultyCount(_HrmsModel):
    schedules: int = Field(0, alias="Schedules")


class Faculty(_HrmsModel):
    """
    Faculty roster entry.

    ``schedule_count`` (``_count.Schedules``) is filled in by the client from
    the full schedule list; see ``attach_schedule_load``.
    """

    faculty_id: int = Field(..., alias="FacultyID")
    employee_id: Optional[str] = Field(None, alias="EmployeeID")
    position: Optional[str] = Field(None, alias="Position")
    user: FacultyUser = Field(default_factory=FacultyUser, alias="User")
    employee: Optional[FacultyEmployee] = Field(None, alias="Employee")
    schedule_count: Optional[FacultyCount] = Field(None, alias="_count")
    current_load: Optional[int] = Field(None, alias="currentLoad")

    @property
    def full_name(self) -> str:
        return f"{self.user.first_name} {self.user.last_name}".strip()

    @property
    def designation(self) -> str:
        """Designation with underscores replaced by spaces, or ``N/A``."""
        raw = None
        if self.employee is not None:
            if self.employee.employment_detail is not None:
                raw = self.employee.employment_detail.designation
            elif self.employee.employment_details:
                raw = self.employee.employment_details[0].designation
        return raw.replace("_", " ") if raw else "N/A"

    @property
    def schedule_load(self) -> int:
        """Tallied load when attached, else the backend's ``currentLoad``."""
        if self.schedule_count is not None:
            return self.schedule_count.schedules
        return self.current_load or 0

    def option_label(self, current_faculty_id: Optional[int] = None) -> str:
        """Dropdown label: ``First Last - Position (Designation) - Load: N``."""
        label = (
            f"{self.full_name} - {self.position or 'N/A'} "
            f"({self.designation}) - Load: {self.schedule_load}"
        )
        if current_faculty_id is not None and self.faculty_id == current_faculty_id:
            label += " (Current)"
        return label


# =============================================================================
# Conflict checking
# =============================================================================


class ConflictingSchedule(_HrmsModel):
    id: Optional[int] = None
    subject_name: str = Field("", alias="subjectName")
    section_name: str = Field("", alias="sectionName")
    teacher_name: str = Field("", alias="teacherName")
    day: str = ""
    time: str = ""


class ConflictResult(_HrmsModel):
    """A teacher or section double-booking reported by the backend."""

    type: Literal["teacher", "section"]
    message: str = ""
    conflicting_schedule: Optional[ConflictingSchedule] = Field(None, alias="conflictingSchedule")

    @property
    def heading(self) -> str:
        return "Teacher Conflict:" if self.type == "teacher" else "Section Conflict:"


class ConflictCheckRequest(_HrmsModel):
    faculty_id: int = Field(..., alias="facultyId")
    subject_id: int = Field(..., alias="subjectId")
    class_section_id: int = Field(..., alias="classSectionId")
    day: str
    time: str
    schedule_id: Optional[int] = Field(None, alias="scheduleId")


class ConflictCheckResponse(_HrmsModel):
    has_conflicts: bool = Field(False, alias="hasConflicts")
    conflicts: list[ConflictResult] = Field(default_factory=list)


# =============================================================================
# Mutations
# =============================================================================


class AssignTeacherRequest(_HrmsModel):
    """Body for assign-teacher (fresh assignment, unmirrored edit, substitute)."""

    sis_schedule_id: int = Field(..., alias="sisScheduleId")
    faculty_id: int = Field(..., alias="facultyId")
    subject_id: int = Field(..., alias="subjectId")
    class_section_id: int = Field(..., alias="classSectionId")
    day: str
    time: str
    duration: int | float


class UpdateScheduleRequest(_HrmsModel):
    """Body for ``PUT /api/schedules/:id``; ``sisScheduleId`` lets the backend push to SIS."""

    faculty_id: int = Field(..., alias="facultyId")
    subject_id: int = Field(..., alias="subjectId")
    class_section_id: int = Field(..., alias="classSectionId")
    day: str
    time: str
    duration: int | float
    sis_schedule_id: Optional[int] = Field(None, alias="sisScheduleId")


class RestoreOriginalRequest(_HrmsModel):
    hrms_schedule_id: int = Field(..., alias="hrmsScheduleId")
    original_faculty_id: int = Field(..., alias="originalFacultyId")
    sis_schedule_id: int = Field(..., alias="sisScheduleId")


class ScheduleUpdateSync(_HrmsModel):
    """Outcome of the backend's push of an edited assignment to SIS."""

    synced: bool = False
    message: Optional[str] = None


class MutationResult(_HrmsModel):
    message: Optional[str] = None
    sync: Optional[ScheduleUpdateSync] = None


# =============================================================================
# Bulk sync
# =============================================================================


class CreatedDeleted(_HrmsModel):
    created: int = 0
    deleted: int = 0


class SubjectSectionSyncResults(_HrmsModel):
    subjects: CreatedDeleted = Field(default_factory=CreatedDeleted)
    sections: CreatedDeleted = Field(default_factory=CreatedDeleted)


class ExistingSyncSummary(_HrmsModel):
    synced: int = 0
    skipped: int = 0
    errors: int = 0
