"""
Scheduling Module Schemas.

Pydantic models for backend payloads and the console API.
"""

from modules.scheduling.schemas.schedule import (
    AssignTeacherRequest,
    ConflictCheckRequest,
    ConflictCheckResponse,
    ConflictResult,
    ExistingSyncSummary,
    Faculty,
    FacultyLeaveStatus,
    LeaveInfo,
    MutationResult,
    RestoreOriginalRequest,
    ScheduleRecord,
    SubjectSectionSyncResults,
    SyncStatus,
    UpdateScheduleRequest,
)

__all__ = [
    "AssignTeacherRequest",
    "ConflictCheckRequest",
    "ConflictCheckResponse",
    "ConflictResult",
    "ExistingSyncSummary",
    "Faculty",
    "FacultyLeaveStatus",
    "LeaveInfo",
    "MutationResult",
    "RestoreOriginalRequest",
    "ScheduleRecord",
    "SubjectSectionSyncResults",
    "SyncStatus",
    "UpdateScheduleRequest",
]
