"""
Row action derivation.

Each schedule row offers exactly one action, derived from the flags of the
last fetch on every render. No transition state is stored client-side.

    not assigned              -> ASSIGN
    shouldRestoreOriginal     -> RESTORE_ORIGINAL
    teacher on leave          -> ASSIGN_SUBSTITUTE
    otherwise                 -> EDIT
"""

from enum import Enum
from typing import Optional

from modules.scheduling.schemas.schedule import ScheduleRecord


class RowAction(str, Enum):
    ASSIGN = "assign"
    EDIT = "edit"
    ASSIGN_SUBSTITUTE = "assign_substitute"
    RESTORE_ORIGINAL = "restore_original"


ACTION_LABELS = {
    RowAction.ASSIGN: "Assign Teacher",
    RowAction.EDIT: "Edit",
    RowAction.ASSIGN_SUBSTITUTE: "Assign Substitute",
    RowAction.RESTORE_ORIGINAL: "Restore Original",
}

BUSY_LABELS = {
    RowAction.ASSIGN: "Assigning...",
    RowAction.EDIT: "Updating...",
    RowAction.ASSIGN_SUBSTITUTE: "Assigning...",
    RowAction.RESTORE_ORIGINAL: "Restoring...",
}


def derive_row_action(record: ScheduleRecord) -> RowAction:
    if not record.is_assigned:
        return RowAction.ASSIGN
    if record.should_restore_original:
        return RowAction.RESTORE_ORIGINAL
    if record.is_on_leave:
        return RowAction.ASSIGN_SUBSTITUTE
    return RowAction.EDIT


def is_action_enabled(record: ScheduleRecord) -> bool:
    """
    Whether the row's action control can be used at all.

    Every action needs the subject and section mirrored into HRMS. Restore
    additionally needs the HRMS schedule and the original teacher.
    """
    if not record.is_mirrored:
        return False
    if derive_row_action(record) is RowAction.RESTORE_ORIGINAL:
        return record.hrms_schedule_id is not None and record.original_faculty_id is not None
    return True


def disabled_reason(record: ScheduleRecord) -> Optional[str]:
    """Text shown in place of a disabled action control."""
    if is_action_enabled(record):
        return None
    action = derive_row_action(record)
    if action is RowAction.EDIT:
        return "Cannot edit"
    if action is RowAction.RESTORE_ORIGINAL and record.is_mirrored:
        return "Missing original teacher"
    return "Create subject/section first"
