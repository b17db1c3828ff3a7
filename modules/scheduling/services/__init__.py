"""
Scheduling Module Services.

Contains the HRMS client and the state/handlers of the SIS schedules tab.

Services:
    - HrmsScheduleClient: async wrappers around the HRMS endpoints
    - SISSchedulesTab: schedule table state, busy flags and action handlers
    - Dialogs: per-row assign / edit / substitute / restore flows
"""

from modules.scheduling.services.dialogs import (
    AssignTeacherDialog,
    EditFacultyDialog,
    RestoreOriginalAction,
    SubstituteTeacherDialog,
)
from modules.scheduling.services.faculty_load import (
    attach_schedule_load,
    fetch_faculties_with_load,
    tally_schedule_load,
)
from modules.scheduling.services.hrms_client import HrmsScheduleClient
from modules.scheduling.services.notifications import (
    Notification,
    NotificationCenter,
    NotificationType,
)
from modules.scheduling.services.row_actions import (
    RowAction,
    derive_row_action,
    disabled_reason,
    is_action_enabled,
)
from modules.scheduling.services.schedules_tab import (
    SchedulePage,
    ScheduleRow,
    SISSchedulesTab,
    StatusFilter,
    TableQuery,
)

__all__ = [
    "AssignTeacherDialog",
    "EditFacultyDialog",
    "RestoreOriginalAction",
    "SubstituteTeacherDialog",
    "attach_schedule_load",
    "fetch_faculties_with_load",
    "tally_schedule_load",
    "HrmsScheduleClient",
    "Notification",
    "NotificationCenter",
    "NotificationType",
    "RowAction",
    "derive_row_action",
    "disabled_reason",
    "is_action_enabled",
    "SchedulePage",
    "ScheduleRow",
    "SISSchedulesTab",
    "StatusFilter",
    "TableQuery",
]
