"""
SIS Schedules API Router.

JSON presentation of the SIS schedules tab: the paged, filtered schedule
table with each row's derived action, the per-row assignment actions, and
the bulk sync controls. Mutations return the resulting toast notification;
the front end re-reads the table afterwards.
"""

import logging
from typing import Annotated, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status

from core.dependencies import HttpClientDep
from modules.scheduling.schemas.console import (
    ActionResponse,
    ConflictBlockedDetail,
    ConflictBlockedResponse,
    ConflictCheckOut,
    ConflictOut,
    FacultyOptionOut,
    FacultySelection,
    NotificationOut,
    PaginationOut,
    ScheduleListResponse,
    ScheduleRowOut,
    SubjectSectionSyncRequest,
    TabFlagsOut,
)
from modules.scheduling.schemas.schedule import Faculty, ScheduleRecord
from modules.scheduling.services.dialogs import (
    AssignTeacherDialog,
    EditFacultyDialog,
    RestoreOriginalAction,
    SubstituteTeacherDialog,
)
from modules.scheduling.services.hrms_client import HrmsScheduleClient
from modules.scheduling.services.schedules_tab import SISSchedulesTab, StatusFilter, TableQuery

logger = logging.getLogger(__name__)

router = APIRouter(tags=["SIS Schedules"])

FacultyDialog = Union[AssignTeacherDialog, EditFacultyDialog, SubstituteTeacherDialog]


# =============================================================================
# Dependencies
# =============================================================================

def get_hrms_client(http_client: HttpClientDep) -> HrmsScheduleClient:
    """FastAPI dependency for the HRMS client bound to the shared HTTP client."""
    return HrmsScheduleClient(http_client=http_client)


HrmsClientDep = Annotated[HrmsScheduleClient, Depends(get_hrms_client)]


async def get_schedules_tab(request: Request, hrms: HrmsClientDep) -> SISSchedulesTab:
    """
    FastAPI dependency for the shared tab state.

    One tab per application, created on first use and rebuilt whenever the
    lifespan hands out a new HTTP client. A new tab runs its initial load
    (schedules and faculty in parallel) before it is handed out.
    """
    tab: Optional[SISSchedulesTab] = getattr(request.app.state, "schedules_tab", None)
    if tab is None or tab.client.http_client is not hrms.http_client:
        tab = SISSchedulesTab(hrms)
        request.app.state.schedules_tab = tab
        await tab.load()
    return tab


SchedulesTabDep = Annotated[SISSchedulesTab, Depends(get_schedules_tab)]


# =============================================================================
# Helpers
# =============================================================================

def _require_schedule(tab: SISSchedulesTab, sis_id: int) -> ScheduleRecord:
    record = tab.find_schedule(sis_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"SIS schedule {sis_id} not found. Refresh from SIS and try again.",
        )
    return record


def _require_dialog(tab: SISSchedulesTab, record: ScheduleRecord, expected: type):
    dialog = tab.dialog_for(record)
    if not isinstance(dialog, expected):
        action = type(dialog).__name__
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Action not available for this schedule (current action: {action}).",
        )
    return dialog


def _action_response(tab: SISSchedulesTab, success: bool) -> ActionResponse:
    return ActionResponse(
        success=success,
        notification=NotificationOut.from_notification(tab.notifications.current),
    )


async def _submit_with_faculty(dialog: FacultyDialog, faculty_id: int) -> bool:
    """
    Drive a faculty dialog: open, select, submit.

    Raises:
        HTTPException 409: Row busy, or the selection has conflicts.
        HTTPException 400: Selection rejected (the current teacher on edit,
            or a substitute outside the available teachers).
    """
    if dialog.busy:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another action is already running for this schedule.",
        )

    await dialog.open()
    await dialog.select_faculty(faculty_id)

    if dialog.conflicts:
        detail = ConflictBlockedDetail(
            message="Cannot assign: Please resolve conflicts first.",
            conflicts=[ConflictOut.from_result(conflict) for conflict in dialog.conflicts],
        )
        dialog.close()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail.model_dump(mode="json", by_alias=True),
        )
    if not dialog.can_submit:
        reason = dialog.selection_error or "Select a different teacher."
        dialog.close()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=reason)

    return await dialog.submit()


def _faculty_option(faculty: Faculty, current_faculty_id: Optional[int] = None) -> FacultyOptionOut:
    return FacultyOptionOut(
        faculty_id=faculty.faculty_id,
        full_name=faculty.full_name,
        position=faculty.position,
        designation=faculty.designation,
        load=faculty.schedule_load,
        label=faculty.option_label(current_faculty_id),
    )


# =============================================================================
# Table
# =============================================================================

@router.get(
    "/sis-schedules",
    response_model=ScheduleListResponse,
    summary="List SIS schedules",
    description="Paged schedule table with derived row actions, filters and tab flags.",
)
async def list_sis_schedules(
    tab: SchedulesTabDep,
    status_filter: Annotated[StatusFilter, Query(alias="status")] = StatusFilter.ALL,
    search: Annotated[str, Query(max_length=200)] = "",
    page: Annotated[int, Query(ge=1)] = 1,
) -> ScheduleListResponse:
    # Per-request view; the shared tab's own filter and page are not touched.
    query = TableQuery(status_filter=status_filter, search_term=search, page=page)
    schedule_page = tab.page(query)
    rows = [
        ScheduleRowOut(
            schedule=row.record,
            action=row.action.value,
            action_enabled=row.action_enabled,
            action_label=row.action_label,
            busy=row.busy,
            disabled_reason=row.disabled_reason,
            subject_missing=row.subject_missing,
            section_missing=row.section_missing,
            leave_label=row.leave_label,
        )
        for row in tab.render_rows(query)
    ]
    return ScheduleListResponse(
        rows=rows,
        pagination=PaginationOut(
            page=schedule_page.page,
            total_pages=schedule_page.total_pages,
            total=schedule_page.total,
            showing_from=schedule_page.showing_from,
            showing_to=schedule_page.showing_to,
            has_previous=schedule_page.has_previous,
            has_next=schedule_page.has_next,
            page_numbers=tab.page_numbers(query),
        ),
        stats=tab.stats(),
        flags=TabFlagsOut(
            loading=tab.loading,
            syncing=tab.syncing,
            syncing_existing=tab.syncing_existing,
            can_refresh=tab.can_refresh,
            can_sync=tab.can_sync,
        ),
        status_filter=query.status_filter.value,
        search=query.search_term,
        empty_message=tab.empty_message(query),
        notification=NotificationOut.from_notification(tab.notifications.current),
    )


@router.post(
    "/sis-schedules/refresh",
    response_model=ActionResponse,
    summary="Refresh from SIS",
)
async def refresh_sis_schedules(tab: SchedulesTabDep) -> ActionResponse:
    if not tab.can_refresh:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A refresh or sync is already running.",
        )
    success = await tab.fetch_sis_schedules()
    return _action_response(tab, success)


@router.post(
    "/notifications/dismiss",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Dismiss the current toast",
)
async def dismiss_notification(tab: SchedulesTabDep) -> None:
    tab.notifications.dismiss()


# =============================================================================
# Row actions
# =============================================================================

@router.post(
    "/sis-schedules/{sis_id}/assign",
    response_model=ActionResponse,
    responses={status.HTTP_409_CONFLICT: {"model": ConflictBlockedResponse}},
    summary="Assign a teacher to an unassigned schedule",
)
async def assign_teacher(
    tab: SchedulesTabDep,
    body: FacultySelection,
    sis_id: Annotated[int, Path(ge=1)],
) -> ActionResponse:
    record = _require_schedule(tab, sis_id)
    dialog = _require_dialog(tab, record, AssignTeacherDialog)
    success = await _submit_with_faculty(dialog, body.faculty_id)
    return _action_response(tab, success)


@router.post(
    "/sis-schedules/{sis_id}/edit",
    response_model=ActionResponse,
    responses={status.HTTP_409_CONFLICT: {"model": ConflictBlockedResponse}},
    summary="Change the teacher of an assigned schedule",
)
async def edit_faculty(
    tab: SchedulesTabDep,
    body: FacultySelection,
    sis_id: Annotated[int, Path(ge=1)],
) -> ActionResponse:
    record = _require_schedule(tab, sis_id)
    dialog = _require_dialog(tab, record, EditFacultyDialog)
    success = await _submit_with_faculty(dialog, body.faculty_id)
    return _action_response(tab, success)


@router.post(
    "/sis-schedules/{sis_id}/substitute",
    response_model=ActionResponse,
    summary="Assign a substitute while the teacher is on leave",
)
async def assign_substitute(
    tab: SchedulesTabDep,
    body: FacultySelection,
    sis_id: Annotated[int, Path(ge=1)],
) -> ActionResponse:
    record = _require_schedule(tab, sis_id)
    dialog = _require_dialog(tab, record, SubstituteTeacherDialog)
    success = await _submit_with_faculty(dialog, body.faculty_id)
    return _action_response(tab, success)


@router.post(
    "/sis-schedules/{sis_id}/restore",
    response_model=ActionResponse,
    summary="Restore the original teacher after leave",
)
async def restore_original(
    tab: SchedulesTabDep,
    sis_id: Annotated[int, Path(ge=1)],
) -> ActionResponse:
    record = _require_schedule(tab, sis_id)
    action: RestoreOriginalAction = _require_dialog(tab, record, RestoreOriginalAction)
    if action.busy:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another action is already running for this schedule.",
        )
    success = await action.submit()
    return _action_response(tab, success)


@router.post(
    "/sis-schedules/{sis_id}/conflicts",
    response_model=ConflictCheckOut,
    summary="Check a candidate teacher for conflicts",
)
async def check_conflicts(
    tab: SchedulesTabDep,
    body: FacultySelection,
    sis_id: Annotated[int, Path(ge=1)],
) -> ConflictCheckOut:
    record = _require_schedule(tab, sis_id)
    dialog = tab.dialog_for(record)
    if not isinstance(dialog, (AssignTeacherDialog, EditFacultyDialog)):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Conflict checks apply to assign and edit only.",
        )
    conflicts = await dialog.select_faculty(body.faculty_id)
    return ConflictCheckOut(
        has_conflicts=bool(conflicts),
        conflicts=[ConflictOut.from_result(conflict) for conflict in conflicts],
    )


@router.get(
    "/sis-schedules/{sis_id}/available-teachers",
    response_model=list[FacultyOptionOut],
    summary="Teachers free for this slot",
)
async def available_teachers(
    tab: SchedulesTabDep,
    sis_id: Annotated[int, Path(ge=1)],
) -> list[FacultyOptionOut]:
    record = _require_schedule(tab, sis_id)
    teachers = await tab.fetch_available_teachers(record)
    return [_faculty_option(teacher) for teacher in teachers]


@router.get(
    "/faculties",
    response_model=list[FacultyOptionOut],
    summary="Faculty roster with teaching load",
)
async def list_faculties(
    tab: SchedulesTabDep,
    current_faculty_id: Annotated[Optional[int], Query(alias="currentFacultyId")] = None,
) -> list[FacultyOptionOut]:
    if not await tab.fetch_faculties():
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch faculties",
        )
    return [_faculty_option(faculty, current_faculty_id) for faculty in tab.faculties]


# =============================================================================
# Bulk sync
# =============================================================================

def _require_sync_idle(tab: SISSchedulesTab) -> None:
    if not tab.can_sync:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A refresh or sync is already running.",
        )


@router.post(
    "/sync/subjects-sections",
    response_model=ActionResponse,
    summary="Import subjects and sections from SIS",
)
async def sync_subjects_sections(
    tab: SchedulesTabDep,
    body: Optional[SubjectSectionSyncRequest] = None,
) -> ActionResponse:
    _require_sync_idle(tab)
    clear_existing = body.clear_existing if body is not None else False
    success = await tab.handle_sync_subjects_sections(clear_existing=clear_existing)
    return _action_response(tab, success)


@router.post(
    "/sync/existing-assignments",
    response_model=ActionResponse,
    summary="Push existing HRMS assignments to SIS",
)
async def sync_existing_assignments(tab: SchedulesTabDep) -> ActionResponse:
    _require_sync_idle(tab)
    success = await tab.handle_sync_existing_assignments()
    return _action_response(tab, success)
