"""
HRMS Schedule Client.

Thin async wrappers around the HRMS backend endpoints used by the SIS
schedules tab. Every method issues exactly one HTTP request and returns
validated Pydantic models; nothing is cached or retried here.

Design Principles:
    HrmsScheduleClient requires httpx.AsyncClient via EXPLICIT dependency
    injection. The HTTP client lifecycle is managed by the caller.

    Usage in FastAPI routes:
        @router.get("/sis-schedules")
        async def list_schedules(hrms: HrmsClientDep):
            return await hrms.fetch_sis_schedules()

    Usage in scripts:
        async with create_standalone_http_client(base_url=...) as http_client:
            hrms = HrmsScheduleClient(http_client=http_client)
            await hrms.sync_existing_assignments()

Error mapping:
    transport failure           -> HrmsConnectionError
    non-2xx, JSON {error}       -> HrmsRequestError(server message)
    non-2xx, unparseable body   -> HrmsRequestError(generic fallback)
    2xx with unexpected body    -> HrmsResponseError
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from core.exceptions import (
    HrmsConnectionError,
    HrmsRequestError,
    HrmsResponseError,
)
from modules.scheduling.core.config import SchedulingSettings, get_scheduling_settings
from modules.scheduling.schemas.schedule import (
    AssignTeacherRequest,
    ConflictCheckRequest,
    ConflictCheckResponse,
    ExistingSyncSummary,
    Faculty,
    MutationResult,
    RestoreOriginalRequest,
    ScheduleRecord,
    SubjectSectionSyncResults,
    UpdateScheduleRequest,
)

logger = logging.getLogger(__name__)

_schedule_list = TypeAdapter(list[ScheduleRecord])
_faculty_list = TypeAdapter(list[Faculty])


class HrmsScheduleClient:
    """
    HTTP client for the HRMS schedule endpoints.

    Args:
        http_client: Shared httpx.AsyncClient (required). Relative paths are
            resolved against its ``base_url``.
        settings: Scheduling settings providing endpoint paths.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Optional[SchedulingSettings] = None,
    ) -> None:
        if http_client is None:
            raise ValueError(
                "http_client is required. Use HrmsClientDep in FastAPI routes, "
                "or create_standalone_http_client() in scripts."
            )
        self._client = http_client
        self._settings = settings or get_scheduling_settings()

    @property
    def settings(self) -> SchedulingSettings:
        return self._settings

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._client

    # =========================================================================
    # Transport
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback_error: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            HrmsConnectionError: Network/transport failure.
            HrmsRequestError: Non-2xx response.
            HrmsResponseError: 2xx response without a JSON body.
        """
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.error(f"HRMS {method} {path} failed: {e}")
            raise HrmsConnectionError(fallback_error) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            server_message = None
            if isinstance(body, dict):
                server_message = body.get("error") or body.get("message")
            logger.warning(
                f"HRMS {method} {path} returned HTTP {response.status_code}: "
                f"{server_message or '<no error body>'}"
            )
            raise HrmsRequestError(
                server_message or fallback_error,
                status_code=response.status_code,
                server_message=server_message,
            )

        if body is None:
            raise HrmsResponseError(f"{fallback_error} (empty or non-JSON response)")
        return body

    @staticmethod
    def _validate(adapter_or_model: Any, data: Any, what: str) -> Any:
        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(data)
            return adapter_or_model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected {what} payload from HRMS: {e}")
            raise HrmsResponseError(f"Unexpected {what} response format") from e

    # =========================================================================
    # Reads
    # =========================================================================

    async def fetch_sis_schedules(self) -> list[ScheduleRecord]:
        """``GET /api/schedules/fetch-from-sis``: merged SIS/HRMS schedule rows."""
        body = await self._request(
            "GET",
            self._settings.sis_schedules_path,
            fallback_error="Failed to fetch schedules from SIS",
        )
        rows = body.get("schedules") if isinstance(body, dict) else None
        return self._validate(_schedule_list, rows or [], "schedule list")

    async def fetch_faculty_roster(self) -> list[Faculty]:
        """``GET /api/faculty``: faculty roster without load counts."""
        body = await self._request(
            "GET",
            self._settings.faculty_path,
            fallback_error="Failed to fetch faculties",
        )
        return self._validate(_faculty_list, body or [], "faculty list")

    async def fetch_hrms_schedules(self) -> list[dict[str, Any]]:
        """``GET /api/schedules``: every HRMS schedule, used only to tally load."""
        body = await self._request(
            "GET",
            self._settings.hrms_schedules_path,
            fallback_error="Failed to fetch schedules",
        )
        if not isinstance(body, list):
            return []
        return [item for item in body if isinstance(item, dict)]

    async def fetch_available_teachers(
        self,
        day: str,
        time: str,
        exclude_faculty_id: Optional[int] = None,
    ) -> list[Faculty]:
        """Faculty free at ``day``/``time`` and not on leave, for substitute selection."""
        params = {
            "day": day,
            "time": time,
            "excludeFacultyId": "" if exclude_faculty_id is None else str(exclude_faculty_id),
        }
        body = await self._request(
            "GET",
            self._settings.available_teachers_path,
            params=params,
            fallback_error="Failed to fetch available teachers",
        )
        teachers = body.get("availableTeachers") if isinstance(body, dict) else None
        return self._validate(_faculty_list, teachers or [], "available teachers")

    async def check_conflicts(self, request: ConflictCheckRequest) -> ConflictCheckResponse:
        """``POST /api/schedules/check-conflicts`` for a candidate assignment."""
        body = await self._request(
            "POST",
            self._settings.check_conflicts_path,
            json=request.to_payload(),
            fallback_error="Failed to check conflicts",
        )
        return self._validate(ConflictCheckResponse, body, "conflict check")

    # =========================================================================
    # Mutations
    # =========================================================================

    async def assign_teacher(self, request: AssignTeacherRequest) -> MutationResult:
        """Create or update the HRMS schedule for a SIS slot with the given teacher."""
        body = await self._request(
            "POST",
            self._settings.assign_teacher_path,
            json=request.to_payload(),
            fallback_error="Failed to assign teacher",
        )
        return self._validate(MutationResult, body, "assign teacher")

    async def assign_substitute(self, request: AssignTeacherRequest) -> MutationResult:
        """Seat a substitute while the assigned teacher is on leave."""
        body = await self._request(
            "POST",
            self._settings.substitute_path,
            json=request.to_payload(),
            fallback_error="Failed to assign substitute teacher",
        )
        return self._validate(MutationResult, body, "assign substitute")

    async def update_schedule(
        self, hrms_schedule_id: int, request: UpdateScheduleRequest
    ) -> MutationResult:
        """``PUT /api/schedules/:id``; the response may carry the SIS push result."""
        body = await self._request(
            "PUT",
            self._settings.schedule_resource_path(hrms_schedule_id),
            json=request.to_payload(),
            fallback_error="Failed to update faculty assignment",
        )
        return self._validate(MutationResult, body, "schedule update")

    async def restore_original_teacher(self, request: RestoreOriginalRequest) -> MutationResult:
        """Put the original teacher back once their leave has ended."""
        body = await self._request(
            "POST",
            self._settings.restore_original_path,
            json=request.to_payload(),
            fallback_error="Failed to restore original teacher",
        )
        return self._validate(MutationResult, body, "restore original")

    # =========================================================================
    # Bulk sync
    # =========================================================================

    async def sync_subjects_sections(self, clear_existing: bool = False) -> SubjectSectionSyncResults:
        """Import subjects and sections from SIS, optionally removing unused ones."""
        body = await self._request(
            "POST",
            self._settings.sync_subjects_sections_path,
            json={"clearExisting": clear_existing},
            fallback_error="Failed to sync subjects and sections",
        )
        results = body.get("results") if isinstance(body, dict) else None
        if results is None:
            raise HrmsResponseError("Unexpected response format")
        return self._validate(SubjectSectionSyncResults, results, "subject/section sync")

    async def sync_existing_assignments(self) -> ExistingSyncSummary:
        """Push existing HRMS assignments to SIS."""
        body = await self._request(
            "POST",
            self._settings.sync_existing_path,
            fallback_error="Failed to sync existing assignments",
        )
        if not (isinstance(body, dict) and body.get("success") and body.get("summary")):
            error = body.get("error") if isinstance(body, dict) else None
            raise HrmsResponseError(error or "Unexpected response format")
        return self._validate(ExistingSyncSummary, body["summary"], "existing sync")
