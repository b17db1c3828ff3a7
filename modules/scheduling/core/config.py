"""
Scheduling Module Configuration.

Manages environment variables specific to the Scheduling module.
Uses prefix SCHED_ to avoid conflicts with other modules.

Endpoint paths are relative to ``SCHED_HRMS_BASE_URL`` and default to the
routes exposed by the HRMS backend.
"""

from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulingSettings(BaseSettings):
    """
    Scheduling module settings loaded from environment variables.

    All variables use the SCHED_ prefix for module isolation.
    The API token uses SecretStr so it never shows up in reprs or logs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # HRMS backend connection
    hrms_base_url: Annotated[
        str,
        Field(
            description="Base URL of the HRMS backend",
            validation_alias="SCHED_HRMS_BASE_URL",
        ),
    ] = "http://127.0.0.1:3000"

    hrms_api_token: Annotated[
        Optional[SecretStr],
        Field(
            description="Bearer token for the HRMS backend (optional)",
            validation_alias="SCHED_HRMS_API_TOKEN",
        ),
    ] = None

    request_timeout_seconds: Annotated[
        Optional[float],
        Field(
            description="HTTP timeout for HRMS requests; unset means no timeout",
            validation_alias="SCHED_REQUEST_TIMEOUT_SECONDS",
        ),
    ] = None

    # Presentation
    items_per_page: Annotated[
        int,
        Field(
            gt=0,
            description="Rows per page in the SIS schedules table",
            validation_alias="SCHED_ITEMS_PER_PAGE",
        ),
    ] = 10

    # === Endpoint paths ===
    sis_schedules_path: Annotated[
        str, Field(validation_alias="SCHED_SIS_SCHEDULES_PATH")
    ] = "/api/schedules/fetch-from-sis"

    faculty_path: Annotated[
        str, Field(validation_alias="SCHED_FACULTY_PATH")
    ] = "/api/faculty"

    hrms_schedules_path: Annotated[
        str, Field(validation_alias="SCHED_HRMS_SCHEDULES_PATH")
    ] = "/api/schedules"

    check_conflicts_path: Annotated[
        str, Field(validation_alias="SCHED_CHECK_CONFLICTS_PATH")
    ] = "/api/schedules/check-conflicts"

    available_teachers_path: Annotated[
        str, Field(validation_alias="SCHED_AVAILABLE_TEACHERS_PATH")
    ] = "/api/schedules/fetch-from-sis/available-teachers"

    assign_teacher_path: Annotated[
        str, Field(validation_alias="SCHED_ASSIGN_TEACHER_PATH")
    ] = "/api/schedules/fetch-from-sis/assign-teacher"

    # The backend has no separate substitute route; substitutes go through
    # assign-teacher unless overridden.
    substitute_path: Annotated[
        str, Field(validation_alias="SCHED_SUBSTITUTE_PATH")
    ] = "/api/schedules/fetch-from-sis/assign-teacher"

    restore_original_path: Annotated[
        str, Field(validation_alias="SCHED_RESTORE_ORIGINAL_PATH")
    ] = "/api/schedules/fetch-from-sis/restore-original-teacher"

    sync_subjects_sections_path: Annotated[
        str, Field(validation_alias="SCHED_SYNC_SUBJECTS_SECTIONS_PATH")
    ] = "/api/sync/subjects-sections-from-sis"

    sync_existing_path: Annotated[
        str, Field(validation_alias="SCHED_SYNC_EXISTING_PATH")
    ] = "/api/schedules/fetch-from-sis/sync-existing"

    def schedule_resource_path(self, hrms_schedule_id: int) -> str:
        """Path of a single HRMS schedule resource (``PUT /api/schedules/:id``)."""
        return f"{self.hrms_schedules_path.rstrip('/')}/{hrms_schedule_id}"

    def api_token_value(self) -> Optional[str]:
        """Plain API token, or None when unset."""
        if self.hrms_api_token is None:
            return None
        return self.hrms_api_token.get_secret_value() or None


@lru_cache
def get_scheduling_settings() -> SchedulingSettings:
    """
    Get cached scheduling module settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        SchedulingSettings: Scheduling settings instance.
    """
    return SchedulingSettings()
