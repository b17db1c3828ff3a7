"""
Conftest for Scheduling Module Tests.

Provides shared fixtures for unit testing the scheduling module.
"""

import json
from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

from modules.scheduling.core.config import SchedulingSettings
from modules.scheduling.schemas.schedule import Faculty, ScheduleRecord
from modules.scheduling.services.hrms_client import HrmsScheduleClient
from modules.scheduling.services.schedules_tab import SISSchedulesTab


@pytest.fixture
def scheduling_settings():
    """SchedulingSettings with default paths, independent of the environment."""
    return SchedulingSettings(_env_file=None, hrms_base_url="http://hrms.test")


@pytest.fixture
def make_record() -> Callable[..., ScheduleRecord]:
    """Factory for schedule rows; keyword overrides use the backend's camelCase keys."""

    def _create(**overrides: Any) -> ScheduleRecord:
        data = {
            "sisId": 101,
            "hrmsScheduleId": None,
            "subjectId": 5,
            "subjectName": "Mathematics 7",
            "subjectCode": "MATH7",
            "classSectionId": 9,
            "sectionName": "Grade 7 - Rizal",
            "day": "Monday",
            "time": "08:00-09:00",
            "room": "R101",
            "duration": 1,
            "facultyId": None,
            "facultyName": "",
            "instructor": "",
            "isAssigned": False,
        }
        data.update(overrides)
        return ScheduleRecord.model_validate(data)

    return _create


@pytest.fixture
def assigned_record(make_record):
    """An assigned, fully mirrored row."""
    return make_record(
        sisId=202,
        hrmsScheduleId=77,
        facultyId=3,
        facultyName="Ana Cruz",
        instructor="Ana Cruz",
        isAssigned=True,
        syncStatus="synced",
    )


@pytest.fixture
def make_faculty() -> Callable[..., Faculty]:

    def _create(faculty_id: int, first: str = "Jose", last: str = "Reyes", **overrides: Any) -> Faculty:
        data = {
            "FacultyID": faculty_id,
            "EmployeeID": f"EMP-{faculty_id:03d}",
            "Position": "Teacher I",
            "User": {"FirstName": first, "LastName": last, "Email": f"{first.lower()}@school.edu"},
            "Employee": {"EmploymentDetail": {"Designation": "Subject_Teacher"}},
        }
        data.update(overrides)
        return Faculty.model_validate(data)

    return _create


@pytest.fixture
def mock_hrms_client(scheduling_settings):
    """HrmsScheduleClient double with every request method as AsyncMock."""
    client = MagicMock(spec=HrmsScheduleClient)
    client.settings = scheduling_settings
    client.http_client = MagicMock(spec=httpx.AsyncClient)
    client.fetch_sis_schedules = AsyncMock(return_value=[])
    client.fetch_faculty_roster = AsyncMock(return_value=[])
    client.fetch_hrms_schedules = AsyncMock(return_value=[])
    client.fetch_available_teachers = AsyncMock(return_value=[])
    client.check_conflicts = AsyncMock()
    client.assign_teacher = AsyncMock()
    client.assign_substitute = AsyncMock()
    client.update_schedule = AsyncMock()
    client.restore_original_teacher = AsyncMock()
    client.sync_subjects_sections = AsyncMock()
    client.sync_existing_assignments = AsyncMock()
    return client


@pytest.fixture
def tab(mock_hrms_client):
    """SISSchedulesTab wired to the mock client."""
    return SISSchedulesTab(mock_hrms_client)


class RecordingTransport:
    """
    httpx.MockTransport handler returning canned responses per (method, path).

    Unmatched requests get a 404. Every request is kept in ``requests``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def add(self, method: str, path: str, status_code: int = 200, json_body: Any = None,
            content: bytes | None = None) -> None:
        def _respond(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json_body)

        self._routes[(method, path)] = _respond

    def add_error(self, method: str, path: str, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self._routes[(method, path)] = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        return route(request)

    def json_of(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest_asyncio.fixture
async def http_client(transport):
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(transport), base_url="http://hrms.test"
    ) as client:
        yield client


@pytest.fixture
def hrms(http_client, scheduling_settings):
    """Real HrmsScheduleClient over the recording transport."""
    return HrmsScheduleClient(http_client=http_client, settings=scheduling_settings)
