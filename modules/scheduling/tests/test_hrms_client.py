"""
Unit Tests for HrmsScheduleClient.

Wire-level tests over httpx.MockTransport: request shape, response
validation and the error mapping.
"""

import httpx
import pytest

from core.exceptions import (
    HrmsConnectionError,
    HrmsRequestError,
    HrmsResponseError,
)
from modules.scheduling.schemas.schedule import (
    AssignTeacherRequest,
    ConflictCheckRequest,
    RestoreOriginalRequest,
    UpdateScheduleRequest,
)
from modules.scheduling.services.hrms_client import HrmsScheduleClient

SIS_PATH = "/api/schedules/fetch-from-sis"


class TestClientConstruction:

    def test_requires_http_client(self, scheduling_settings):
        with pytest.raises(ValueError, match="http_client is required"):
            HrmsScheduleClient(http_client=None, settings=scheduling_settings)


class TestReads:

    @pytest.mark.asyncio
    async def test_fetch_sis_schedules(self, hrms, transport):
        transport.add("GET", SIS_PATH, json_body={
            "schedules": [
                {
                    "sisId": 1,
                    "hrmsScheduleId": 10,
                    "subjectId": 2,
                    "subjectName": "Science 8",
                    "classSectionId": 3,
                    "sectionName": "8-A",
                    "day": "Tuesday",
                    "time": "09:00-10:00",
                    "room": "Lab 1",
                    "duration": 1,
                    "facultyId": 4,
                    "facultyName": "Ana Cruz",
                    "instructor": "Ana Cruz",
                    "isAssigned": True,
                    "syncStatus": "synced",
                    "facultyLeaveStatus": {
                        "isOnLeave": True,
                        "leave": {"LeaveID": 9, "LeaveType": "Sick Leave", "Reason": "Flu"},
                    },
                    "unknownKey": "ignored",
                }
            ]
        })

        records = await hrms.fetch_sis_schedules()

        assert len(records) == 1
        record = records[0]
        assert record.sis_id == 1
        assert record.is_mirrored is True
        assert record.is_on_leave is True
        assert record.leave_label == "On Leave (Sick Leave)"
        assert transport.requests[0].method == "GET"

    @pytest.mark.asyncio
    async def test_fetch_sis_schedules_missing_list_is_empty(self, hrms, transport):
        transport.add("GET", SIS_PATH, json_body={"success": True})

        assert await hrms.fetch_sis_schedules() == []

    @pytest.mark.asyncio
    async def test_fetch_faculty_roster(self, hrms, transport):
        transport.add("GET", "/api/faculty", json_body=[
            {
                "FacultyID": 7,
                "EmployeeID": "EMP-007",
                "Position": "Teacher III",
                "User": {"FirstName": "Maria", "LastName": "Santos", "Email": "m@school.edu"},
                "Employee": {"EmploymentDetail": {"Designation": "Department_Head"}},
            }
        ])

        roster = await hrms.fetch_faculty_roster()

        assert roster[0].faculty_id == 7
        assert roster[0].designation == "Department Head"
        assert roster[0].schedule_load == 0

    @pytest.mark.asyncio
    async def test_fetch_available_teachers_query(self, hrms, transport):
        transport.add("GET", "/api/schedules/fetch-from-sis/available-teachers", json_body={
            "availableTeachers": [
                {
                    "FacultyID": 8,
                    "User": {"FirstName": "Leo", "LastName": "Tan"},
                    "Employee": {"employmentDetails": [{"Designation": "Adviser"}]},
                    "currentLoad": 4,
                }
            ]
        })

        teachers = await hrms.fetch_available_teachers("Monday", "08:00-09:00", exclude_faculty_id=3)

        params = transport.requests[0].url.params
        assert params["day"] == "Monday"
        assert params["time"] == "08:00-09:00"
        assert params["excludeFacultyId"] == "3"
        assert teachers[0].designation == "Adviser"
        assert teachers[0].schedule_load == 4

    @pytest.mark.asyncio
    async def test_check_conflicts_payload(self, hrms, transport):
        transport.add("POST", "/api/schedules/check-conflicts", json_body={
            "hasConflicts": True,
            "conflicts": [
                {
                    "type": "teacher",
                    "message": "Teacher already teaching at this time",
                    "conflictingSchedule": {"id": 55, "subjectName": "English 7"},
                }
            ],
        })

        result = await hrms.check_conflicts(ConflictCheckRequest(
            faculty_id=3, subject_id=5, class_section_id=9, day="Monday", time="08:00-09:00",
        ))

        body = transport.json_of(0)
        assert body == {
            "facultyId": 3,
            "subjectId": 5,
            "classSectionId": 9,
            "day": "Monday",
            "time": "08:00-09:00",
        }
        assert result.has_conflicts is True
        assert result.conflicts[0].heading == "Teacher Conflict:"


class TestMutations:

    @pytest.mark.asyncio
    async def test_assign_teacher_body(self, hrms, transport):
        transport.add("POST", "/api/schedules/fetch-from-sis/assign-teacher",
                      json_body={"message": "Teacher assigned"})

        result = await hrms.assign_teacher(AssignTeacherRequest(
            sis_schedule_id=101, faculty_id=3, subject_id=5, class_section_id=9,
            day="Monday", time="08:00-09:00", duration=1,
        ))

        assert result.message == "Teacher assigned"
        assert transport.json_of(0) == {
            "sisScheduleId": 101,
            "facultyId": 3,
            "subjectId": 5,
            "classSectionId": 9,
            "day": "Monday",
            "time": "08:00-09:00",
            "duration": 1,
        }

    @pytest.mark.asyncio
    async def test_substitute_uses_configured_path(self, http_client, transport, scheduling_settings):
        settings = scheduling_settings.model_copy(update={"substitute_path": "/api/schedules/substitute"})
        client = HrmsScheduleClient(http_client=http_client, settings=settings)
        transport.add("POST", "/api/schedules/substitute", json_body={})

        await client.assign_substitute(AssignTeacherRequest(
            sis_schedule_id=1, faculty_id=2, subject_id=3, class_section_id=4,
            day="Friday", time="13:00-14:00", duration=1,
        ))

        assert transport.requests[0].url.path == "/api/schedules/substitute"

    @pytest.mark.asyncio
    async def test_update_schedule_put(self, hrms, transport):
        transport.add("PUT", "/api/schedules/77", json_body={
            "sync": {"synced": False, "message": "SIS offline"},
        })

        result = await hrms.update_schedule(77, UpdateScheduleRequest(
            faculty_id=4, subject_id=5, class_section_id=9, day="Monday",
            time="08:00-09:00", duration=1, sis_schedule_id=202,
        ))

        assert transport.requests[0].method == "PUT"
        assert transport.json_of(0)["sisScheduleId"] == 202
        assert result.sync.synced is False
        assert result.sync.message == "SIS offline"

    @pytest.mark.asyncio
    async def test_restore_original_sends_ids(self, hrms, transport):
        transport.add("POST", "/api/schedules/fetch-from-sis/restore-original-teacher", json_body={})

        await hrms.restore_original_teacher(RestoreOriginalRequest(
            hrms_schedule_id=77, original_faculty_id=3, sis_schedule_id=202,
        ))

        assert transport.json_of(0) == {
            "hrmsScheduleId": 77,
            "originalFacultyId": 3,
            "sisScheduleId": 202,
        }


class TestBulkSync:

    @pytest.mark.asyncio
    async def test_sync_subjects_sections(self, hrms, transport):
        transport.add("POST", "/api/sync/subjects-sections-from-sis", json_body={
            "success": True,
            "results": {
                "subjects": {"created": 4, "deleted": 1},
                "sections": {"created": 2, "deleted": 0},
            },
        })

        results = await hrms.sync_subjects_sections(clear_existing=True)

        assert transport.json_of(0) == {"clearExisting": True}
        assert results.subjects.created == 4
        assert results.subjects.deleted == 1
        assert results.sections.created == 2

    @pytest.mark.asyncio
    async def test_sync_subjects_sections_without_results(self, hrms, transport):
        transport.add("POST", "/api/sync/subjects-sections-from-sis", json_body={"success": True})

        with pytest.raises(HrmsResponseError, match="Unexpected response format"):
            await hrms.sync_subjects_sections()

    @pytest.mark.asyncio
    async def test_sync_existing_assignments(self, hrms, transport):
        transport.add("POST", "/api/schedules/fetch-from-sis/sync-existing", json_body={
            "success": True,
            "summary": {"synced": 3, "skipped": 1, "errors": 0},
        })

        summary = await hrms.sync_existing_assignments()

        assert (summary.synced, summary.skipped, summary.errors) == (3, 1, 0)

    @pytest.mark.asyncio
    async def test_sync_existing_without_summary_uses_server_error(self, hrms, transport):
        transport.add("POST", "/api/schedules/fetch-from-sis/sync-existing", json_body={
            "success": False,
            "error": "SIS credentials missing",
        })

        with pytest.raises(HrmsResponseError, match="SIS credentials missing"):
            await hrms.sync_existing_assignments()


class TestErrorMapping:

    @pytest.mark.asyncio
    async def test_server_error_message_is_surfaced(self, hrms, transport):
        transport.add("POST", "/api/schedules/fetch-from-sis/assign-teacher", status_code=409,
                      json_body={"error": "Teacher already assigned at this time"})

        with pytest.raises(HrmsRequestError) as exc_info:
            await hrms.assign_teacher(AssignTeacherRequest(
                sis_schedule_id=1, faculty_id=2, subject_id=3, class_section_id=4,
                day="Monday", time="08:00-09:00", duration=1,
            ))

        assert str(exc_info.value) == "Teacher already assigned at this time"
        assert exc_info.value.status_code == 409
        assert exc_info.value.server_message == "Teacher already assigned at this time"

    @pytest.mark.asyncio
    async def test_unparseable_error_body_uses_fallback(self, hrms, transport):
        transport.add("GET", SIS_PATH, status_code=502, content=b"<html>Bad Gateway</html>")

        with pytest.raises(HrmsRequestError) as exc_info:
            await hrms.fetch_sis_schedules()

        assert str(exc_info.value) == "Failed to fetch schedules from SIS"
        assert exc_info.value.server_message is None

    @pytest.mark.asyncio
    async def test_transport_failure(self, hrms, transport):
        transport.add_error("GET", "/api/faculty", httpx.ConnectError("connection refused"))

        with pytest.raises(HrmsConnectionError, match="Failed to fetch faculties"):
            await hrms.fetch_faculty_roster()

    @pytest.mark.asyncio
    async def test_success_with_non_json_body(self, hrms, transport):
        transport.add("GET", SIS_PATH, content=b"OK")

        with pytest.raises(HrmsResponseError):
            await hrms.fetch_sis_schedules()

    @pytest.mark.asyncio
    async def test_invalid_payload_shape(self, hrms, transport):
        transport.add("GET", SIS_PATH, json_body={"schedules": [{"subjectName": "no id"}]})

        with pytest.raises(HrmsResponseError, match="Unexpected schedule list response format"):
            await hrms.fetch_sis_schedules()
