"""
Unit Tests for faculty load derivation.
"""

import pytest

from core.exceptions import HrmsConnectionError, HrmsRequestError
from modules.scheduling.services.faculty_load import (
    attach_schedule_load,
    fetch_faculties_with_load,
    tally_schedule_load,
)


def test_tally_skips_rows_without_faculty():
    counts = tally_schedule_load([
        {"id": 1, "facultyId": 3},
        {"id": 2, "facultyId": 3},
        {"id": 3, "facultyId": 4},
        {"id": 4, "facultyId": None},
        {"id": 5},
    ])

    assert counts == {3: 2, 4: 1}


def test_attach_sets_zero_for_unscheduled_faculty(make_faculty):
    faculties = [make_faculty(3), make_faculty(9)]

    loaded = attach_schedule_load(faculties, tally_schedule_load([{"facultyId": 3}]))

    assert [f.schedule_load for f in loaded] == [1, 0]
    # Originals are not mutated
    assert faculties[0].schedule_count is None


def test_option_label(make_faculty):
    faculty = attach_schedule_load(
        [make_faculty(3, "Ana", "Cruz")],
        tally_schedule_load([{"facultyId": 3}, {"facultyId": 3}]),
    )[0]

    assert faculty.option_label() == "Ana Cruz - Teacher I (Subject Teacher) - Load: 2"
    assert faculty.option_label(current_faculty_id=3).endswith(" (Current)")
    assert not faculty.option_label(current_faculty_id=4).endswith(" (Current)")


def test_designation_missing_is_na(make_faculty):
    faculty = make_faculty(5, Employee=None)
    assert faculty.designation == "N/A"


class TestFetchFacultiesWithLoad:

    @pytest.mark.asyncio
    async def test_roster_and_schedules_fetched_together(self, mock_hrms_client, make_faculty):
        mock_hrms_client.fetch_faculty_roster.return_value = [make_faculty(3), make_faculty(4)]
        mock_hrms_client.fetch_hrms_schedules.return_value = [
            {"facultyId": 3}, {"facultyId": 3}, {"facultyId": 3}, {"facultyId": 4},
        ]

        faculties = await fetch_faculties_with_load(mock_hrms_client)

        assert {f.faculty_id: f.schedule_load for f in faculties} == {3: 3, 4: 1}
        mock_hrms_client.fetch_faculty_roster.assert_awaited_once()
        mock_hrms_client.fetch_hrms_schedules.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_schedule_list_failure_gives_zero_load(self, mock_hrms_client, make_faculty):
        mock_hrms_client.fetch_faculty_roster.return_value = [make_faculty(3)]
        mock_hrms_client.fetch_hrms_schedules.side_effect = HrmsRequestError(
            "Failed to fetch schedules", status_code=500
        )

        faculties = await fetch_faculties_with_load(mock_hrms_client)

        assert faculties[0].schedule_load == 0

    @pytest.mark.asyncio
    async def test_roster_failure_raises(self, mock_hrms_client):
        mock_hrms_client.fetch_faculty_roster.side_effect = HrmsRequestError(
            "Failed to fetch faculties", status_code=500
        )

        with pytest.raises(HrmsRequestError):
            await fetch_faculties_with_load(mock_hrms_client)

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self, mock_hrms_client, make_faculty):
        mock_hrms_client.fetch_faculty_roster.return_value = [make_faculty(3)]
        mock_hrms_client.fetch_hrms_schedules.side_effect = HrmsConnectionError("down")

        with pytest.raises(HrmsConnectionError):
            await fetch_faculties_with_load(mock_hrms_client)
