"""
Faculty teaching load.

The roster endpoint carries no load figures, so the load shown next to each
teacher in the assignment dropdowns is tallied here from the full HRMS
schedule list. Recomputed on every fetch; never persisted.
"""

import asyncio
import logging
from collections import Counter
from typing import Any, Iterable

from core.exceptions import HrmsRequestError, HrmsResponseError
from modules.scheduling.schemas.schedule import Faculty, FacultyCount
from modules.scheduling.services.hrms_client import HrmsScheduleClient

logger = logging.getLogger(__name__)


def tally_schedule_load(schedules: Iterable[dict[str, Any]]) -> Counter:
    """Count schedules per ``facultyId``; rows without a faculty are ignored."""
    counts: Counter = Counter()
    for schedule in schedules:
        faculty_id = schedule.get("facultyId")
        if faculty_id:
            counts[faculty_id] += 1
    return counts


def attach_schedule_load(faculties: list[Faculty], counts: Counter) -> list[Faculty]:
    """Return copies of ``faculties`` with ``_count.Schedules`` set from ``counts``."""
    return [
        faculty.model_copy(
            update={"schedule_count": FacultyCount(schedules=counts.get(faculty.faculty_id, 0))}
        )
        for faculty in faculties
    ]


async def _schedules_or_empty(client: HrmsScheduleClient) -> list[dict[str, Any]]:
    # An unavailable schedule list only costs the load figures, not the roster.
    try:
        return await client.fetch_hrms_schedules()
    except (HrmsRequestError, HrmsResponseError) as e:
        logger.warning(f"Schedule list unavailable, faculty load defaults to 0: {e}")
        return []


async def fetch_faculties_with_load(client: HrmsScheduleClient) -> list[Faculty]:
    """
    Fetch the faculty roster and the schedule list in parallel and attach load.

    Raises:
        HrmsError: If the roster cannot be fetched, or on transport failure.
    """
    roster, schedules = await asyncio.gather(
        client.fetch_faculty_roster(),
        _schedules_or_empty(client),
    )
    return attach_schedule_load(roster, tally_schedule_load(schedules))
