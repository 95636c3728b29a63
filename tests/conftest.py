from __future__ import annotations

from datetime import date, datetime, time

import pytest

from classroom_attendance.container import Repositories, wire
from classroom_attendance.core.enums import Role
from classroom_attendance.holidays.model import Holiday
from classroom_attendance.schedules.model import ScheduleEntry
from classroom_attendance.users.model import Identity
from tests.fakes import (
    InMemoryAttendance,
    InMemoryConfig,
    InMemoryHealth,
    InMemoryHolidays,
    InMemorySchedules,
    InMemoryUsers,
    make_user,
)

# 2026-03-02 is a Monday inside the second semester (2025-2026).
MONDAY = date(2026, 3, 2)
# Araw ng Kagitingan, a Thursday.
HOLIDAY_THURSDAY = date(2026, 4, 9)


@pytest.fixture
def config_values():
    return {
        "sem1_start": "2025-09-01",
        "sem1_end": "2026-01-17",
        "sem1_adjustment_end": "2025-11-30",
        "sem2_start": "2026-02-09",
        "sem2_end": "2026-06-21",
        "sem2_adjustment_end": "2026-03-06",
        "checkin_window_minutes": "10",
        "late_window_minutes": "5",
        "absent_window_minutes": "10",
        "checkout_window_minutes": "10",
    }


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            make_user("S1", "Ana Santos"),
            make_user("S2", "Ben Cruz"),
            make_user("S3", "Carla Reyes"),
            make_user("O1", "Dino Lim", Role.OFFICER),
            make_user("S9", "Inactive Ivan", is_active=False),
            make_user("P1", "Prof. Garcia", Role.PROFESSOR),
            make_user("P2", "Prof. Tan", Role.PROFESSOR),
        ]
    )


@pytest.fixture
def ledger():
    return InMemoryAttendance()


@pytest.fixture
def schedule_entries():
    return [
        ScheduleEntry(
            class_code="MATH101",
            class_name="College Algebra",
            days=frozenset({"Mon", "Wed"}),
            start_time=time(9, 0),
            end_time=time(10, 30),
            semester="2",
            academic_year="2025-2026",
            professor_id="P1",
        ),
        ScheduleEntry(
            class_code="SCI102",
            class_name="General Biology",
            days=frozenset({"Tue", "Thu"}),
            start_time=time(13, 0),
            end_time=time(14, 30),
            semester="2",
            academic_year="2025-2026",
            professor_id="P1",
        ),
        ScheduleEntry(
            class_code="ENG103",
            class_name="Purposive Communication",
            days=frozenset({"Mon"}),
            start_time=time(11, 0),
            end_time=time(12, 0),
            semester="2",
            academic_year="2025-2026",
            professor_id="P2",
            cycle_start=date(2026, 3, 9),
            cycle_end=date(2026, 4, 30),
        ),
    ]


@pytest.fixture
def schedule_repo(schedule_entries, ledger):
    return InMemorySchedules(schedule_entries, ledger)


@pytest.fixture
def holidays_repo():
    return InMemoryHolidays({HOLIDAY_THURSDAY: Holiday(HOLIDAY_THURSDAY, "Araw ng Kagitingan", "Regular Holiday")})


@pytest.fixture
def clock_state():
    return {"now": datetime(2026, 3, 2, 9, 0, 0)}


@pytest.fixture
def container(users_repo, schedule_repo, ledger, holidays_repo, config_values, clock_state):
    repos = Repositories(
        users=users_repo,
        schedules=schedule_repo,
        attendance=ledger,
        holidays=holidays_repo,
        config=InMemoryConfig(config_values),
        health=InMemoryHealth(now=datetime(2026, 3, 2, 9, 0, 0)),
    )
    return wire(repos, clock=lambda: clock_state["now"])


@pytest.fixture
def student():
    return Identity(user_id="S1", role=Role.STUDENT)


@pytest.fixture
def professor():
    return Identity(user_id="P1", role=Role.PROFESSOR)
