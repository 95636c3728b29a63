from datetime import date, datetime, time

from classroom_attendance.attendance.model import AttendanceRecord
from classroom_attendance.core.enums import AttendanceStatus, Role
from classroom_attendance.schedules.index import ScheduleIndex
from classroom_attendance.semesters.resolver import resolve_semester
from classroom_attendance.users.model import Identity


def _sem(config_values, day: date):
    return resolve_semester(datetime.combine(day, time(8, 0)), config_values)


def test_nominal_classes_by_weekday(schedule_repo, config_values):
    index = ScheduleIndex(schedule_repo)
    monday = date(2026, 3, 2)

    codes = [e.class_code for e in index.classes_for(monday, _sem(config_values, monday))]

    # ENG103's cycle only starts 2026-03-09.
    assert codes == ["MATH101"]


def test_cycle_window_limits_meetings(schedule_repo, config_values):
    index = ScheduleIndex(schedule_repo)
    later_monday = date(2026, 3, 9)
    after_cycle = date(2026, 5, 4)

    assert [e.class_code for e in index.classes_for(later_monday, _sem(config_values, later_monday))] == [
        "MATH101",
        "ENG103",
    ]
    assert [e.class_code for e in index.classes_for(after_cycle, _sem(config_values, after_cycle))] == ["MATH101"]


def test_other_semester_entries_are_excluded(schedule_repo, config_values):
    index = ScheduleIndex(schedule_repo)
    first_sem_monday = date(2025, 9, 8)

    assert index.classes_for(first_sem_monday, _sem(config_values, first_sem_monday)) == []


def test_pending_makeup_joins_the_union(schedule_repo, ledger, config_values):
    index = ScheduleIndex(schedule_repo)
    saturday = date(2026, 3, 7)
    ledger.insert(
        AttendanceRecord.synthetic_row(
            class_date=saturday, class_code="SCI102", student_id="S1", status=AttendanceStatus.PENDING
        )
    )
    sem = _sem(config_values, saturday)

    assert index.nominal_classes_for(saturday, sem) == []
    assert [e.class_code for e in index.classes_for(saturday, sem)] == ["SCI102"]


def test_occurrences_respect_range_and_semester(schedule_repo, config_values):
    index = ScheduleIndex(schedule_repo)
    sem = _sem(config_values, date(2026, 6, 1))
    entry = schedule_repo.get("MATH101")

    days = index.occurrences(entry, sem, start=date(2026, 6, 10))

    assert days == [date(2026, 6, 10), date(2026, 6, 15), date(2026, 6, 17)]


def test_today_schedule_lists_professor_and_makeup_flag(container, ledger, clock_state):
    saturday = date(2026, 3, 7)
    clock_state["now"] = datetime(2026, 3, 7, 8, 0)
    container.override_service.authorize_makeup(
        actor=Identity(user_id="P1", role=Role.PROFESSOR), class_code="SCI102", class_date=saturday
    )

    listing = container.schedule_service.today_schedule()

    assert len(listing) == 1
    assert listing[0]["class_code"] == "SCI102"
    assert listing[0]["professor_name"] == "Prof. Garcia"
    assert listing[0]["start_time"] == "13:00"
    assert listing[0]["days"] == ["Tue", "Thu"]
    assert listing[0]["makeup"] is True


def test_today_schedule_empty_outside_semester(container):
    assert container.schedule_service.today_schedule(now=datetime(2026, 7, 13, 9, 0)) == []
