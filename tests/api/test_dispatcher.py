from datetime import date, datetime

import pytest

from classroom_attendance.api.dispatcher import ActionDispatcher
from classroom_attendance.core.enums import AttendanceStatus, Role
from classroom_attendance.users.model import Identity


@pytest.fixture
def dispatcher(container):
    return ActionDispatcher(container)


def test_unknown_action(dispatcher, student):
    envelope, status = dispatcher.dispatch("teleport", {}, student)

    assert status == 400
    assert envelope == {"ok": False, "error": "Action teleport not implemented"}


def test_checkin_envelope(dispatcher, student):
    envelope, status = dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S1"}, student)

    assert status == 200
    assert envelope == {"ok": True, "status": "PRESENT", "timestamp": "09:00:00"}


def test_repeated_checkin_reports_existing(dispatcher, student, clock_state):
    dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S1"}, student)
    clock_state["now"] = datetime(2026, 3, 2, 9, 8)

    envelope, _ = dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S1"}, student)

    assert envelope["status"] == "PRESENT"
    assert envelope["message"] == "Already checked in"


def test_closed_window_is_a_domain_failure(dispatcher, student, clock_state):
    clock_state["now"] = datetime(2026, 3, 2, 9, 30)

    envelope, status = dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S1"}, student)

    assert status == 200
    assert envelope == {"ok": False, "error": "Check-in closed (Absent)"}


def test_missing_field(dispatcher, student):
    envelope, status = dispatcher.dispatch("checkin", {"student_id": "S1"}, student)

    assert status == 200
    assert envelope == {"ok": False, "error": "class_code is required"}


def test_signed_out_caller_is_refused(dispatcher):
    envelope, status = dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S1"}, None)

    assert status == 403
    assert envelope["ok"] is False


def test_student_cannot_check_in_someone_else(dispatcher, student, ledger):
    envelope, status = dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S2"}, student)

    assert status == 403
    assert ledger.rows == {}


def test_unexpected_error_becomes_server_error(dispatcher, container, student, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(container.attendance_service, "check_in", boom)

    envelope, status = dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S1"}, student)

    assert status == 500
    assert envelope == {"ok": False, "error": "Server error: disk on fire"}


def test_checkout_and_get_attendance(dispatcher, student, clock_state):
    envelope, _ = dispatcher.dispatch("get_attendance", {"class_code": "MATH101", "student_id": "S1"}, student)
    assert envelope == {"ok": True, "record": {"status": "NOT_RECORDED"}}

    dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S1"}, student)
    clock_state["now"] = datetime(2026, 3, 2, 10, 31)
    envelope, _ = dispatcher.dispatch("checkout", {"class_code": "MATH101", "student_id": "S1"}, student)
    assert envelope == {"ok": True, "status": "PRESENT", "time_out": "10:31:00"}

    envelope, _ = dispatcher.dispatch(
        "get_attendance", {"class_code": "MATH101", "student_id": "S1", "class_date": "2026-03-02"}, student
    )
    assert envelope["record"]["time_in"] == "09:00:00"
    assert envelope["record"]["time_out"] == "10:31:00"
    assert envelope["record"]["synthetic"] is False


def test_bad_date_is_rejected(dispatcher, student):
    envelope, _ = dispatcher.dispatch(
        "get_attendance", {"class_code": "MATH101", "student_id": "S1", "class_date": "03/02/2026"}, student
    )

    assert envelope == {"ok": False, "error": "class_date must be a date (YYYY-MM-DD)"}


def test_submit_excuse(dispatcher, student, ledger):
    envelope, _ = dispatcher.dispatch(
        "submit_excuse",
        {"class_code": "MATH101", "student_id": "S1", "reason": "Fever", "class_date": "2026-03-04"},
        student,
    )

    assert envelope["ok"] is True
    assert envelope["record"]["status"] == "EXCUSED"
    assert ledger.get(date(2026, 3, 4), "MATH101", "S1").reason == "Fever"


def test_submit_excuse_short_reason(dispatcher, student):
    envelope, _ = dispatcher.dispatch("submit_excuse", {"class_code": "MATH101", "student_id": "S1", "reason": "no"}, student)

    assert envelope == {"ok": False, "error": "Please provide a valid reason (min 5 characters)."}


def test_declare_override_requires_staff(dispatcher, student, professor, ledger):
    payload = {"class_code": "MATH101", "class_date": "2026-03-04", "status": "suspended", "reason": "Typhoon"}

    _, status = dispatcher.dispatch("declare_override", payload, student)
    assert status == 403

    envelope, status = dispatcher.dispatch("declare_override", payload, professor)
    assert status == 200
    assert envelope["affected"] == 4
    assert ledger.get(date(2026, 3, 4), "MATH101", "S3").status == AttendanceStatus.SUSPENDED


def test_declare_override_accepts_non_text_reason(dispatcher, professor, ledger):
    payload = {"class_code": "MATH101", "class_date": "2026-03-04", "status": "CANCELLED", "reason": 404}

    envelope, status = dispatcher.dispatch("declare_override", payload, professor)

    assert status == 200
    assert envelope["ok"] is True
    assert ledger.get(date(2026, 3, 4), "MATH101", "S1").reason == "404"


def test_declare_override_unknown_status(dispatcher, professor):
    envelope, _ = dispatcher.dispatch(
        "declare_override", {"class_code": "MATH101", "class_date": "2026-03-04", "status": "HOLIDAY"}, professor
    )

    assert envelope == {"ok": False, "error": "Unsupported class status: HOLIDAY"}


def test_authorize_makeup_conflict(dispatcher, professor):
    dispatcher.dispatch("authorize_makeup", {"class_code": "SCI102", "class_date": "2026-03-07"}, professor)

    envelope, status = dispatcher.dispatch("authorize_makeup", {"class_code": "MATH101", "class_date": "2026-03-07"}, professor)

    assert status == 200
    assert envelope["ok"] is False
    assert "already has another class" in envelope["error"]


def test_credit_and_drop(dispatcher, student, clock_state):
    envelope, _ = dispatcher.dispatch("credit_attendance", {"class_code": "MATH101", "student_id": "S1"}, student)
    assert envelope["ok"] is True
    assert envelope["dates"][0] == "2026-03-02"

    clock_state["now"] = datetime(2026, 6, 16, 8, 0)
    envelope, _ = dispatcher.dispatch("credit_attendance", {"class_code": "MATH101", "student_id": "S1"}, student)
    assert envelope == {"ok": False, "error": "Adjustment period for Sem 2 has ended."}

    envelope, _ = dispatcher.dispatch("drop_attendance", {"class_code": "MATH101", "student_id": "S1"}, student)
    assert envelope["dates"] == ["2026-06-17"]


def test_check_holiday(dispatcher, clock_state):
    envelope, _ = dispatcher.dispatch("check_holiday", {}, None)
    assert envelope == {"ok": True, "isHoliday": False}

    clock_state["now"] = datetime(2026, 4, 9, 7, 0)
    envelope, _ = dispatcher.dispatch("check_holiday", {}, None)
    assert envelope == {
        "ok": True,
        "isHoliday": True,
        "holidayName": "Araw ng Kagitingan",
        "holidayType": "Regular Holiday",
    }


def test_get_config(dispatcher):
    envelope, _ = dispatcher.dispatch("getConfig", {}, None)

    assert envelope["config"]["current_sem"] == "2"
    assert envelope["config"]["adjustment_end"] == "2026-03-06"
    assert envelope["config"]["late_window_minutes"] == 5


def test_today_schedule(dispatcher):
    envelope, _ = dispatcher.dispatch("today_schedule", {}, None)

    assert [c["class_code"] for c in envelope["schedule"]] == ["MATH101"]
    assert envelope["schedule"][0]["professor_name"] == "Prof. Garcia"


def test_prof_dashboard_and_summary(dispatcher, student, professor):
    dispatcher.dispatch("checkin", {"class_code": "MATH101", "student_id": "S1"}, student)

    _, status = dispatcher.dispatch("prof_dashboard", {"class_code": "MATH101"}, student)
    assert status == 403

    envelope, _ = dispatcher.dispatch("prof_dashboard", {"class_code": "MATH101"}, professor)
    assert envelope["class_date"] == "2026-03-02"
    assert {"attendance_status": "PRESENT", "count": 1} in envelope["stats"]
    assert envelope["roster"][0]["user_id"] == "S1"

    envelope, _ = dispatcher.dispatch("prof_summary", {"class_code": "MATH101"}, Identity("A1", Role.ADMIN))
    assert envelope["ok"] is True
    assert len(envelope["summary"]) == 4


def test_health_check(dispatcher):
    envelope, status = dispatcher.dispatch("health_check", {}, None)

    assert status == 200
    assert envelope["status"] == "Healthy"
    assert envelope["db_time"] == "2026-03-02T09:00:00"


def test_health_check_reports_db_error(dispatcher, container):
    container.repos.health.error = ConnectionError("Can't connect to MySQL server")

    envelope, status = dispatcher.dispatch("health_check", {}, None)

    assert status == 200
    assert envelope["ok"] is False
    assert envelope["status"] == "Database Connection Error"
