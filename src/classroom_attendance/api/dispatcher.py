"""Action dispatcher for the JSON client surface.

Every action returns an envelope ``{"ok": bool, ...}``; domain failures
and unexpected errors are converted here and never reach the transport.
"""
from __future__ import annotations

import time as _time
from datetime import date
from typing import Any, Callable, Mapping, Optional

from ..attendance.overrides import require_self_or_staff, require_staff
from ..common.datetime_utils import format_hhmmss, parse_iso_date
from ..common.log import get_logger
from ..container import Container
from ..core.enums import AttendanceStatus, ClassOverride, EnrollmentAdjustment
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..users.model import Identity

logger = get_logger("api")

Envelope = dict
Handler = Callable[[Mapping[str, Any], Optional[Identity]], Envelope]

_STARTED_AT = _time.monotonic()


def ok(**data: Any) -> Envelope:
    return {"ok": True, **data}


def fail(error: str) -> Envelope:
    return {"ok": False, "error": error}


def _required(payload: Mapping[str, Any], name: str) -> str:
    value = payload.get(name)
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} is required")
    return str(value).strip()


def _optional_date(payload: Mapping[str, Any], name: str = "class_date") -> Optional[date]:
    value = payload.get(name)
    if value in (None, ""):
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


def _required_date(payload: Mapping[str, Any], name: str = "class_date") -> date:
    value = _optional_date(payload, name)
    if value is None:
        raise ValidationError(f"{name} is required")
    return value


def _signed_in(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise AuthorizationError("Please sign in first.")
    return identity


def _record_dict(rec) -> dict:
    return {
        "class_date": rec.class_date.isoformat(),
        "class_code": rec.class_code,
        "student_id": rec.student_id,
        "status": rec.status.value,
        "time_in": format_hhmmss(rec.time_in) if rec.time_in else None,
        "time_out": format_hhmmss(rec.time_out) if rec.time_out else None,
        "synthetic": rec.synthetic,
        "reason": rec.reason,
    }


class ActionDispatcher:
    def __init__(self, container: Container):
        self._c = container
        self._handlers: dict[str, Handler] = {
            "today_schedule": self._today_schedule,
            "checkin": self._checkin,
            "checkout": self._checkout,
            "get_attendance": self._get_attendance,
            "submit_excuse": self._submit_excuse,
            "declare_override": self._declare_override,
            "authorize_makeup": self._authorize_makeup,
            "credit_attendance": self._credit_attendance,
            "drop_attendance": self._drop_attendance,
            "check_holiday": self._check_holiday,
            "getConfig": self._get_config,
            "prof_dashboard": self._prof_dashboard,
            "prof_summary": self._prof_summary,
            "health_check": self._health_check,
        }

    @property
    def actions(self) -> list[str]:
        return sorted(self._handlers)

    def dispatch(self, action: Optional[str], payload: Mapping[str, Any], identity: Optional[Identity]) -> tuple[Envelope, int]:
        handler = self._handlers.get(action or "")
        if handler is None:
            return fail(f"Action {action} not implemented"), 400

        try:
            return handler(payload, identity), 200
        except AuthorizationError as e:
            return fail(str(e)), 403
        except DomainError as e:
            return fail(str(e)), 200
        except Exception as e:
            logger.exception("action %s failed", action)
            return fail(f"Server error: {e}"), 500

    # --- student surface ---

    def _today_schedule(self, payload, identity) -> Envelope:
        return ok(schedule=self._c.schedule_service.today_schedule())

    def _checkin(self, payload, identity) -> Envelope:
        actor = _signed_in(identity)
        student_id = _required(payload, "student_id")
        require_self_or_staff(actor, student_id)

        result = self._c.attendance_service.check_in(_required(payload, "class_code"), student_id)
        out = ok(status=result.status.value, timestamp=format_hhmmss(result.timestamp) if result.timestamp else None)
        if result.already_recorded:
            out["message"] = "Already checked in"
        return out

    def _checkout(self, payload, identity) -> Envelope:
        actor = _signed_in(identity)
        student_id = _required(payload, "student_id")
        require_self_or_staff(actor, student_id)

        result = self._c.attendance_service.check_out(_required(payload, "class_code"), student_id)
        return ok(status=result.status.value, time_out=format_hhmmss(result.time_out))

    def _get_attendance(self, payload, identity) -> Envelope:
        actor = _signed_in(identity)
        student_id = _required(payload, "student_id")
        require_self_or_staff(actor, student_id)

        rec = self._c.attendance_service.get_record(
            _required(payload, "class_code"), student_id, class_date=_optional_date(payload)
        )
        return ok(record=_record_dict(rec) if rec else {"status": AttendanceStatus.NOT_RECORDED.value})

    def _submit_excuse(self, payload, identity) -> Envelope:
        actor = _signed_in(identity)
        student_id = _required(payload, "student_id")
        require_self_or_staff(actor, student_id)

        rec = self._c.attendance_service.file_excuse(
            _required(payload, "class_code"),
            student_id,
            str(payload.get("reason") or ""),
            class_date=_optional_date(payload),
        )
        return ok(message="Excuse filed successfully.", record=_record_dict(rec))

    def _adjust(self, payload, identity, kind: EnrollmentAdjustment) -> Envelope:
        actor = _signed_in(identity)
        dates = self._c.override_service.apply_enrollment_adjustment(
            actor=actor,
            class_code=_required(payload, "class_code"),
            student_id=_required(payload, "student_id"),
            kind=kind,
        )
        verb = "credited" if kind is EnrollmentAdjustment.CREDITED else "dropped"
        return ok(message=f"Attendance {verb} successfully.", dates=[d.isoformat() for d in dates])

    def _credit_attendance(self, payload, identity) -> Envelope:
        return self._adjust(payload, identity, EnrollmentAdjustment.CREDITED)

    def _drop_attendance(self, payload, identity) -> Envelope:
        return self._adjust(payload, identity, EnrollmentAdjustment.DROPPED)

    # --- staff surface ---

    def _declare_override(self, payload, identity) -> Envelope:
        actor = _signed_in(identity)
        raw = _required(payload, "status").upper()
        try:
            override = ClassOverride(raw)
        except ValueError:
            raise ValidationError(f"Unsupported class status: {raw}")

        affected = self._c.override_service.declare_class_override(
            actor=actor,
            class_code=_required(payload, "class_code"),
            class_date=_required_date(payload),
            override=override,
            reason=payload.get("reason"),
        )
        return ok(affected=affected, message=f"Class marked {override.value}.")

    def _authorize_makeup(self, payload, identity) -> Envelope:
        actor = _signed_in(identity)
        inserted = self._c.override_service.authorize_makeup(
            actor=actor,
            class_code=_required(payload, "class_code"),
            class_date=_required_date(payload),
        )
        return ok(pending_inserted=inserted, message="Make-up session authorized.")

    def _prof_dashboard(self, payload, identity) -> Envelope:
        require_staff(_signed_in(identity))
        data = self._c.report_service.class_dashboard(_required(payload, "class_code"), class_date=_optional_date(payload))
        return ok(
            class_date=data.class_date.isoformat(),
            holiday=data.holiday,
            stats=[{"attendance_status": k, "count": v} for k, v in sorted(data.stats.items())],
            roster=data.roster,
        )

    def _prof_summary(self, payload, identity) -> Envelope:
        require_staff(_signed_in(identity))
        return ok(summary=self._c.report_service.class_summary(_required(payload, "class_code")))

    # --- public ---

    def _check_holiday(self, payload, identity) -> Envelope:
        today = self._c.calendar.snapshot().today
        holiday = self._c.repos.holidays.get_for_date(today)
        if holiday:
            return ok(isHoliday=True, holidayName=holiday.name, holidayType=holiday.holiday_type)
        return ok(isHoliday=False)

    def _get_config(self, payload, identity) -> Envelope:
        return ok(config=self._c.calendar.describe())

    def _health_check(self, payload, identity) -> Envelope:
        try:
            db_time = self._c.repos.health.server_time()
        except Exception as e:
            logger.exception("health check failed")
            return {"ok": False, "status": "Database Connection Error", "error": str(e)}
        return ok(
            status="Healthy",
            db_time=db_time.isoformat() if db_time else None,
            uptime=f"{_time.monotonic() - _STARTED_AT:.2f} seconds",
        )
