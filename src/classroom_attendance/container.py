from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.overrides import OverrideService
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.constants import SWEEP_GRACE_MINUTES, SWEEP_INTERVAL_MINUTES
from .database.connection import DatabaseConnection, DBConfig
from .database.health import HealthProbe, MySQLHealthProbe
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .reports.service import ReportService
from .schedules.index import ScheduleIndex
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .semesters.mysql_config_repository import MySQLConfigRepository
from .semesters.repository import ConfigRepository
from .semesters.service import CalendarService
from .sweep.scheduler import SweepScheduler
from .sweep.service import ReconciliationSweep
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Repositories:
    users: UserRepository
    schedules: ScheduleRepository
    attendance: AttendanceRepository
    holidays: HolidayRepository
    config: ConfigRepository
    health: HealthProbe


@dataclass(frozen=True)
class Container:
    repos: Repositories
    clock: Callable[[], datetime]

    calendar: CalendarService
    schedule_index: ScheduleIndex
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    override_service: OverrideService
    report_service: ReportService
    sweep: ReconciliationSweep
    sweep_scheduler: SweepScheduler


def wire(
    repos: Repositories,
    *,
    clock: Callable[[], datetime] = now_local,
    sweep_interval_minutes: float = SWEEP_INTERVAL_MINUTES,
    sweep_grace_minutes: int = SWEEP_GRACE_MINUTES,
) -> Container:
    calendar = CalendarService(repos.config, clock=clock)
    index = ScheduleIndex(repos.schedules)

    schedule_service = ScheduleService(index, repos.users, calendar)
    attendance_service = AttendanceService(repos.attendance, index, calendar)
    override_service = OverrideService(repos.attendance, index, repos.users, calendar)
    report_service = ReportService(repos.attendance, repos.users, repos.holidays, index, calendar)
    sweep = ReconciliationSweep(calendar, index, repos.holidays, override_service, grace_minutes=sweep_grace_minutes)
    sweep_scheduler = SweepScheduler(sweep, interval_minutes=sweep_interval_minutes, clock=clock)

    return Container(
        repos=repos,
        clock=clock,
        calendar=calendar,
        schedule_index=index,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
        override_service=override_service,
        report_service=report_service,
        sweep=sweep,
        sweep_scheduler=sweep_scheduler,
    )


def build_container(
    *,
    db_config: dict,
    clock: Callable[[], datetime] = now_local,
    sweep_interval_minutes: float = SWEEP_INTERVAL_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    repos = Repositories(
        users=MySQLUserRepository(conn),
        schedules=MySQLScheduleRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        holidays=MySQLHolidayRepository(conn),
        config=MySQLConfigRepository(conn),
        health=MySQLHealthProbe(conn),
    )
    return wire(repos, clock=clock, sweep_interval_minutes=sweep_interval_minutes)
