"""Pure semester/calendar resolution.

Semesters are configured as ``sem<N>_start``, ``sem<N>_end`` and
``sem<N>_adjustment_end`` keys. The resolver never touches the store; the
caller passes the config mapping it already loaded.
"""
from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..core.constants import ACADEMIC_YEAR_START_MONTH
from .model import AttendanceWindows, SemesterConfig

SEMESTER_LABELS = {
    "1": "First Semester",
    "2": "Second Semester",
}


def academic_year_label(now: datetime) -> str:
    year = now.year
    if now.month >= ACADEMIC_YEAR_START_MONTH:
        return f"{year}-{year + 1}"
    return f"{year - 1}-{year}"


def _configured_semester_ids(values: Mapping[str, str]) -> list[str]:
    ids = []
    for key in values:
        if key.startswith("sem") and key.endswith("_start") and "adjustment" not in key:
            ids.append(key[len("sem") : -len("_start")])
    return sorted(ids)


def resolve_semester(now: datetime, values: Mapping[str, str]) -> Optional[SemesterConfig]:
    """Return the semester whose [start, end] contains ``now``, or None.

    Semesters with missing or malformed boundary dates are skipped.
    """
    today = now.date()
    label_year = academic_year_label(now)

    for sem_id in _configured_semester_ids(values):
        try:
            start = parse_iso_date(values[f"sem{sem_id}_start"])
            end = parse_iso_date(values[f"sem{sem_id}_end"])
        except (KeyError, ValueError):
            continue

        if not (start <= today <= end):
            continue

        try:
            adjustment_end = parse_iso_date(values[f"sem{sem_id}_adjustment_end"])
        except (KeyError, ValueError):
            # Without a configured cutoff, the adjustment period never opens.
            adjustment_end = start

        return SemesterConfig(
            semester_id=sem_id,
            start=start,
            end=end,
            adjustment_end=adjustment_end,
            label=SEMESTER_LABELS.get(sem_id, f"Semester {sem_id}"),
            academic_year=label_year,
        )

    return None


def _int_or_default(values: Mapping[str, str], key: str, default: int) -> int:
    try:
        parsed = int(str(values.get(key, "")).strip())
    except ValueError:
        return default
    # A zero-width window falls back to the default like any unset value.
    return parsed if parsed > 0 else default


def load_windows(values: Mapping[str, str]) -> AttendanceWindows:
    defaults = AttendanceWindows()
    return AttendanceWindows(
        checkin_minutes=_int_or_default(values, "checkin_window_minutes", defaults.checkin_minutes),
        late_minutes=_int_or_default(values, "late_window_minutes", defaults.late_minutes),
        absent_minutes=_int_or_default(values, "absent_window_minutes", defaults.absent_minutes),
        checkout_minutes=_int_or_default(values, "checkout_window_minutes", defaults.checkout_minutes),
    )
