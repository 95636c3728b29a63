import pytest

from classroom_attendance.attendance.precedence import counts_as_present, effective_status, may_overwrite, rank
from classroom_attendance.core.enums import AttendanceStatus as S


def test_rank_order():
    assert rank(S.SUSPENDED) > rank(S.HOLIDAY) > rank(S.PENDING) > rank(S.EXCUSED) > rank(S.CREDITED) > rank(S.PRESENT)
    assert rank(S.CANCELLED) == rank(S.ASYNCHRONOUS) == rank(S.SUSPENDED)
    assert rank(S.DROPPED) == rank(S.CREDITED)
    assert rank(None) == rank(S.NOT_RECORDED) == 0


@pytest.mark.parametrize("incoming", list(S))
def test_anything_may_fill_an_empty_slot(incoming):
    assert may_overwrite(None, incoming)
    assert may_overwrite(S.NOT_RECORDED, incoming)


@pytest.mark.parametrize(
    "existing,incoming",
    [
        (S.SUSPENDED, S.PRESENT),
        (S.HOLIDAY, S.ABSENT),
        (S.HOLIDAY, S.CREDITED),
        (S.EXCUSED, S.DROPPED),
        (S.CANCELLED, S.HOLIDAY),
        (S.PENDING, S.LATE),
    ],
)
def test_lower_rank_never_replaces_higher(existing, incoming):
    assert not may_overwrite(existing, incoming)


def test_attended_checkin_supersedes_pending_only():
    assert may_overwrite(S.PENDING, S.LATE, attended=True)
    assert not may_overwrite(S.EXCUSED, S.PRESENT, attended=True)


def test_same_tier_may_replace():
    assert may_overwrite(S.CREDITED, S.DROPPED)
    assert may_overwrite(S.SUSPENDED, S.ASYNCHRONOUS)
    assert may_overwrite(S.PRESENT, S.CREDITED)


def test_effective_status_under_holiday():
    assert effective_status(None, holiday=True) is S.HOLIDAY
    assert effective_status(S.ABSENT, holiday=True) is S.HOLIDAY
    assert effective_status(S.SUSPENDED, holiday=True) is S.SUSPENDED
    assert effective_status(None) is S.NOT_RECORDED
    assert effective_status(S.LATE) is S.LATE


def test_counts_as_present():
    assert counts_as_present(S.PRESENT)
    assert counts_as_present(S.LATE)
    assert counts_as_present(S.CREDITED)
    assert not counts_as_present(S.INCOMPLETE)
    assert not counts_as_present(S.EXCUSED)
