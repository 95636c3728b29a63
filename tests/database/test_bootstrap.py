from datetime import date, datetime, time, timedelta
from pathlib import Path

import pytest

from classroom_attendance.database.bootstrap import (
    _strip_create_db_and_use,
    _strip_line_comments,
    iter_sql_statements,
)
from classroom_attendance.database.mysql_base import in_placeholders, normalize_mysql_date, normalize_mysql_time
from classroom_attendance.main import SCHEMA_PATH


def test_split_ignores_semicolons_in_literals():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_split_handles_escaped_quotes():
    sql = r"INSERT INTO holidays VALUES ('People\'s Day; observed');"

    assert list(iter_sql_statements(sql)) == [r"INSERT INTO holidays VALUES ('People\'s Day; observed')"]


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS foo;\nUSE foo;\n-- comment\nCREATE TABLE t (id INT);"

    cleaned = _strip_line_comments(_strip_create_db_and_use(sql))

    assert list(iter_sql_statements(cleaned)) == ["CREATE TABLE t (id INT)"]


def test_schema_file_parses():
    sql = _strip_line_comments(_strip_create_db_and_use(Path(SCHEMA_PATH).read_text(encoding="utf-8")))
    statements = list(iter_sql_statements(sql))

    creates = [s for s in statements if s.upper().startswith("CREATE TABLE")]
    assert len(creates) == 5
    assert any("attendance" in s and "is_synthetic" in s for s in creates)


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, None),
        (time(9, 5), time(9, 5)),
        (timedelta(hours=13, minutes=30, seconds=5), time(13, 30, 5)),
        ("08:30:00", time(8, 30)),
        ("08:30", time(8, 30)),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected


def test_normalize_mysql_time_rejects_garbage():
    with pytest.raises(ValueError):
        normalize_mysql_time("0830")
    with pytest.raises(TypeError):
        normalize_mysql_time(830)


def test_normalize_mysql_date():
    assert normalize_mysql_date(None) is None
    assert normalize_mysql_date(date(2026, 4, 9)) == date(2026, 4, 9)
    assert normalize_mysql_date(datetime(2026, 4, 9, 13, 0)) == date(2026, 4, 9)
    assert normalize_mysql_date("2026-04-09") == date(2026, 4, 9)


def test_in_placeholders():
    assert in_placeholders(["a", "b", "c"]) == "%s,%s,%s"
    with pytest.raises(ValueError):
        in_placeholders([])
