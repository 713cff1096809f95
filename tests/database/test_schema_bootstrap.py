import re
from pathlib import Path

from src.library_attendance.library_attendance.database.bootstrap import (
    _iter_sql_statements,
    _strip_create_db_and_use,
)

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_schema_splits_into_create_table_statements():
    sql = _strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))
    statements = list(_iter_sql_statements(sql))

    tables = [re.search(r"CREATE TABLE IF NOT EXISTS (\w+)", s).group(1) for s in statements]
    assert tables == ["users", "students", "staff", "qr_sessions", "attendance_records", "salary_records"]


def test_attendance_uniqueness_is_declared():
    sql = SCHEMA.read_text(encoding="utf-8")

    assert "UNIQUE KEY uq_attendance_user_day (user_id, role, work_date)" in sql
    assert "UNIQUE KEY uq_attendance_student_day (student_id, work_date)" in sql
    assert "UNIQUE KEY uq_salary_staff_month (staff_id, month)" in sql


def test_splitter_keeps_semicolons_inside_quotes():
    sql = "-- comment;\nINSERT INTO t VALUES ('a;b');\nSELECT 1"
    assert list(_iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]
