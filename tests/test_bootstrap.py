from pathlib import Path

from hr_payroll.database.bootstrap import REQUIRED_TABLES, missing_tables, split_statements
from hr_payroll.database.connection import DBConfig

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_split_ignores_semicolons_inside_quotes_and_comment_lines():
    sql = """
    -- setup; ignored
    CREATE DATABASE IF NOT EXISTS other;
    USE other;
    INSERT INTO t(note) VALUES ('a;b');
    INSERT INTO t(note) VALUES ("it\\"s; fine")
    """

    stmts = list(split_statements(sql))

    assert stmts == [
        "INSERT INTO t(note) VALUES ('a;b')",
        'INSERT INTO t(note) VALUES ("it\\"s; fine")',
    ]


def test_shipped_schema_creates_every_required_table():
    stmts = list(split_statements(SCHEMA.read_text(encoding="utf-8")))

    assert len(stmts) == len(REQUIRED_TABLES)
    for table in REQUIRED_TABLES:
        assert any(f"CREATE TABLE IF NOT EXISTS {table}" in s for s in stmts)


def test_missing_tables_is_case_insensitive():
    assert missing_tables(["EMPLOYEES", "attendance_records"]) == ["leave_requests", "payroll_records"]
    assert missing_tables(REQUIRED_TABLES) == []


def test_db_config_fills_defaults_and_hides_password():
    cfg = DBConfig.from_dict({"host": "db", "password": "secret", "database": "hr_payroll_test"})

    assert cfg.port == 3306
    assert cfg.charset == "utf8mb4"
    assert cfg.dsn == "root@db:3306/hr_payroll_test"
    assert "secret" not in cfg.dsn
