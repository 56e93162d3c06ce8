from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, Optional

from ..logging_config import get_logger
from .connection import DatabaseConnection, DBConfig

logger = get_logger("database.bootstrap")

REQUIRED_TABLES = ("employees", "attendance_records", "leave_requests", "payroll_records")

_DATABASE_DIRECTIVE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")


class SchemaError(RuntimeError):
    """The target database is missing tables the engine reads or writes."""


def split_statements(sql: str) -> Iterator[str]:
    """Yield each ';'-terminated statement of a schema file.

    Full-line ``--`` comments are dropped and semicolons inside quoted literals
    do not split. ``CREATE DATABASE`` and ``USE`` lines are removed so the file
    applies to whichever database the settings name.
    """
    body = "\n".join(ln for ln in sql.splitlines() if not ln.lstrip().startswith("--"))
    body = _DATABASE_DIRECTIVE.sub("", body)

    start = 0
    quote: Optional[str] = None
    i = 0
    while i < len(body):
        ch = body[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = body[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = body[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    factory = DatabaseConnection(DBConfig.from_dict(db_config))
    cfg = factory.config
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{cfg.database}` CHARACTER SET {cfg.charset}")
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every schema statement; returns the statement count."""
    ensure_database_exists(db_config)
    schema_path = Path(schema_path)
    statements = list(split_statements(schema_path.read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()

    logger.info("schema applied", extra={"statements": len(statements), "schema": schema_path.name})
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()


def missing_tables(existing) -> list[str]:
    present = {str(t).lower() for t in existing}
    return [t for t in REQUIRED_TABLES if t not in present]


def verify_schema(db_config: dict) -> list[str]:
    """Raise SchemaError unless every table the engine uses exists."""
    tables = list_tables(db_config)
    missing = missing_tables(tables)
    if missing:
        raise SchemaError(f"Missing tables: {', '.join(missing)}")
    return tables
