"""Create the configured database and apply database/schema.sql.

Usage: APP_ENV=development python scripts/init_db.py
"""

from __future__ import annotations

import sys
from pathlib import Path

from dotenv import load_dotenv

from config import load_settings

from hr_payroll.database.bootstrap import SchemaError, apply_schema, verify_schema
from hr_payroll.database.connection import DBConfig
from hr_payroll.logging_config import configure_logging, get_logger

logger = get_logger("scripts.init_db")

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def main() -> int:
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FORMAT", "text"))
    db_config = dict(settings.DB_CONFIG)

    count = apply_schema(db_config, schema_path=SCHEMA_PATH)
    try:
        tables = verify_schema(db_config)
    except SchemaError as exc:
        logger.error("schema incomplete", extra={"db": DBConfig.from_dict(db_config).dsn, "error": str(exc)})
        return 1

    logger.info(
        "database initialised",
        extra={"db": DBConfig.from_dict(db_config).dsn, "statements": count, "tables": len(tables)},
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
