import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll"),
}

DEBUG = True

# If enabled, the app applies database/schema.sql on startup (CREATE TABLE IF NOT EXISTS).
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

# Working-day rules
EXPECTED_CHECK_IN = os.getenv("EXPECTED_CHECK_IN", "09:00")
EXPECTED_CHECK_OUT = os.getenv("EXPECTED_CHECK_OUT", "18:00")
WEEKEND_DAYS = os.getenv("WEEKEND_DAYS", "5,6")
