import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

EXPECTED_CHECK_IN = os.getenv("EXPECTED_CHECK_IN", "09:00")
EXPECTED_CHECK_OUT = os.getenv("EXPECTED_CHECK_OUT", "18:00")
WEEKEND_DAYS = os.getenv("WEEKEND_DAYS", "5,6")
OVERTIME_RATE = float(os.getenv("OVERTIME_RATE", "200"))

# Fail loudly instead of paying nothing for a month without working days.
RAISE_ON_ZERO_WORKING_DAYS = bool(int(os.getenv("RAISE_ON_ZERO_WORKING_DAYS", "1")))
