"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code. Every value
below is a policy default and can be overridden from the settings module.
"""

DEFAULT_EXPECTED_CHECK_IN = "09:00"
DEFAULT_EXPECTED_CHECK_OUT = "18:00"
DEFAULT_FULL_DAY_HOURS = 8.0
DEFAULT_HALF_DAY_HOURS = 4.0

# Saturday and Sunday (date.weekday() numbering).
DEFAULT_WEEKEND_DAYS = (5, 6)

DEFAULT_LEAVE_ALLOTMENTS = {
    "annual": 25,
    "sick": 12,
    "personal": 5,
    "maternity": 90,
    "paternity": 15,
    "emergency": 3,
}
DEFAULT_PAID_LEAVE_TYPES = ("annual", "sick", "personal")
MAX_LEAVE_REASON_LENGTH = 500

DEFAULT_HRA_RATE = 0.40
DEFAULT_DA_RATE = 0.10
DEFAULT_TRAVEL_ALLOWANCE = 2000.0
DEFAULT_MEDICAL_ALLOWANCE = 1500.0
DEFAULT_OVERTIME_RATE = 200.0
DEFAULT_PF_RATE = 0.12
DEFAULT_ESI_RATE = 0.0175

# (upper bound of annual income, marginal rate); None means unbounded.
DEFAULT_TAX_SLABS = (
    (250_000.0, 0.00),
    (500_000.0, 0.05),
    (1_000_000.0, 0.20),
    (None, 0.30),
)

DEFAULT_HISTORY_LIMIT = 200
