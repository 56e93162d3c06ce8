from types import SimpleNamespace

from hr_payroll.core.constants import DEFAULT_TAX_SLABS
from hr_payroll.core.policy import HrPolicy


def test_defaults_when_settings_are_empty():
    policy = HrPolicy.from_settings(SimpleNamespace())

    assert policy.attendance.expected_check_in == "09:00"
    assert policy.attendance.full_day_hours == 8.0
    assert policy.leave.allotments["annual"] == 25
    assert policy.payroll.tax_slabs == DEFAULT_TAX_SLABS
    assert policy.payroll.raise_on_zero_working_days is False


def test_overrides_from_settings():
    settings = SimpleNamespace(
        EXPECTED_CHECK_IN="08:30",
        HALF_DAY_HOURS=3.5,
        WEEKEND_DAYS="4,5",
        OVERTIME_RATE="250",
        LEAVE_ALLOTMENTS={"annual": 20},
        RAISE_ON_ZERO_WORKING_DAYS=True,
    )

    policy = HrPolicy.from_settings(settings)

    assert policy.attendance.expected_check_in == "08:30"
    assert policy.attendance.half_day_hours == 3.5
    assert policy.leave.weekend_days == (4, 5)
    assert policy.payroll.weekend_days == (4, 5)
    assert policy.payroll.overtime_rate == 250.0
    assert policy.leave.allotments == {"annual": 20}
    assert policy.payroll.raise_on_zero_working_days is True
