"""Business-rule policy passed into the evaluators and calculators.

Thresholds, allotments and rates used to be embedded in the records themselves;
here they are one frozen bundle built from the settings module, with the
observed values as defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple

from . import constants

TaxSlab = Tuple[Optional[float], float]


@dataclass(frozen=True)
class AttendancePolicy:
    expected_check_in: str = constants.DEFAULT_EXPECTED_CHECK_IN
    expected_check_out: str = constants.DEFAULT_EXPECTED_CHECK_OUT
    full_day_hours: float = constants.DEFAULT_FULL_DAY_HOURS
    half_day_hours: float = constants.DEFAULT_HALF_DAY_HOURS


@dataclass(frozen=True)
class LeavePolicy:
    allotments: Mapping[str, float] = field(default_factory=lambda: dict(constants.DEFAULT_LEAVE_ALLOTMENTS))
    weekend_days: Tuple[int, ...] = constants.DEFAULT_WEEKEND_DAYS
    max_reason_length: int = constants.MAX_LEAVE_REASON_LENGTH


@dataclass(frozen=True)
class PayrollPolicy:
    weekend_days: Tuple[int, ...] = constants.DEFAULT_WEEKEND_DAYS
    paid_leave_types: Tuple[str, ...] = constants.DEFAULT_PAID_LEAVE_TYPES
    hra_rate: float = constants.DEFAULT_HRA_RATE
    da_rate: float = constants.DEFAULT_DA_RATE
    travel_allowance: float = constants.DEFAULT_TRAVEL_ALLOWANCE
    medical_allowance: float = constants.DEFAULT_MEDICAL_ALLOWANCE
    overtime_rate: float = constants.DEFAULT_OVERTIME_RATE
    pf_rate: float = constants.DEFAULT_PF_RATE
    esi_rate: float = constants.DEFAULT_ESI_RATE
    tax_slabs: Tuple[TaxSlab, ...] = constants.DEFAULT_TAX_SLABS
    # False: a month without working days pro-rates salary by 0.
    raise_on_zero_working_days: bool = False


@dataclass(frozen=True)
class HrPolicy:
    attendance: AttendancePolicy = field(default_factory=AttendancePolicy)
    leave: LeavePolicy = field(default_factory=LeavePolicy)
    payroll: PayrollPolicy = field(default_factory=PayrollPolicy)

    @classmethod
    def from_settings(cls, settings: Any) -> "HrPolicy":
        """Build the policy from a settings module; missing names keep defaults."""

        def opt(name: str, default):
            return getattr(settings, name, default)

        weekend = _as_int_tuple(opt("WEEKEND_DAYS", constants.DEFAULT_WEEKEND_DAYS))

        attendance = AttendancePolicy(
            expected_check_in=str(opt("EXPECTED_CHECK_IN", constants.DEFAULT_EXPECTED_CHECK_IN)),
            expected_check_out=str(opt("EXPECTED_CHECK_OUT", constants.DEFAULT_EXPECTED_CHECK_OUT)),
            full_day_hours=float(opt("FULL_DAY_HOURS", constants.DEFAULT_FULL_DAY_HOURS)),
            half_day_hours=float(opt("HALF_DAY_HOURS", constants.DEFAULT_HALF_DAY_HOURS)),
        )
        leave = LeavePolicy(
            allotments=dict(opt("LEAVE_ALLOTMENTS", constants.DEFAULT_LEAVE_ALLOTMENTS)),
            weekend_days=weekend,
        )
        payroll = PayrollPolicy(
            weekend_days=weekend,
            hra_rate=float(opt("HRA_RATE", constants.DEFAULT_HRA_RATE)),
            da_rate=float(opt("DA_RATE", constants.DEFAULT_DA_RATE)),
            travel_allowance=float(opt("TRAVEL_ALLOWANCE", constants.DEFAULT_TRAVEL_ALLOWANCE)),
            medical_allowance=float(opt("MEDICAL_ALLOWANCE", constants.DEFAULT_MEDICAL_ALLOWANCE)),
            overtime_rate=float(opt("OVERTIME_RATE", constants.DEFAULT_OVERTIME_RATE)),
            pf_rate=float(opt("PF_RATE", constants.DEFAULT_PF_RATE)),
            esi_rate=float(opt("ESI_RATE", constants.DEFAULT_ESI_RATE)),
            tax_slabs=tuple(opt("TAX_SLABS", constants.DEFAULT_TAX_SLABS)),
            raise_on_zero_working_days=bool(opt("RAISE_ON_ZERO_WORKING_DAYS", False)),
        )
        return cls(attendance=attendance, leave=leave, payroll=payroll)


def _as_int_tuple(value: Sequence[int] | str) -> Tuple[int, ...]:
    if isinstance(value, str):
        return tuple(int(part) for part in value.split(",") if part.strip())
    return tuple(int(v) for v in value)
