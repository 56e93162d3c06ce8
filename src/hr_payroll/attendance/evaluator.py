from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..core.policy import AttendancePolicy
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord

_DEFAULT_FACTORY = AttendanceStrategyFactory()


def evaluate_attendance(
    record: AttendanceRecord,
    policy: Optional[AttendancePolicy] = None,
    *,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceRecord:
    """Return ``record`` with status, flags and hours derived from its punches and breaks.

    Pure: the input record is not modified. Raises ``InvalidPunchSequence`` when
    the check-out precedes the check-in.
    """
    policy = policy or AttendancePolicy()
    strategy = (factory or _DEFAULT_FACTORY).for_record(record)
    decision = strategy.decide(record, policy=policy)
    return replace(
        record,
        status=decision.status,
        is_late_check_in=decision.is_late_check_in,
        is_early_check_out=decision.is_early_check_out,
        total_hours=decision.total_hours,
        working_hours=decision.working_hours,
        overtime_hours=decision.overtime_hours,
    )
