from __future__ import annotations

from ...core.enums import AttendanceStatus
from ...core.policy import AttendancePolicy
from ..model import AttendanceRecord
from .base import AttendanceStrategy, StatusDecision, expected_window


class ClockedInStrategy(AttendanceStrategy):
    """Checked in, not yet checked out: interim status from arrival time only."""

    def decide(self, record: AttendanceRecord, *, policy: AttendancePolicy) -> StatusDecision:
        expected_in, _ = expected_window(record, policy)
        is_late = record.check_in_time > expected_in
        return StatusDecision(
            status=AttendanceStatus.LATE if is_late else AttendanceStatus.PRESENT,
            is_late_check_in=is_late,
        )
