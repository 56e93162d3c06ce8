from __future__ import annotations

from ...core.enums import AttendanceStatus
from ...core.policy import AttendancePolicy
from ..model import AttendanceRecord
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """No check-in recorded for the day."""

    def decide(self, record: AttendanceRecord, *, policy: AttendancePolicy) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)
