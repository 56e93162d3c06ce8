from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from ...common.datetime_utils import at_time
from ...core.enums import AttendanceStatus
from ...core.policy import AttendancePolicy
from ..model import AttendanceRecord


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    is_late_check_in: bool = False
    is_early_check_out: bool = False
    total_hours: float = 0.0
    working_hours: float = 0.0
    overtime_hours: float = 0.0


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide(self, record: AttendanceRecord, *, policy: AttendancePolicy) -> StatusDecision:
        raise NotImplementedError


def expected_window(record: AttendanceRecord, policy: AttendancePolicy) -> Tuple[datetime, datetime]:
    """Expected check-in/check-out on the record's date; the record's own times win over policy."""
    return (
        at_time(record.work_date, record.expected_check_in or policy.expected_check_in),
        at_time(record.work_date, record.expected_check_out or policy.expected_check_out),
    )
