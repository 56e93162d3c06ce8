from __future__ import annotations

from dataclasses import dataclass

from .model import AttendanceRecord
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.clocked_in_strategy import ClockedInStrategy
from .strategies.completed_day_strategy import CompletedDayStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the strategy for the punches a record has."""

    def for_record(self, record: AttendanceRecord) -> AttendanceStrategy:
        if record.check_in_time is None:
            return AbsentStrategy()
        if record.check_out_time is None:
            return ClockedInStrategy()
        return CompletedDayStrategy()
