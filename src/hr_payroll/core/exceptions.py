from __future__ import annotations

from datetime import date
from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateRange(ValidationError):
    """Raised when a date range ends before it starts."""

    def __init__(self, start: date, end: date):
        super().__init__(f"End date {end.isoformat()} is before start date {start.isoformat()}")
        self.start = start
        self.end = end


class InvalidPunchSequence(ValidationError):
    """Raised when a check-out is recorded before the check-in."""


class LeaveConflict(ValidationError):
    """Raised when a leave request overlaps pending or approved leave."""

    def __init__(self, conflicts: Sequence):
        super().__init__("Leave request conflicts with existing leave")
        self.conflicts = list(conflicts)


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class EmployeeNotFound(NotFoundError):
    def __init__(self, employee_id: int):
        super().__init__(f"Employee {employee_id} not found")
        self.employee_id = employee_id


class DivisionDegenerate(DomainError):
    """Raised when a pro-ration denominator is zero and policy forbids the zero factor."""


class ComputationError(DomainError):
    """Wraps an unexpected failure while computing one employee's payroll."""


class AuthorizationError(DomainError):
    """Raised when the caller may not act on the record."""
