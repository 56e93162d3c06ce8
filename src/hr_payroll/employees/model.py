from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Employee master data the engine reads (salary, join date, active flag).

    Profile fields beyond these belong to the employee directory, not here.
    """

    employee_id: int
    full_name: str
    monthly_salary: float
    join_date: Optional[date] = None
    is_active: bool = True
