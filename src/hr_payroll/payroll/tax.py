from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..core.constants import DEFAULT_TAX_SLABS


def annual_income_tax(
    annual_income: float,
    slabs: Sequence[Tuple[Optional[float], float]] = DEFAULT_TAX_SLABS,
) -> float:
    """Progressive tax over ``(upper_bound, rate)`` slabs ordered by bound.

    Each slab taxes only the part of the income between the previous bound and
    its own; ``None`` as a bound closes the table.
    """
    tax = 0.0
    lower = 0.0
    for upper, rate in slabs:
        if annual_income <= lower:
            break
        top = annual_income if upper is None else min(annual_income, upper)
        tax += (top - lower) * rate
        if upper is None:
            break
        lower = upper
    return tax


def monthly_income_tax(
    annual_income: float,
    slabs: Sequence[Tuple[Optional[float], float]] = DEFAULT_TAX_SLABS,
) -> float:
    return annual_income_tax(annual_income, slabs) / 12
