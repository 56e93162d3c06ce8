from __future__ import annotations

from dataclasses import fields, replace
from decimal import ROUND_HALF_UP, Decimal

from .model import Allowances, Deductions, PayrollRecord

_CENT = Decimal("0.01")


def _to_cents(value: float) -> Decimal:
    return Decimal(str(value or 0)).quantize(_CENT, rounding=ROUND_HALF_UP)


def money(value: float) -> float:
    """Round an amount to cents, half up, the way a DECIMAL(12,2) column stores it."""
    return float(_to_cents(value))


def finalize_totals(record: PayrollRecord) -> PayrollRecord:
    """Round every component to cents, then derive the four totals from the rounded values.

    Totals are summed in Decimal so that gross = basic + allowances and
    net = gross - deductions hold exactly on the stored columns.
    """
    basic = _to_cents(record.basic_salary)
    allowances = {f.name: _to_cents(getattr(record.allowances, f.name)) for f in fields(Allowances)}
    deductions = {f.name: _to_cents(getattr(record.deductions, f.name)) for f in fields(Deductions)}

    total_allowances = sum(allowances.values(), Decimal("0"))
    gross = basic + total_allowances
    total_deductions = sum(deductions.values(), Decimal("0"))

    return replace(
        record,
        basic_salary=float(basic),
        allowances=Allowances(**{k: float(v) for k, v in allowances.items()}),
        deductions=Deductions(**{k: float(v) for k, v in deductions.items()}),
        total_allowances=float(total_allowances),
        gross_salary=float(gross),
        total_deductions=float(total_deductions),
        net_salary=float(gross - total_deductions),
    )
