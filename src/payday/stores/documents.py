"""Resolution of legacy employee document fields."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from payday.calculators.types import EmployeeSnapshot

UNKNOWN_NAME = "Unknown"


def resolve_name(
    personal_full_name: str | None = None,
    full_name: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
) -> str:
    """Pick the display name from whichever legacy field is filled in."""
    if personal_full_name:
        return personal_full_name
    if full_name:
        return full_name
    joined = f"{first_name or ''} {last_name or ''}".strip()
    return joined or UNKNOWN_NAME


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored numeric field; empty values become zero."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def snapshot_from_document(employee_id: str, doc: dict[str, Any]) -> EmployeeSnapshot:
    """Build an employee snapshot from a directory document.

    Document shape (all keys optional):
        personal_info: {full_name}
        fullName / firstName / lastName
        salary_info: {monthly_salary, cash_salary, lastPaymentDate,
                      lastPaymentMonth, lastBankPayment}
        salary / cashSalary (legacy)
        employment_info: {position, role}
        status
    """
    personal = doc.get("personal_info") or {}
    salary_info = doc.get("salary_info") or {}
    employment = doc.get("employment_info") or {}

    last_date = salary_info.get("lastPaymentDate")
    if isinstance(last_date, str):
        last_date = date.fromisoformat(last_date)

    last_bank = salary_info.get("lastBankPayment")

    return EmployeeSnapshot(
        employee_id=employee_id,
        name=resolve_name(
            personal.get("full_name"),
            doc.get("fullName"),
            doc.get("firstName"),
            doc.get("lastName"),
        ),
        bank_salary=to_decimal(salary_info.get("monthly_salary") or doc.get("salary")),
        cash_salary=to_decimal(salary_info.get("cash_salary") or doc.get("cashSalary")),
        status=doc.get("status") or "active",
        position=employment.get("position") or employment.get("role") or "",
        last_payment_date=last_date,
        last_payment_month=salary_info.get("lastPaymentMonth"),
        last_bank_payment=to_decimal(last_bank) if last_bank is not None else None,
    )
