"""Monthly aggregation of employees, leave and payments into payable views."""

from __future__ import annotations

import unicodedata
from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from payday.calculators.types import (
    EmployeeSnapshot,
    LeaveEntry,
    PayableView,
    SalaryPayment,
)


def aggregate_payables(
    employees: Iterable[EmployeeSnapshot],
    leaves: Iterable[LeaveEntry],
    payments: Iterable[SalaryPayment],
    month: str,
) -> list[PayableView]:
    """Build the payable view for every active, bank-salaried employee.

    Pure projection: inputs are not modified and no state is kept, so it is
    safe to call again on every upstream change. Leaves and payments outside
    the month (or inactive leaves, or non bank/paid payments) are ignored
    even if the caller passes them in.
    """
    deductions: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    leave_days: dict[str, int] = defaultdict(int)
    for leave in leaves:
        if leave.month != month or not leave.is_active:
            continue
        deductions[leave.employee_id] += leave.deduction
        leave_days[leave.employee_id] += leave.days

    paid_ids = {
        p.employee_id for p in payments if p.month == month and p.is_paid_bank
    }

    views: list[PayableView] = []
    for emp in employees:
        if not emp.is_active or emp.bank_salary <= 0:
            continue

        deduction = deductions[emp.employee_id]
        net = max(Decimal("0"), emp.bank_salary - deduction)
        is_paid = emp.employee_id in paid_ids

        views.append(
            PayableView(
                employee_id=emp.employee_id,
                name=emp.name,
                month=month,
                bank_salary=emp.bank_salary,
                cash_salary=emp.cash_salary,
                deduction=deduction,
                leave_days=leave_days[emp.employee_id],
                net_bank_salary=net,
                is_paid=is_paid,
                selected=not is_paid and emp.bank_salary > 0,
                bank_amount=net,
                position=emp.position,
                last_payment_month=emp.last_payment_month,
            )
        )

    return sort_for_review(views)


def collation_key(name: str) -> tuple[str, str]:
    """Case- and accent-insensitive sort key for employee names.

    Accented letters sort with their base letter ("Ömer" next to "Omer"),
    and the original spelling breaks ties so the order stays stable.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), name


def sort_for_review(views: list[PayableView]) -> list[PayableView]:
    """Unpaid rows first, then paid; each group by name ignoring case and accents."""
    return sorted(views, key=lambda v: (v.is_paid, collation_key(v.name)))
