"""Record builders shared by the test modules."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import uuid4

from payday.calculators.types import (
    LeaveEntry,
    LeaveType,
    PayableView,
    PaymentStatus,
    PaymentType,
    SalaryPayment,
)

MONTH = "2026-10"


def employee_documents() -> dict[str, dict[str, Any]]:
    """Directory documents covering the legacy field variants."""
    return {
        "emp-a": {
            "personal_info": {"full_name": "Ayla Aksoy"},
            "salary_info": {"monthly_salary": 3000, "cash_salary": 500},
            "employment_info": {"position": "Cook"},
            "status": "active",
        },
        "emp-b": {
            "fullName": "Baran Bilgin",
            "salary": "2000",
            "employment_info": {"role": "Waiter"},
            "status": "aktif",
        },
        "emp-c": {
            "firstName": "Cem",
            "lastName": "Coskun",
            "salary_info": {"monthly_salary": 4500},
        },
        "emp-inactive": {
            "fullName": "Derya Dag",
            "salary_info": {"monthly_salary": 2500},
            "status": "terminated",
        },
        "emp-cash-only": {
            "fullName": "Emre Eren",
            "salary_info": {"monthly_salary": 0, "cash_salary": 1200},
            "status": "active",
        },
    }


def make_leave(
    employee_id: str = "emp-a",
    leave_type: LeaveType = LeaveType.UNPAID,
    days: int = 3,
    deduction: str = "300.00",
    month: str = MONTH,
    **overrides: Any,
) -> LeaveEntry:
    """Build a leave entry without going through the rule engine."""
    values: dict[str, Any] = dict(
        leave_id=str(uuid4()),
        employee_id=employee_id,
        employee_name=employee_id,
        leave_type=leave_type,
        start_date=date(2026, 10, 5),
        end_date=date(2026, 10, 4 + days),
        days=days,
        daily_salary=Decimal("100.0000"),
        deduction=Decimal(deduction),
        month=month,
    )
    values.update(overrides)
    return LeaveEntry(**values)


def make_payment(
    employee_id: str = "emp-a",
    amount: str = "2700.00",
    month: str = MONTH,
    payment_type: PaymentType = PaymentType.BANK,
    status: PaymentStatus = PaymentStatus.PAID,
    **overrides: Any,
) -> SalaryPayment:
    """Build a salary payment record."""
    values: dict[str, Any] = dict(
        payment_id=str(uuid4()),
        employee_id=employee_id,
        employee_name=employee_id,
        amount=Decimal(amount),
        gross_amount=Decimal(amount),
        deduction=Decimal("0"),
        payment_date=date(2026, 10, 28),
        payment_type=payment_type,
        status=status,
        month=month,
    )
    values.update(overrides)
    return SalaryPayment(**values)


def make_view(
    employee_id: str,
    name: str,
    bank_salary: str = "3000",
    deduction: str = "0",
    is_paid: bool = False,
    cash_salary: str = "0",
    month: str = MONTH,
) -> PayableView:
    """Build a payable view with the aggregator's default selection."""
    net = max(Decimal("0"), Decimal(bank_salary) - Decimal(deduction))
    return PayableView(
        employee_id=employee_id,
        name=name,
        month=month,
        bank_salary=Decimal(bank_salary),
        cash_salary=Decimal(cash_salary),
        deduction=Decimal(deduction),
        leave_days=0,
        net_bank_salary=net,
        is_paid=is_paid,
        selected=not is_paid,
        bank_amount=net,
    )


