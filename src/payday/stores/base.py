"""Protocols for the record stores the engine reads from and writes to.

The employee directory, the leave store and the payment store are owned by
the surrounding application. Each adapter must implement these protocols;
the services use them without knowing where the records live.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol

from payday.calculators.types import (
    EmployeeSnapshot,
    LeaveEntry,
    PaymentStatus,
    PaymentType,
    SalaryPayment,
)
from payday.stores.feed import Listener, Unsubscribe


class EmployeeDirectory(Protocol):
    """Roster with salary fields. Read-only apart from salary metadata."""

    async def subscribe(self, listener: Listener[EmployeeSnapshot]) -> Unsubscribe:
        """Deliver the full roster now and after every change."""
        ...

    async def list_employees(self) -> list[EmployeeSnapshot]:
        ...

    async def get_employee(self, employee_id: str) -> EmployeeSnapshot | None:
        ...

    async def record_bank_payment(
        self,
        employee_id: str,
        *,
        payment_date: date,
        month: str,
        amount: Decimal,
    ) -> None:
        """Partially update the employee's salary metadata.

        Raises:
            PersistenceError: employee missing or write failed
        """
        ...


class LeaveRecordStore(Protocol):
    """Leave entries. Append and soft-delete only."""

    async def subscribe(
        self,
        listener: Listener[LeaveEntry],
        *,
        month: str | None = None,
    ) -> Unsubscribe:
        """Deliver active leaves (optionally one month) now and after every change."""
        ...

    async def list_active(self, month: str | None = None) -> list[LeaveEntry]:
        ...

    async def get(self, leave_id: str) -> LeaveEntry | None:
        ...

    async def append(self, entry: LeaveEntry) -> LeaveEntry:
        ...

    async def soft_delete(self, leave_id: str) -> None:
        """Mark a leave deleted.

        Raises:
            PersistenceError: leave missing or write failed
        """
        ...


class PaymentRecordStore(Protocol):
    """Salary payment records. Append only."""

    async def subscribe(
        self,
        listener: Listener[SalaryPayment],
        *,
        month: str | None = None,
        status: PaymentStatus | None = None,
        payment_type: PaymentType | None = None,
    ) -> Unsubscribe:
        ...

    async def list_payments(
        self,
        *,
        month: str | None = None,
        status: PaymentStatus | None = None,
        payment_type: PaymentType | None = None,
    ) -> list[SalaryPayment]:
        ...

    async def append(self, payment: SalaryPayment) -> SalaryPayment:
        """Append a payment record.

        Raises:
            PersistenceError: write failed, or a bank payment for the same
                employee and month already exists
        """
        ...


def payment_filter(
    month: str | None = None,
    status: PaymentStatus | None = None,
    payment_type: PaymentType | None = None,
):
    """Predicate matching payments on the given fields."""

    def accepts(p: SalaryPayment) -> bool:
        if month is not None and p.month != month:
            return False
        if status is not None and p.status != status:
            return False
        if payment_type is not None and p.payment_type != payment_type:
            return False
        return True

    return accepts


def leave_filter(month: str | None = None):
    """Predicate matching active leaves, optionally in one month."""

    def accepts(leave: LeaveEntry) -> bool:
        return leave.is_active and (month is None or leave.month == month)

    return accepts
