"""In-memory reactive stores.

Used for tests and for embedding the engine next to a document store that
already pushes snapshots. Every write publishes the new snapshot to
subscribers before the call returns.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any

from payday.calculators.types import (
    EmployeeSnapshot,
    LeaveEntry,
    LeaveStatus,
    PaymentStatus,
    PaymentType,
    SalaryPayment,
)
from payday.errors import PersistenceError
from payday.stores.base import leave_filter, payment_filter
from payday.stores.documents import snapshot_from_document
from payday.stores.feed import ChangeFeed, Listener, Unsubscribe


class InMemoryEmployeeDirectory:
    """Employee directory backed by a dict of documents."""

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None):
        self._documents: dict[str, dict[str, Any]] = copy.deepcopy(documents or {})
        self.feed: ChangeFeed[EmployeeSnapshot] = ChangeFeed("employees")

    def put(self, employee_id: str, document: dict[str, Any]) -> None:
        """Insert or replace an employee document (directory-side edit)."""
        self._documents[employee_id] = copy.deepcopy(document)
        self.feed.publish(self._snapshots())

    def document(self, employee_id: str) -> dict[str, Any]:
        return copy.deepcopy(self._documents[employee_id])

    def _snapshots(self) -> list[EmployeeSnapshot]:
        return [
            snapshot_from_document(emp_id, doc)
            for emp_id, doc in self._documents.items()
        ]

    async def subscribe(self, listener: Listener[EmployeeSnapshot]) -> Unsubscribe:
        unsubscribe = self.feed.subscribe(listener)
        self.feed.deliver(listener, self._snapshots())
        return unsubscribe

    async def list_employees(self) -> list[EmployeeSnapshot]:
        return self._snapshots()

    async def get_employee(self, employee_id: str) -> EmployeeSnapshot | None:
        doc = self._documents.get(employee_id)
        if doc is None:
            return None
        return snapshot_from_document(employee_id, doc)

    async def record_bank_payment(
        self,
        employee_id: str,
        *,
        payment_date: date,
        month: str,
        amount: Decimal,
    ) -> None:
        doc = self._documents.get(employee_id)
        if doc is None:
            raise PersistenceError(f"Employee {employee_id} not found", employee_id)

        salary_info = doc.setdefault("salary_info", {})
        salary_info.update(
            {
                "lastPaymentDate": payment_date.isoformat(),
                "lastPaymentMonth": month,
                "lastBankPayment": str(amount),
            }
        )
        self.feed.publish(self._snapshots())


class InMemoryLeaveStore:
    """Leave records kept in insertion order."""

    def __init__(self) -> None:
        self._records: dict[str, LeaveEntry] = {}
        self.feed: ChangeFeed[LeaveEntry] = ChangeFeed("leaves")

    async def subscribe(
        self,
        listener: Listener[LeaveEntry],
        *,
        month: str | None = None,
    ) -> Unsubscribe:
        accepts = leave_filter(month)
        unsubscribe = self.feed.subscribe(listener, accepts)
        self.feed.deliver(listener, [r for r in self._records.values() if accepts(r)])
        return unsubscribe

    async def list_active(self, month: str | None = None) -> list[LeaveEntry]:
        accepts = leave_filter(month)
        return [r for r in self._records.values() if accepts(r)]

    async def get(self, leave_id: str) -> LeaveEntry | None:
        return self._records.get(leave_id)

    async def append(self, entry: LeaveEntry) -> LeaveEntry:
        if entry.leave_id in self._records:
            raise PersistenceError(f"Leave {entry.leave_id} already exists", entry.leave_id)
        self._records[entry.leave_id] = entry
        self.feed.publish(self._records.values())
        return entry

    async def soft_delete(self, leave_id: str) -> None:
        entry = self._records.get(leave_id)
        if entry is None:
            raise PersistenceError(f"Leave {leave_id} not found", leave_id)
        self._records[leave_id] = replace(entry, status=LeaveStatus.DELETED)
        self.feed.publish(self._records.values())


class InMemoryPaymentStore:
    """Append-only salary payment records."""

    def __init__(self) -> None:
        self._records: list[SalaryPayment] = []
        self.feed: ChangeFeed[SalaryPayment] = ChangeFeed("salary_payments")

    async def subscribe(
        self,
        listener: Listener[SalaryPayment],
        *,
        month: str | None = None,
        status: PaymentStatus | None = None,
        payment_type: PaymentType | None = None,
    ) -> Unsubscribe:
        accepts = payment_filter(month, status, payment_type)
        unsubscribe = self.feed.subscribe(listener, accepts)
        self.feed.deliver(listener, [p for p in self._records if accepts(p)])
        return unsubscribe

    async def list_payments(
        self,
        *,
        month: str | None = None,
        status: PaymentStatus | None = None,
        payment_type: PaymentType | None = None,
    ) -> list[SalaryPayment]:
        accepts = payment_filter(month, status, payment_type)
        return [p for p in self._records if accepts(p)]

    async def append(self, payment: SalaryPayment) -> SalaryPayment:
        if payment.is_paid_bank and any(
            p.is_paid_bank
            and p.employee_id == payment.employee_id
            and p.month == payment.month
            for p in self._records
        ):
            raise PersistenceError(
                f"Bank salary for {payment.employee_id} in {payment.month} "
                "is already recorded",
                payment.payment_id,
            )
        self._records.append(payment)
        self.feed.publish(self._records)
        return payment
