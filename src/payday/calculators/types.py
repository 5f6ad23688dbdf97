"""Type definitions for the leave and salary-run pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class LeaveType(str, Enum):
    """Closed set of leave categories."""

    UNPAID = "unpaid_leave"
    ANNUAL = "annual_leave"
    SICK = "sick_leave"
    WORK_ACCIDENT = "work_accident"


class LeaveStatus(str, Enum):
    """Leave record lifecycle. Records are never hard-deleted."""

    ACTIVE = "active"
    DELETED = "deleted"


class PaymentType(str, Enum):
    """Salary payment channel."""

    BANK = "bank"
    CASH = "cash"


class PaymentStatus(str, Enum):
    """Salary payment status values."""

    PAID = "paid"


# Legacy directory values meaning "active"
ACTIVE_EMPLOYEE_STATUSES = frozenset({"active", "aktif"})


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Read-only view of a directory employee as seen by the engine."""

    employee_id: str
    name: str
    bank_salary: Decimal = Decimal("0")
    cash_salary: Decimal = Decimal("0")
    status: str = "active"
    position: str = ""
    last_payment_date: date | None = None
    last_payment_month: str | None = None
    last_bank_payment: Decimal | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_EMPLOYEE_STATUSES


@dataclass(frozen=True)
class LeaveDeduction:
    """Result of applying a leave rule to a date range."""

    leave_type: LeaveType
    days: int
    daily_salary: Decimal
    deduction: Decimal
    explanation: str


@dataclass(frozen=True)
class LeaveEntry:
    """A persisted leave record."""

    leave_id: str
    employee_id: str
    employee_name: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    daily_salary: Decimal
    deduction: Decimal
    month: str
    note: str = ""
    status: LeaveStatus = LeaveStatus.ACTIVE
    created_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == LeaveStatus.ACTIVE


@dataclass(frozen=True)
class SalaryPayment:
    """A persisted salary disbursement."""

    payment_id: str
    employee_id: str
    employee_name: str
    amount: Decimal
    gross_amount: Decimal
    deduction: Decimal
    payment_date: date
    payment_type: PaymentType
    status: PaymentStatus
    month: str
    payment_method: str = "bank_transfer"
    kind: str = "salary"
    created_at: datetime | None = None

    @property
    def is_paid_bank(self) -> bool:
        return (
            self.payment_type == PaymentType.BANK
            and self.status == PaymentStatus.PAID
        )


@dataclass
class PayableView:
    """Per-employee projection for one payroll month.

    `selected` and `bank_amount` are operator state; everything else is
    derived by the aggregator.
    """

    employee_id: str
    name: str
    month: str
    bank_salary: Decimal
    cash_salary: Decimal
    deduction: Decimal
    leave_days: int
    net_bank_salary: Decimal
    is_paid: bool
    selected: bool
    bank_amount: Decimal
    position: str = ""
    last_payment_month: str | None = None

    @property
    def is_payable(self) -> bool:
        """Row is eligible for select-all."""
        return not self.is_paid and self.bank_salary > 0


@dataclass(frozen=True)
class SelectionTotals:
    """Totals derived from the current selection state."""

    selected_count: int = 0
    unpaid_count: int = 0
    paid_count: int = 0
    with_cash_count: int = 0
    bank_total: Decimal = Decimal("0")
    deduction_total: Decimal = Decimal("0")
    cash_pending_total: Decimal = Decimal("0")


@dataclass
class RowFailure:
    """A single employee whose payment writes failed."""

    employee_id: str
    employee_name: str
    message: str


@dataclass
class BatchReport:
    """Outcome of a disbursement commit."""

    month: str
    payment_date: date
    attempted: int = 0
    success_count: int = 0
    paid_total: Decimal = Decimal("0")
    failures: list[RowFailure] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def all_succeeded(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        """Operator-facing one-line summary."""
        if self.all_succeeded:
            return f"{self.success_count} succeeded"
        return f"{self.success_count} succeeded, {self.failure_count} failed"
