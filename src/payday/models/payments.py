"""Salary payment model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from payday.calculators.types import PaymentStatus, PaymentType, SalaryPayment
from payday.models.base import Base, TimestampMixin

_BANK_PAID = text("payment_type = 'bank' AND status = 'paid'")


class SalaryPaymentRecord(Base, TimestampMixin):
    """Salary disbursement. Append-only.

    At most one bank/paid record per (employee_id, month), enforced by a
    partial unique index.
    """

    __tablename__ = "salary_payment"

    payment_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    gross_amount: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    deduction: Mapped[Decimal] = mapped_column(
        Numeric(14, 4), nullable=False, default=Decimal("0")
    )
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_type: Mapped[str] = mapped_column(String, nullable=False)
    payment_method: Mapped[str] = mapped_column(String, nullable=False)
    kind: Mapped[str] = mapped_column(String, nullable=False, default="salary")
    status: Mapped[str] = mapped_column(String, nullable=False, default="paid")
    month: Mapped[str] = mapped_column(String(7), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="salary_payment_amount_check"),
        CheckConstraint(
            "payment_type IN ('bank', 'cash')",
            name="salary_payment_type_check",
        ),
        CheckConstraint("status IN ('paid')", name="salary_payment_status_check"),
        Index("salary_payment_month_idx", "month", "status", "payment_type"),
        Index(
            "salary_payment_bank_once_per_month",
            "employee_id",
            "month",
            unique=True,
            postgresql_where=_BANK_PAID,
            sqlite_where=_BANK_PAID,
        ),
    )

    @classmethod
    def from_payment(cls, payment: SalaryPayment) -> SalaryPaymentRecord:
        row = cls(
            payment_id=payment.payment_id,
            employee_id=payment.employee_id,
            employee_name=payment.employee_name,
            amount=payment.amount,
            gross_amount=payment.gross_amount,
            deduction=payment.deduction,
            payment_date=payment.payment_date,
            payment_type=payment.payment_type.value,
            payment_method=payment.payment_method,
            kind=payment.kind,
            status=payment.status.value,
            month=payment.month,
        )
        if payment.created_at is not None:
            row.created_at = payment.created_at
        return row

    def to_payment(self) -> SalaryPayment:
        return SalaryPayment(
            payment_id=self.payment_id,
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            amount=self.amount,
            gross_amount=self.gross_amount,
            deduction=self.deduction,
            payment_date=self.payment_date,
            payment_type=PaymentType(self.payment_type),
            status=PaymentStatus(self.status),
            month=self.month,
            payment_method=self.payment_method,
            kind=self.kind,
            created_at=self.created_at,
        )
