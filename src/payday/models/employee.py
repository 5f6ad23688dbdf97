"""Employee directory model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from payday.calculators.types import EmployeeSnapshot
from payday.models.base import Base, TimestampMixin
from payday.stores.documents import resolve_name, to_decimal


class Employee(Base, TimestampMixin):
    """Employee record as kept by the surrounding application.

    Several legacy name and salary columns exist side by side; the engine
    only ever reads them through `to_snapshot()`.
    """

    __tablename__ = "employee"

    employee_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Legacy name fields, first non-empty wins
    personal_full_name: Mapped[str | None] = mapped_column(String, nullable=True)
    full_name: Mapped[str | None] = mapped_column(String, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String, nullable=True)
    last_name: Mapped[str | None] = mapped_column(String, nullable=True)

    position: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str | None] = mapped_column(String, nullable=True, default="active")

    monthly_salary: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    legacy_salary: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    cash_salary: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)

    # Salary metadata, the only columns the engine writes
    last_payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_payment_month: Mapped[str | None] = mapped_column(String(7), nullable=True)
    last_bank_payment: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "monthly_salary IS NULL OR monthly_salary >= 0",
            name="employee_monthly_salary_check",
        ),
        CheckConstraint(
            "cash_salary IS NULL OR cash_salary >= 0",
            name="employee_cash_salary_check",
        ),
    )

    @property
    def display_name(self) -> str:
        return resolve_name(
            self.personal_full_name, self.full_name, self.first_name, self.last_name
        )

    def to_snapshot(self) -> EmployeeSnapshot:
        return EmployeeSnapshot(
            employee_id=self.employee_id,
            name=self.display_name,
            bank_salary=to_decimal(self.monthly_salary or self.legacy_salary),
            cash_salary=to_decimal(self.cash_salary),
            status=self.status or "active",
            position=self.position or "",
            last_payment_date=self.last_payment_date,
            last_payment_month=self.last_payment_month,
            last_bank_payment=self.last_bank_payment,
        )
