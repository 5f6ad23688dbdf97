"""Employee leave model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from payday.calculators.leave_rules import parse_leave_type
from payday.calculators.types import LeaveEntry, LeaveStatus
from payday.models.base import Base, TimestampMixin


class EmployeeLeave(Base, TimestampMixin):
    """Leave entry. Historical: only `status` ever changes after insert."""

    __tablename__ = "employee_leave"

    leave_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    leave_type: Mapped[str] = mapped_column(String, nullable=False)
    leave_type_name: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    days: Mapped[int] = mapped_column(Integer, nullable=False)
    daily_salary: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    deduction: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    month: Mapped[str] = mapped_column(String(7), nullable=False)

    __table_args__ = (
        CheckConstraint("days >= 1", name="employee_leave_days_check"),
        CheckConstraint("end_date >= start_date", name="employee_leave_dates_check"),
        CheckConstraint("deduction >= 0", name="employee_leave_deduction_check"),
        CheckConstraint(
            "status IN ('active', 'deleted')",
            name="employee_leave_status_check",
        ),
        Index("employee_leave_month_status_idx", "month", "status"),
    )

    @classmethod
    def from_entry(cls, entry: LeaveEntry, leave_type_name: str) -> EmployeeLeave:
        row = cls(
            leave_id=entry.leave_id,
            employee_id=entry.employee_id,
            employee_name=entry.employee_name,
            leave_type=entry.leave_type.value,
            leave_type_name=leave_type_name,
            start_date=entry.start_date,
            end_date=entry.end_date,
            days=entry.days,
            daily_salary=entry.daily_salary,
            deduction=entry.deduction,
            note=entry.note,
            status=entry.status.value,
            month=entry.month,
        )
        if entry.created_at is not None:
            row.created_at = entry.created_at
        return row

    def to_entry(self) -> LeaveEntry:
        return LeaveEntry(
            leave_id=self.leave_id,
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            leave_type=parse_leave_type(self.leave_type),
            start_date=self.start_date,
            end_date=self.end_date,
            days=self.days,
            daily_salary=self.daily_salary,
            deduction=self.deduction,
            month=self.month,
            note=self.note,
            status=LeaveStatus(self.status),
            created_at=self.created_at,
        )
