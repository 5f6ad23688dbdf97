"""SQLAlchemy ORM models."""

from payday.models.base import Base, TimestampMixin
from payday.models.employee import Employee
from payday.models.leave import EmployeeLeave
from payday.models.payments import SalaryPaymentRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "Employee",
    "EmployeeLeave",
    "SalaryPaymentRecord",
]
