"""Leave service - recording and retracting employee leave."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import uuid4

from payday.calculators.leave_rules import calculate_leave_deduction, parse_leave_type
from payday.calculators.periods import month_key, utcnow
from payday.calculators.types import LeaveDeduction, LeaveEntry, LeaveType
from payday.errors import ValidationError
from payday.stores.base import EmployeeDirectory, LeaveRecordStore

logger = logging.getLogger(__name__)


class LeaveService:
    """Service for the leave lifecycle.

    Operations:
    - quote: run the leave rules for an employee without writing
    - record_leave: compute the deduction and append the leave record
    - delete_leave: soft-delete (status → deleted); records are never removed
    - list_leaves: active leaves, newest start date first
    """

    def __init__(self, leaves: LeaveRecordStore, directory: EmployeeDirectory):
        self.leaves = leaves
        self.directory = directory

    async def quote(
        self,
        employee_id: str,
        leave_type: LeaveType | str,
        start_date: date,
        end_date: date,
    ) -> LeaveDeduction:
        """Deduction the leave would produce with the current salary.

        An unknown employee is quoted with a salary of zero.
        """
        employee = await self.directory.get_employee(employee_id)
        salary = employee.bank_salary if employee is not None else Decimal("0")
        return calculate_leave_deduction(salary, leave_type, start_date, end_date)

    async def record_leave(
        self,
        employee_id: str,
        leave_type: LeaveType | str,
        start_date: date,
        end_date: date,
        note: str = "",
    ) -> LeaveEntry:
        """Record a leave.

        The daily salary at the time of entry is snapshotted on the record,
        so later salary changes don't rewrite historical deductions. The
        month key comes from the start date.
        """
        resolved_type = parse_leave_type(leave_type)

        employee = await self.directory.get_employee(employee_id)
        if employee is None:
            raise ValidationError(f"Employee {employee_id} not found")

        result = calculate_leave_deduction(
            employee.bank_salary, resolved_type, start_date, end_date
        )

        entry = LeaveEntry(
            leave_id=str(uuid4()),
            employee_id=employee.employee_id,
            employee_name=employee.name,
            leave_type=resolved_type,
            start_date=start_date,
            end_date=end_date,
            days=result.days,
            daily_salary=result.daily_salary,
            deduction=result.deduction,
            month=month_key(start_date),
            note=(note or "").strip(),
            created_at=utcnow(),
        )
        saved = await self.leaves.append(entry)

        logger.info(
            "Recorded %s day(s) of %s for %s (deduction %s, month %s)",
            saved.days,
            saved.leave_type.value,
            saved.employee_name,
            saved.deduction,
            saved.month,
        )
        return saved

    async def delete_leave(self, leave_id: str) -> None:
        await self.leaves.soft_delete(leave_id)
        logger.info("Leave %s marked deleted", leave_id)

    async def list_leaves(self, month: str | None = None) -> list[LeaveEntry]:
        leaves = await self.leaves.list_active(month)
        return sorted(leaves, key=lambda l: l.start_date, reverse=True)
