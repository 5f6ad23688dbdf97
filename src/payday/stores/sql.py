"""SQLAlchemy-backed stores.

Each write runs in its own session and transaction. After a successful
commit the store reloads the affected collection and pushes it to
subscribers of this process.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payday.calculators.leave_rules import get_policy
from payday.calculators.types import (
    EmployeeSnapshot,
    LeaveEntry,
    LeaveStatus,
    PaymentStatus,
    PaymentType,
    SalaryPayment,
)
from payday.errors import PersistenceError
from payday.models import Employee, EmployeeLeave, SalaryPaymentRecord
from payday.stores.base import leave_filter, payment_filter
from payday.stores.feed import ChangeFeed, Listener, Unsubscribe

logger = logging.getLogger(__name__)


async def _publish_reloaded(
    feed: ChangeFeed, reload: Callable[[], Awaitable[list]]
) -> None:
    """Push the reloaded collection after a committed write.

    The write is already durable here, so a failed reload is logged and the
    push skipped; subscribers catch up on the next successful write.
    """
    try:
        records = await reload()
    except SQLAlchemyError:
        logger.exception("Reload of %s failed after commit; push skipped", feed.name)
        return
    feed.publish(records)


class SqlEmployeeDirectory:
    """Employee directory over the `employee` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.feed: ChangeFeed[EmployeeSnapshot] = ChangeFeed("employees")

    async def subscribe(self, listener: Listener[EmployeeSnapshot]) -> Unsubscribe:
        unsubscribe = self.feed.subscribe(listener)
        self.feed.deliver(listener, await self.list_employees())
        return unsubscribe

    async def list_employees(self) -> list[EmployeeSnapshot]:
        async with self.session_factory() as session:
            result = await session.execute(select(Employee).order_by(Employee.employee_id))
            return [e.to_snapshot() for e in result.scalars().all()]

    async def get_employee(self, employee_id: str) -> EmployeeSnapshot | None:
        async with self.session_factory() as session:
            employee = await session.get(Employee, employee_id)
            return employee.to_snapshot() if employee else None

    async def record_bank_payment(
        self,
        employee_id: str,
        *,
        payment_date: date,
        month: str,
        amount: Decimal,
    ) -> None:
        try:
            async with self.session_factory() as session, session.begin():
                result = await session.execute(
                    update(Employee)
                    .where(Employee.employee_id == employee_id)
                    .values(
                        last_payment_date=payment_date,
                        last_payment_month=month,
                        last_bank_payment=amount,
                    )
                )
                if result.rowcount == 0:
                    raise PersistenceError(
                        f"Employee {employee_id} not found", employee_id
                    )
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to update salary info for {employee_id}: {e}", employee_id
            ) from e

        await _publish_reloaded(self.feed, self.list_employees)


class SqlLeaveStore:
    """Leave records over the `employee_leave` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.feed: ChangeFeed[LeaveEntry] = ChangeFeed("leaves")

    async def subscribe(
        self,
        listener: Listener[LeaveEntry],
        *,
        month: str | None = None,
    ) -> Unsubscribe:
        unsubscribe = self.feed.subscribe(listener, leave_filter(month))
        self.feed.deliver(listener, await self.list_active(month))
        return unsubscribe

    async def list_active(self, month: str | None = None) -> list[LeaveEntry]:
        query = select(EmployeeLeave).where(
            EmployeeLeave.status == LeaveStatus.ACTIVE.value
        )
        if month is not None:
            query = query.where(EmployeeLeave.month == month)
        query = query.order_by(EmployeeLeave.created_at, EmployeeLeave.leave_id)

        async with self.session_factory() as session:
            result = await session.execute(query)
            return [row.to_entry() for row in result.scalars().all()]

    async def get(self, leave_id: str) -> LeaveEntry | None:
        async with self.session_factory() as session:
            row = await session.get(EmployeeLeave, leave_id)
            return row.to_entry() if row else None

    async def append(self, entry: LeaveEntry) -> LeaveEntry:
        row = EmployeeLeave.from_entry(entry, get_policy(entry.leave_type).name)
        try:
            async with self.session_factory() as session, session.begin():
                session.add(row)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save leave {entry.leave_id}: {e}", entry.leave_id
            ) from e

        saved = row.to_entry()
        await _publish_reloaded(self.feed, self.list_active)
        return saved

    async def soft_delete(self, leave_id: str) -> None:
        try:
            async with self.session_factory() as session, session.begin():
                result = await session.execute(
                    update(EmployeeLeave)
                    .where(EmployeeLeave.leave_id == leave_id)
                    .values(status=LeaveStatus.DELETED.value)
                )
                if result.rowcount == 0:
                    raise PersistenceError(f"Leave {leave_id} not found", leave_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete leave {leave_id}: {e}", leave_id) from e

        await _publish_reloaded(self.feed, self.list_active)


class SqlPaymentStore:
    """Salary payments over the `salary_payment` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.feed: ChangeFeed[SalaryPayment] = ChangeFeed("salary_payments")

    async def subscribe(
        self,
        listener: Listener[SalaryPayment],
        *,
        month: str | None = None,
        status: PaymentStatus | None = None,
        payment_type: PaymentType | None = None,
    ) -> Unsubscribe:
        unsubscribe = self.feed.subscribe(
            listener, payment_filter(month, status, payment_type)
        )
        self.feed.deliver(
            listener,
            await self.list_payments(month=month, status=status, payment_type=payment_type),
        )
        return unsubscribe

    async def list_payments(
        self,
        *,
        month: str | None = None,
        status: PaymentStatus | None = None,
        payment_type: PaymentType | None = None,
    ) -> list[SalaryPayment]:
        query = select(SalaryPaymentRecord)
        if month is not None:
            query = query.where(SalaryPaymentRecord.month == month)
        if status is not None:
            query = query.where(SalaryPaymentRecord.status == status.value)
        if payment_type is not None:
            query = query.where(SalaryPaymentRecord.payment_type == payment_type.value)
        query = query.order_by(SalaryPaymentRecord.created_at, SalaryPaymentRecord.payment_id)

        async with self.session_factory() as session:
            result = await session.execute(query)
            return [row.to_payment() for row in result.scalars().all()]

    async def append(self, payment: SalaryPayment) -> SalaryPayment:
        row = SalaryPaymentRecord.from_payment(payment)
        try:
            async with self.session_factory() as session, session.begin():
                session.add(row)
        except IntegrityError as e:
            raise PersistenceError(
                f"Salary payment for {payment.employee_id} in {payment.month} "
                f"rejected: {e.orig}",
                payment.payment_id,
            ) from e
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save salary payment for {payment.employee_id}: {e}",
                payment.payment_id,
            ) from e

        saved = row.to_payment()
        await _publish_reloaded(self.feed, self.list_payments)
        return saved
