"""Live salary-run board: subscriptions feeding aggregation and selection."""

from __future__ import annotations

import logging
from datetime import date

from payday.calculators.aggregator import aggregate_payables
from payday.calculators.types import (
    BatchReport,
    EmployeeSnapshot,
    LeaveEntry,
    PayableView,
    PaymentStatus,
    PaymentType,
    SalaryPayment,
    SelectionTotals,
)
from payday.services.disbursement import Confirm, DisbursementOrchestrator, DisbursementPlan
from payday.services.selection import PaymentSelection
from payday.stores.base import EmployeeDirectory, LeaveRecordStore, PaymentRecordStore
from payday.stores.feed import Unsubscribe

logger = logging.getLogger(__name__)


class PayrollBoard:
    """Salary run for one month, kept current by the three store feeds.

    The payable views are recomputed from scratch whenever any feed pushes;
    nothing aggregated is kept between pushes, only the latest snapshot of
    each input and the operator's selection.

    Usage:
        async with PayrollBoard(directory, leaves, payments, "2026-10") as board:
            board.selection.toggle(employee_id)
            report = await board.commit(date.today(), confirm=ask_operator)
    """

    def __init__(
        self,
        directory: EmployeeDirectory,
        leaves: LeaveRecordStore,
        payments: PaymentRecordStore,
        month: str,
    ):
        self.directory = directory
        self.leaves = leaves
        self.payments = payments
        self.month = month
        self.selection = PaymentSelection()
        self.orchestrator = DisbursementOrchestrator(payments, directory)
        self.refresh_count = 0

        self._employees: list[EmployeeSnapshot] | None = None
        self._leaves: list[LeaveEntry] | None = None
        self._payments: list[SalaryPayment] | None = None
        self._unsubscribers: list[Unsubscribe] = []

    async def __aenter__(self) -> PayrollBoard:
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    async def open(self) -> None:
        """Subscribe to the roster, the month's leaves and its bank payments."""
        if self._unsubscribers:
            return
        self._unsubscribers = [
            await self.directory.subscribe(self._on_employees),
            await self.leaves.subscribe(self._on_leaves, month=self.month),
            await self.payments.subscribe(
                self._on_payments,
                month=self.month,
                status=PaymentStatus.PAID,
                payment_type=PaymentType.BANK,
            ),
        ]

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    @property
    def ready(self) -> bool:
        """All three feeds have delivered at least once."""
        return (
            self._employees is not None
            and self._leaves is not None
            and self._payments is not None
        )

    @property
    def rows(self) -> list[PayableView]:
        return self.selection.rows

    @property
    def totals(self) -> SelectionTotals:
        return self.selection.totals

    def prepare(self, payment_date: date) -> DisbursementPlan:
        return self.orchestrator.prepare(payment_date, self.selection.rows)

    async def commit(self, payment_date: date, confirm: Confirm) -> BatchReport:
        """Pay the current selection.

        Successful employees show as paid once the payment feed pushes,
        which happens during the commit for in-process stores.
        """
        return await self.orchestrator.commit(
            payment_date, self.selection.rows, confirm
        )

    def _on_employees(self, snapshot: list[EmployeeSnapshot]) -> None:
        self._employees = snapshot
        self._recompute()

    def _on_leaves(self, snapshot: list[LeaveEntry]) -> None:
        self._leaves = snapshot
        self._recompute()

    def _on_payments(self, snapshot: list[SalaryPayment]) -> None:
        self._payments = snapshot
        self._recompute()

    def _recompute(self) -> None:
        if not self.ready:
            return
        views = aggregate_payables(
            self._employees, self._leaves, self._payments, self.month
        )
        self.selection.reload(views)
        self.refresh_count += 1
        logger.debug(
            "Salary run %s refreshed: %d row(s)", self.month, len(views)
        )
