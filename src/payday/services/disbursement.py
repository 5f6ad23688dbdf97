"""Disbursement orchestrator - sequential, per-employee bank salary commit.

Orchestrates a salary run through:
1. Plan preparation (validation, computed total)
2. Operator confirmation of the computed total
3. Per-employee writes: payment record, then salary metadata
4. Batch report with per-employee failures

Each employee's pair of writes is its own unit of work. A failure for one
employee never blocks, rolls back or skips another; re-running the batch
only finds the failed employees still unpaid.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from uuid import uuid4

from payday.calculators.leave_rules import round_to_cents
from payday.calculators.periods import utcnow
from payday.calculators.types import (
    BatchReport,
    PayableView,
    PaymentStatus,
    PaymentType,
    RowFailure,
    SalaryPayment,
)
from payday.errors import ConfirmationRequired, ValidationError
from payday.stores.base import EmployeeDirectory, PaymentRecordStore

logger = logging.getLogger(__name__)

BANK_TRANSFER = "bank_transfer"
SALARY_KIND = "salary"


@dataclass
class DisbursementPlan:
    """Validated batch waiting for operator confirmation.

    Rows are copies taken at preparation time, in the order they will be
    paid; later selection changes don't affect the plan.
    """

    month: str
    payment_date: date
    rows: tuple[PayableView, ...]
    total: Decimal
    confirmed: bool = False

    @property
    def employee_count(self) -> int:
        return len(self.rows)

    def prompt(self) -> str:
        """Confirmation text shown to the operator."""
        return (
            f"{self.employee_count} employee(s) will receive a total BANK payment "
            f"of {self.total} for {self.month}. Confirm?"
        )

    def confirm(self, total: Decimal) -> None:
        """Acknowledge the computed total.

        Raises:
            ConfirmationRequired: acknowledged total differs from the plan
        """
        total = Decimal(total)
        if not total.is_finite() or total != self.total:
            raise ConfirmationRequired(self.employee_count, self.total)
        self.confirmed = True


Confirm = Callable[[DisbursementPlan], bool | Awaitable[bool]]


@dataclass(frozen=True)
class RowOutcome:
    """Result of paying a single employee."""

    row: PayableView
    success: bool
    message: str = ""
    payment_id: str | None = None


class DisbursementOrchestrator:
    """Bank salary disbursement service.

    Rows are processed strictly one at a time, awaiting both writes before
    starting the next employee. Writes are never fanned out in parallel.
    """

    def __init__(self, payments: PaymentRecordStore, directory: EmployeeDirectory):
        self.payments = payments
        self.directory = directory

    def prepare(
        self, payment_date: date, rows: Iterable[PayableView]
    ) -> DisbursementPlan:
        """Validate the selection and compute the total to confirm.

        Only selected, unpaid rows are kept, in the order given.

        Raises:
            ValidationError: nothing selected, non-positive amount, or rows
                from more than one month
        """
        selected = [r for r in rows if r.selected and not r.is_paid]
        if not selected:
            raise ValidationError("Select at least one employee to pay")

        not_a_number = [
            r.name for r in selected if not Decimal(r.bank_amount).is_finite()
        ]
        if not_a_number:
            raise ValidationError(
                "Bank amount must be a finite number for: " + ", ".join(not_a_number)
            )

        selected = [
            replace(r, bank_amount=round_to_cents(Decimal(r.bank_amount)))
            for r in selected
        ]
        non_positive = [r.name for r in selected if r.bank_amount <= 0]
        if non_positive:
            raise ValidationError(
                "Bank amount must be positive for: " + ", ".join(non_positive)
            )

        months = {r.month for r in selected}
        if len(months) != 1:
            raise ValidationError(
                f"Rows span several months ({', '.join(sorted(months))})"
            )

        return DisbursementPlan(
            month=selected[0].month,
            payment_date=payment_date,
            rows=tuple(selected),
            total=sum((r.bank_amount for r in selected), Decimal("0")),
        )

    async def iter_commit(self, plan: DisbursementPlan) -> AsyncIterator[RowOutcome]:
        """Pay each row in order, yielding one outcome per employee."""
        if not plan.confirmed:
            raise ConfirmationRequired(plan.employee_count, plan.total)

        for row in plan.rows:
            try:
                payment_id = await self._pay_row(plan, row)
            except Exception as e:
                logger.exception(
                    "Bank salary payment failed for %s (%s)", row.name, row.employee_id
                )
                outcome = RowOutcome(
                    row=row, success=False, message=str(e) or type(e).__name__
                )
            else:
                logger.info(
                    "Paid %s to %s for %s", row.bank_amount, row.name, plan.month
                )
                outcome = RowOutcome(row=row, success=True, payment_id=payment_id)
            yield outcome

    async def execute(self, plan: DisbursementPlan) -> BatchReport:
        """Run a confirmed plan to completion and report."""
        report = BatchReport(month=plan.month, payment_date=plan.payment_date)

        async for outcome in self.iter_commit(plan):
            report.attempted += 1
            if outcome.success:
                report.success_count += 1
                report.paid_total += outcome.row.bank_amount
            else:
                report.failures.append(
                    RowFailure(
                        employee_id=outcome.row.employee_id,
                        employee_name=outcome.row.name,
                        message=outcome.message,
                    )
                )

        log = logger.warning if report.failures else logger.info
        log("Salary run %s: %s", plan.month, report.summary())
        return report

    async def commit(
        self,
        payment_date: date,
        rows: Iterable[PayableView],
        confirm: Confirm,
    ) -> BatchReport:
        """Prepare, ask for confirmation, then execute.

        `confirm` receives the plan (see `DisbursementPlan.prompt`) and
        returns True to proceed. Nothing is written unless it does.
        """
        plan = self.prepare(payment_date, rows)

        acknowledged = confirm(plan)
        if inspect.isawaitable(acknowledged):
            acknowledged = await acknowledged
        if not acknowledged:
            raise ConfirmationRequired(plan.employee_count, plan.total)

        plan.confirm(plan.total)
        return await self.execute(plan)

    async def _pay_row(self, plan: DisbursementPlan, row: PayableView) -> str:
        payment = SalaryPayment(
            payment_id=str(uuid4()),
            employee_id=row.employee_id,
            employee_name=row.name,
            amount=row.bank_amount,
            gross_amount=round_to_cents(row.bank_salary),
            deduction=round_to_cents(row.deduction),
            payment_date=plan.payment_date,
            payment_type=PaymentType.BANK,
            status=PaymentStatus.PAID,
            month=plan.month,
            payment_method=BANK_TRANSFER,
            kind=SALARY_KIND,
            created_at=utcnow(),
        )
        saved = await self.payments.append(payment)

        await self.directory.record_bank_payment(
            row.employee_id,
            payment_date=plan.payment_date,
            month=plan.month,
            amount=row.bank_amount,
        )
        return saved.payment_id
