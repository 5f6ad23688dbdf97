"""Salary run API endpoints."""

from collections import Counter
from typing import Annotated

from fastapi import APIRouter, Path

from payday.api.dependencies import StoresDep, Stores
from payday.api.schemas import (
    BatchReportResponse,
    CommitRequest,
    ConfirmationRequiredResponse,
    ErrorResponse,
    PayableRowResponse,
    RowFailureResponse,
    SalaryRunResponse,
    SelectionTotalsResponse,
)
from payday.calculators.aggregator import aggregate_payables
from payday.calculators.periods import validate_month_key
from payday.calculators.types import PaymentStatus, PaymentType
from payday.errors import ConfirmationRequired, ValidationError
from payday.services.disbursement import DisbursementOrchestrator
from payday.services.selection import PaymentSelection

router = APIRouter(prefix="/salary-runs", tags=["salary-runs"])

MonthKey = Annotated[str, Path(description="Payroll month as YYYY-MM")]


async def load_selection(stores: Stores, month: str) -> PaymentSelection:
    """Aggregate the month from the stores with the default selection."""
    validate_month_key(month)
    employees = await stores.directory.list_employees()
    leaves = await stores.leaves.list_active(month)
    payments = await stores.payments.list_payments(
        month=month, status=PaymentStatus.PAID, payment_type=PaymentType.BANK
    )
    return PaymentSelection(aggregate_payables(employees, leaves, payments, month))


@router.get(
    "/{month}",
    response_model=SalaryRunResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_salary_run(stores: StoresDep, month: MonthKey) -> SalaryRunResponse:
    """Payable rows for the month, unpaid first, with default selection."""
    selection = await load_selection(stores, month)
    return SalaryRunResponse(
        month=month,
        rows=[PayableRowResponse.model_validate(r) for r in selection.rows],
        totals=SelectionTotalsResponse.model_validate(selection.totals),
    )


@router.post(
    "/{month}/commit",
    response_model=BatchReportResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ConfirmationRequiredResponse},
    },
)
async def commit_salary_run(
    stores: StoresDep,
    month: MonthKey,
    payload: CommitRequest,
) -> BatchReportResponse:
    """Pay the listed employees by bank transfer.

    Without items the default selection (every unpaid row) is paid. The
    request must echo the computed total in `confirmed_total`; otherwise
    nothing is written and a 409 carries the total to confirm.
    """
    listed = Counter(item.employee_id for item in payload.items)
    repeated = sorted(employee_id for employee_id, n in listed.items() if n > 1)
    if repeated:
        raise ValidationError(
            "Employees listed more than once: " + ", ".join(repeated)
        )

    selection = await load_selection(stores, month)
    if payload.items:
        selection.deselect_all()
        for item in payload.items:
            selection.select(item.employee_id)
            if item.bank_amount is not None:
                selection.set_amount(item.employee_id, item.bank_amount)

    orchestrator = DisbursementOrchestrator(stores.payments, stores.directory)
    plan = orchestrator.prepare(payload.payment_date, selection.selected_rows())
    if payload.confirmed_total is None:
        raise ConfirmationRequired(plan.employee_count, plan.total)
    plan.confirm(payload.confirmed_total)

    report = await orchestrator.execute(plan)
    return BatchReportResponse(
        month=report.month,
        payment_date=report.payment_date,
        attempted=report.attempted,
        success_count=report.success_count,
        failure_count=report.failure_count,
        paid_total=report.paid_total,
        failures=[RowFailureResponse.model_validate(f) for f in report.failures],
        summary=report.summary(),
    )
