"""Leave API endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status

from payday.api.dependencies import LeaveServiceDep
from payday.api.schemas import (
    ErrorResponse,
    LeaveCreate,
    LeaveListResponse,
    LeaveQuoteRequest,
    LeaveQuoteResponse,
    LeaveResponse,
)
from payday.calculators.leave_rules import get_policy
from payday.calculators.periods import validate_month_key
from payday.calculators.types import LeaveEntry

router = APIRouter(prefix="/leaves", tags=["leaves"])


def _leave_response(entry: LeaveEntry) -> LeaveResponse:
    return LeaveResponse(
        leave_id=entry.leave_id,
        employee_id=entry.employee_id,
        employee_name=entry.employee_name,
        leave_type=entry.leave_type,
        leave_type_name=get_policy(entry.leave_type).name,
        start_date=entry.start_date,
        end_date=entry.end_date,
        days=entry.days,
        daily_salary=entry.daily_salary,
        deduction=entry.deduction,
        note=entry.note,
        status=entry.status.value,
        month=entry.month,
        created_at=entry.created_at,
    )


@router.post(
    "/quote",
    response_model=LeaveQuoteResponse,
    responses={400: {"model": ErrorResponse}},
)
async def quote_leave(
    service: LeaveServiceDep,
    payload: LeaveQuoteRequest,
) -> LeaveQuoteResponse:
    """Compute the deduction a leave would produce, without saving it."""
    result = await service.quote(
        payload.employee_id, payload.leave_type, payload.start_date, payload.end_date
    )
    return LeaveQuoteResponse.model_validate(result)


@router.post(
    "",
    response_model=LeaveResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_leave(
    service: LeaveServiceDep,
    payload: LeaveCreate,
) -> LeaveResponse:
    """Record a leave and its salary deduction."""
    entry = await service.record_leave(
        payload.employee_id,
        payload.leave_type,
        payload.start_date,
        payload.end_date,
        payload.note,
    )
    return _leave_response(entry)


@router.get(
    "",
    response_model=LeaveListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_leaves(
    service: LeaveServiceDep,
    month: Annotated[str | None, Query()] = None,
) -> LeaveListResponse:
    """List active leaves, newest first, optionally for one month."""
    if month is not None:
        validate_month_key(month)
    leaves = await service.list_leaves(month)
    return LeaveListResponse(
        items=[_leave_response(l) for l in leaves],
        total=len(leaves),
    )


@router.delete(
    "/{leave_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_leave(
    service: LeaveServiceDep,
    leave_id: Annotated[str, Path()],
) -> None:
    """Soft-delete a leave. The record is kept with status 'deleted'."""
    existing = await service.leaves.get(leave_id)
    if existing is None or not existing.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Leave not found",
        )
    await service.delete_leave(leave_id)
