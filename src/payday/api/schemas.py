"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from payday.calculators.types import LeaveType


# ============================================================================
# Leave schemas
# ============================================================================


class LeaveQuoteRequest(BaseModel):
    """Schema for previewing a leave deduction."""

    employee_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date


class LeaveCreate(LeaveQuoteRequest):
    """Schema for recording a leave."""

    note: str = ""


class LeaveQuoteResponse(BaseModel):
    """Schema for a computed leave deduction."""

    model_config = ConfigDict(from_attributes=True)

    leave_type: LeaveType
    days: int
    daily_salary: Decimal
    deduction: Decimal
    explanation: str


class LeaveResponse(BaseModel):
    """Schema for a stored leave."""

    model_config = ConfigDict(from_attributes=True)

    leave_id: str
    employee_id: str
    employee_name: str
    leave_type: LeaveType
    leave_type_name: str
    start_date: date
    end_date: date
    days: int
    daily_salary: Decimal
    deduction: Decimal
    note: str
    status: str
    month: str
    created_at: datetime | None = None


class LeaveListResponse(BaseModel):
    """Schema for listing leaves."""

    items: list[LeaveResponse]
    total: int


# ============================================================================
# Salary run schemas
# ============================================================================


class PayableRowResponse(BaseModel):
    """Schema for one employee in a salary run."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    name: str
    position: str
    month: str
    bank_salary: Decimal
    cash_salary: Decimal
    deduction: Decimal
    leave_days: int
    net_bank_salary: Decimal
    is_paid: bool
    selected: bool
    bank_amount: Decimal
    last_payment_month: str | None = None


class SelectionTotalsResponse(BaseModel):
    """Schema for salary run totals."""

    model_config = ConfigDict(from_attributes=True)

    selected_count: int
    unpaid_count: int
    paid_count: int
    with_cash_count: int
    bank_total: Decimal
    deduction_total: Decimal
    cash_pending_total: Decimal


class SalaryRunResponse(BaseModel):
    """Schema for the salary run of a month with default selection."""

    month: str
    rows: list[PayableRowResponse]
    totals: SelectionTotalsResponse


class CommitItem(BaseModel):
    """An employee to pay, optionally with an overridden amount."""

    employee_id: str
    bank_amount: Decimal | None = None


class CommitRequest(BaseModel):
    """Schema for committing a salary run."""

    payment_date: date
    items: list[CommitItem] = Field(default_factory=list)
    confirmed_total: Decimal | None = None


class RowFailureResponse(BaseModel):
    """Schema for an employee whose payment failed."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    employee_name: str
    message: str


class BatchReportResponse(BaseModel):
    """Schema for a committed salary run."""

    month: str
    payment_date: date
    attempted: int
    success_count: int
    failure_count: int
    paid_total: Decimal
    failures: list[RowFailureResponse]
    summary: str


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str


class ConfirmationRequiredResponse(ErrorResponse):
    """Schema returned until the operator confirms the computed total."""

    employee_count: int
    total: Decimal
