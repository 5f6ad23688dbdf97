"""Payday engine services."""

from payday.services.disbursement import DisbursementOrchestrator, DisbursementPlan
from payday.services.leave_service import LeaveService
from payday.services.payroll_board import PayrollBoard
from payday.services.selection import PaymentSelection

__all__ = [
    "DisbursementOrchestrator",
    "DisbursementPlan",
    "LeaveService",
    "PaymentSelection",
    "PayrollBoard",
]
