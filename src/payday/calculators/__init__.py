"""Leave deduction rules and monthly payable aggregation."""

from payday.calculators.aggregator import aggregate_payables, sort_for_review
from payday.calculators.leave_rules import (
    LEAVE_POLICIES,
    LeavePolicy,
    calculate_leave_deduction,
    count_leave_days,
    parse_leave_type,
)
from payday.calculators.periods import current_month, month_key, validate_month_key

__all__ = [
    "LEAVE_POLICIES",
    "LeavePolicy",
    "aggregate_payables",
    "calculate_leave_deduction",
    "count_leave_days",
    "current_month",
    "month_key",
    "parse_leave_type",
    "sort_for_review",
    "validate_month_key",
]
