"""Leave rule engine: converts a leave date range into a salary deduction."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from payday.calculators.types import LeaveDeduction, LeaveType
from payday.errors import ConfigurationError, ValidationError

# Fixed divisor, not the calendar length of the month. Downstream payroll
# figures are reconciled against it.
DAILY_SALARY_DIVISOR = Decimal("30")

CENTS = Decimal("0.01")
DAILY_PRECISION = Decimal("0.0001")


@dataclass(frozen=True)
class LeavePolicy:
    """Deduction policy for one leave type.

    `withheld_share` is the fraction of the daily salary the employee
    forfeits for each day of leave.
    """

    leave_type: LeaveType
    name: str
    description: str
    withheld_share: Decimal


LEAVE_POLICIES: dict[LeaveType, LeavePolicy] = {
    LeaveType.UNPAID: LeavePolicy(
        leave_type=LeaveType.UNPAID,
        name="Unpaid leave",
        description="Full salary is deducted for each day",
        withheld_share=Decimal("1"),
    ),
    LeaveType.ANNUAL: LeavePolicy(
        leave_type=LeaveType.ANNUAL,
        name="Annual leave",
        description="Fully paid, no deduction",
        withheld_share=Decimal("0"),
    ),
    LeaveType.SICK: LeavePolicy(
        leave_type=LeaveType.SICK,
        name="Sick leave",
        description="Employer pays 80%, the remaining 20% is deducted",
        withheld_share=Decimal("0.2"),
    ),
    LeaveType.WORK_ACCIDENT: LeavePolicy(
        leave_type=LeaveType.WORK_ACCIDENT,
        name="Work-related accident",
        description="Fully paid, no deduction",
        withheld_share=Decimal("0"),
    ),
}

_uncovered = set(LeaveType) - set(LEAVE_POLICIES)
if _uncovered:
    raise ConfigurationError(
        f"No leave policy for: {', '.join(sorted(t.value for t in _uncovered))}"
    )


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_leave_type(value: LeaveType | str) -> LeaveType:
    """Resolve a stored or submitted leave type.

    Raises:
        ConfigurationError: value is not one of the known leave types
    """
    if isinstance(value, LeaveType):
        return value
    try:
        return LeaveType(value)
    except ValueError:
        raise ConfigurationError(f"Unknown leave type: {value!r}") from None


def get_policy(leave_type: LeaveType | str) -> LeavePolicy:
    """Look up the policy for a leave type."""
    resolved = parse_leave_type(leave_type)
    try:
        return LEAVE_POLICIES[resolved]
    except KeyError:
        raise ConfigurationError(f"No leave policy for {resolved.value}") from None


def count_leave_days(start_date: date, end_date: date) -> int:
    """Inclusive number of calendar days in a leave.

    Raises:
        ValidationError: end date is before start date
    """
    days = (end_date - start_date).days + 1
    if days <= 0:
        raise ValidationError(
            f"Leave end date {end_date} is before start date {start_date}"
        )
    return days


def daily_salary(monthly_salary: Decimal) -> Decimal:
    """Daily rate used for leave deductions (unrounded)."""
    if monthly_salary < 0:
        raise ValidationError(f"Monthly salary cannot be negative: {monthly_salary}")
    return monthly_salary / DAILY_SALARY_DIVISOR


def calculate_leave_deduction(
    monthly_salary: Decimal,
    leave_type: LeaveType | str,
    start_date: date,
    end_date: date,
) -> LeaveDeduction:
    """Apply the leave policy to a date range.

    Validation happens before any amount is computed: an unknown leave type
    raises ConfigurationError, a reversed date range raises ValidationError.
    """
    policy = get_policy(leave_type)
    days = count_leave_days(start_date, end_date)
    rate = daily_salary(Decimal(monthly_salary))

    deduction = round_to_cents(rate * days * policy.withheld_share)
    daily = rate.quantize(DAILY_PRECISION, rounding=ROUND_HALF_UP)

    return LeaveDeduction(
        leave_type=policy.leave_type,
        days=days,
        daily_salary=daily,
        deduction=deduction,
        explanation=_explain(policy, rate, days, deduction),
    )


def _explain(
    policy: LeavePolicy, rate: Decimal, days: int, deduction: Decimal
) -> str:
    if policy.leave_type == LeaveType.UNPAID:
        return (
            f"Daily salary {round_to_cents(rate)} x {days} day(s) = "
            f"{deduction} deducted"
        )
    if policy.leave_type == LeaveType.SICK:
        return f"{days} day(s) sick leave, 80% paid. Deduction: {deduction} (20%)"
    return f"{policy.name}: no deduction, full salary paid"
