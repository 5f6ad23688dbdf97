"""Operator selection and amount overrides for a salary run."""

from __future__ import annotations

from decimal import Decimal

from payday.calculators.types import PayableView, SelectionTotals
from payday.errors import ValidationError


class PaymentSelection:
    """Selection state over the payable views of one month.

    Rules:
    - Paid rows are immutable for the current run (never toggled, never
      overridden, never selected).
    - Amount overrides only apply to selected rows and never recompute the
      deduction; they are purely the amount that will be disbursed.
    - Totals are derived from the rows on every read.
    """

    def __init__(self, views: list[PayableView] | None = None):
        self._rows: list[PayableView] = list(views or [])

    @property
    def rows(self) -> list[PayableView]:
        """Rows in review order."""
        return list(self._rows)

    def get(self, employee_id: str) -> PayableView:
        for row in self._rows:
            if row.employee_id == employee_id:
                return row
        raise ValidationError(f"Employee {employee_id} is not part of this run")

    def toggle(self, employee_id: str) -> bool:
        """Flip selection for one row. Returns the new state."""
        row = self.get(employee_id)
        if row.is_paid:
            raise ValidationError(
                f"{row.name} is already paid for {row.month} and cannot be selected"
            )
        row.selected = not row.selected
        return row.selected

    def select(self, employee_id: str) -> None:
        """Select one row; selecting an already selected row is a no-op."""
        row = self.get(employee_id)
        if row.is_paid:
            raise ValidationError(
                f"{row.name} is already paid for {row.month} and cannot be selected"
            )
        row.selected = True

    def set_amount(self, employee_id: str, amount: Decimal) -> None:
        """Override the bank amount to disburse for a selected row."""
        row = self.get(employee_id)
        if row.is_paid:
            raise ValidationError(f"{row.name} is already paid for {row.month}")
        if not row.selected:
            raise ValidationError(f"Select {row.name} before changing the amount")
        amount = Decimal(amount)
        if not amount.is_finite() or amount <= 0:
            raise ValidationError(
                f"Bank amount for {row.name} must be positive, got {amount}"
            )
        row.bank_amount = amount

    def select_all_unpaid(self) -> None:
        for row in self._rows:
            row.selected = row.is_payable

    def deselect_all(self) -> None:
        for row in self._rows:
            row.selected = False

    def selected_rows(self) -> list[PayableView]:
        """Selected, not yet paid rows in review order."""
        return [r for r in self._rows if r.selected and not r.is_paid]

    @property
    def totals(self) -> SelectionTotals:
        selected = self.selected_rows()
        unpaid = [r for r in self._rows if r.is_payable]
        with_cash = [r for r in self._rows if r.cash_salary > 0 and not r.is_paid]

        return SelectionTotals(
            selected_count=len(selected),
            unpaid_count=len(unpaid),
            paid_count=sum(1 for r in self._rows if r.is_paid),
            with_cash_count=len(with_cash),
            bank_total=sum((r.bank_amount for r in selected), Decimal("0")),
            deduction_total=sum((r.deduction for r in selected), Decimal("0")),
            cash_pending_total=sum((r.cash_salary for r in with_cash), Decimal("0")),
        )

    def reload(self, views: list[PayableView]) -> None:
        """Replace rows after an upstream change.

        Operator choices survive for rows that are still present and still
        unpaid. Rows that became paid keep the aggregator's defaults, which
        deselects them.
        """
        previous = {r.employee_id: r for r in self._rows}
        for view in views:
            old = previous.get(view.employee_id)
            if old is None or view.is_paid or old.is_paid:
                continue
            view.selected = old.selected
            if old.bank_amount != old.net_bank_salary:
                view.bank_amount = old.bank_amount
        self._rows = list(views)
