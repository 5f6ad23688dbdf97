"""Exception types shared by the leave and disbursement services."""

from __future__ import annotations

from decimal import Decimal


class PaydayError(Exception):
    """Base class for all engine errors."""


class ValidationError(PaydayError, ValueError):
    """Operator input rejected before any write happens."""


class ConfigurationError(PaydayError):
    """Data reached the engine that the rule set does not know about.

    This is a programming or data-integrity error, never a user error.
    """


class PersistenceError(PaydayError):
    """A store write or lookup failed."""

    def __init__(self, message: str, record_id: str | None = None):
        self.record_id = record_id
        super().__init__(message)


class ConfirmationRequired(PaydayError):
    """Commit attempted without acknowledging the computed total."""

    def __init__(self, employee_count: int, total: Decimal):
        self.employee_count = employee_count
        self.total = total
        super().__init__(
            f"Bank payment of {total} to {employee_count} employee(s) "
            "must be confirmed before it is processed"
        )
