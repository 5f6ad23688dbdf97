"""Record store protocols and adapters.

The SQL adapters live in `payday.stores.sql` and are imported explicitly,
so the ORM is only loaded where it is used.
"""

from payday.stores.base import EmployeeDirectory, LeaveRecordStore, PaymentRecordStore
from payday.stores.feed import ChangeFeed
from payday.stores.memory import (
    InMemoryEmployeeDirectory,
    InMemoryLeaveStore,
    InMemoryPaymentStore,
)

__all__ = [
    "ChangeFeed",
    "EmployeeDirectory",
    "InMemoryEmployeeDirectory",
    "InMemoryLeaveStore",
    "InMemoryPaymentStore",
    "LeaveRecordStore",
    "PaymentRecordStore",
]
