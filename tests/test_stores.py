"""Tests for the change feed, document resolution and in-memory stores."""

from datetime import date
from decimal import Decimal

import pytest

from payday.calculators.types import LeaveStatus, PaymentStatus, PaymentType
from payday.errors import PersistenceError
from payday.stores.documents import UNKNOWN_NAME, resolve_name, snapshot_from_document
from payday.stores.feed import ChangeFeed

from factories import MONTH, make_leave, make_payment


class TestChangeFeed:
    """Test snapshot delivery to subscribers."""

    def test_publish_filters_per_subscriber(self):
        feed: ChangeFeed[int] = ChangeFeed("numbers")
        evens, everything = [], []
        feed.subscribe(evens.append, accepts=lambda n: n % 2 == 0)
        feed.subscribe(everything.append)

        feed.publish(range(5))

        assert evens == [[0, 2, 4]]
        assert everything == [[0, 1, 2, 3, 4]]

    def test_unsubscribe(self):
        feed: ChangeFeed[int] = ChangeFeed("numbers")
        received = []
        unsubscribe = feed.subscribe(received.append)

        unsubscribe()
        unsubscribe()
        feed.publish([1])

        assert received == []
        assert len(feed) == 0

    def test_failing_subscriber_isolated(self, caplog):
        feed: ChangeFeed[int] = ChangeFeed("numbers")
        received = []

        def broken(snapshot):
            raise RuntimeError("render failed")

        feed.subscribe(broken)
        feed.subscribe(received.append)

        errors = feed.publish([1, 2])

        assert received == [[1, 2]]
        assert len(errors) == 1
        assert isinstance(errors[0], RuntimeError)
        assert "numbers feed" in caplog.text


class TestDocuments:
    """Test legacy employee document fields."""

    def test_name_precedence(self):
        assert resolve_name("Full", "Legacy", "First", "Last") == "Full"
        assert resolve_name(None, "Legacy", "First", "Last") == "Legacy"
        assert resolve_name("", "", "First", "Last") == "First Last"
        assert resolve_name(first_name="First") == "First"
        assert resolve_name() == UNKNOWN_NAME

    def test_snapshot_from_nested_document(self):
        snapshot = snapshot_from_document(
            "e1",
            {
                "personal_info": {"full_name": "Ayla Aksoy"},
                "salary_info": {
                    "monthly_salary": 3000.5,
                    "cash_salary": "250",
                    "lastPaymentDate": "2026-09-28",
                    "lastPaymentMonth": "2026-09",
                    "lastBankPayment": "2700",
                },
                "employment_info": {"position": "Cook"},
            },
        )

        assert snapshot.name == "Ayla Aksoy"
        assert snapshot.bank_salary == Decimal("3000.5")
        assert snapshot.cash_salary == Decimal("250")
        assert snapshot.status == "active"
        assert snapshot.position == "Cook"
        assert snapshot.last_payment_date == date(2026, 9, 28)
        assert snapshot.last_payment_month == "2026-09"
        assert snapshot.last_bank_payment == Decimal("2700")

    def test_snapshot_from_legacy_document(self):
        snapshot = snapshot_from_document(
            "e2",
            {
                "firstName": "Cem",
                "lastName": "Coskun",
                "salary": 2000,
                "cashSalary": 100,
                "employment_info": {"role": "Waiter"},
                "status": "aktif",
            },
        )

        assert snapshot.name == "Cem Coskun"
        assert snapshot.bank_salary == Decimal("2000")
        assert snapshot.cash_salary == Decimal("100")
        assert snapshot.position == "Waiter"
        assert snapshot.is_active
        assert snapshot.last_bank_payment is None

    def test_empty_document(self):
        snapshot = snapshot_from_document("e3", {})
        assert snapshot.name == UNKNOWN_NAME
        assert snapshot.bank_salary == Decimal("0")


@pytest.mark.asyncio
class TestInMemoryStores:
    """Test the in-memory adapters."""

    async def test_subscribe_delivers_initial_snapshot(self, directory):
        received = []
        await directory.subscribe(received.append)

        assert len(received) == 1
        assert {e.employee_id for e in received[0]} == set(directory._documents)

    async def test_leave_subscription_filters_month(self, leave_store):
        received = []
        await leave_store.subscribe(received.append, month=MONTH)

        await leave_store.append(make_leave(month="2026-09"))
        await leave_store.append(make_leave(month=MONTH))

        assert [len(s) for s in received] == [0, 0, 1]

    async def test_soft_deleted_leave_dropped_from_feed(self, leave_store):
        received = []
        entry = await leave_store.append(make_leave())
        await leave_store.subscribe(received.append)

        await leave_store.soft_delete(entry.leave_id)

        assert received[-1] == []
        assert (await leave_store.get(entry.leave_id)).status == LeaveStatus.DELETED

    async def test_duplicate_leave_id_rejected(self, leave_store):
        entry = make_leave()
        await leave_store.append(entry)
        with pytest.raises(PersistenceError):
            await leave_store.append(entry)

    async def test_one_bank_payment_per_employee_and_month(self, payment_store):
        await payment_store.append(make_payment("emp-a"))

        with pytest.raises(PersistenceError):
            await payment_store.append(make_payment("emp-a"))

        await payment_store.append(make_payment("emp-a", month="2026-11"))
        await payment_store.append(
            make_payment("emp-a", payment_type=PaymentType.CASH)
        )
        assert len(await payment_store.list_payments()) == 3

    async def test_payment_subscription_filters(self, payment_store):
        received = []
        await payment_store.subscribe(
            received.append,
            month=MONTH,
            status=PaymentStatus.PAID,
            payment_type=PaymentType.BANK,
        )

        await payment_store.append(make_payment("emp-a", payment_type=PaymentType.CASH))
        await payment_store.append(make_payment("emp-b"))

        assert [len(s) for s in received] == [0, 0, 1]

    async def test_record_bank_payment_missing_employee(self, directory):
        with pytest.raises(PersistenceError):
            await directory.record_bank_payment(
                "ghost",
                payment_date=date(2026, 10, 28),
                month=MONTH,
                amount=Decimal("100"),
            )
