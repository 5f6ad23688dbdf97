"""Pytest fixtures for payday engine tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payday.database import create_schema, make_session_factory
from payday.models import Employee
from payday.stores.memory import (
    InMemoryEmployeeDirectory,
    InMemoryLeaveStore,
    InMemoryPaymentStore,
)

from factories import employee_documents

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ============================================================================
# In-memory stores
# ============================================================================


@pytest.fixture
def directory() -> InMemoryEmployeeDirectory:
    return InMemoryEmployeeDirectory(employee_documents())


@pytest.fixture
def leave_store() -> InMemoryLeaveStore:
    return InMemoryLeaveStore()


@pytest.fixture
def payment_store() -> InMemoryPaymentStore:
    return InMemoryPaymentStore()


# ============================================================================
# SQL stores
# ============================================================================


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with the schema in place."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest_asyncio.fixture
async def seeded_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> async_sessionmaker[AsyncSession]:
    """Session factory over a database holding the sample roster."""
    async with session_factory() as session, session.begin():
        session.add_all(
            [
                Employee(
                    employee_id="emp-a",
                    personal_full_name="Ayla Aksoy",
                    position="Cook",
                    status="active",
                    monthly_salary=Decimal("3000"),
                    cash_salary=Decimal("500"),
                ),
                Employee(
                    employee_id="emp-b",
                    full_name="Baran Bilgin",
                    position="Waiter",
                    status="aktif",
                    legacy_salary=Decimal("2000"),
                ),
                Employee(
                    employee_id="emp-c",
                    first_name="Cem",
                    last_name="Coskun",
                    monthly_salary=Decimal("4500"),
                ),
                Employee(
                    employee_id="emp-inactive",
                    full_name="Derya Dag",
                    status="terminated",
                    monthly_salary=Decimal("2500"),
                ),
            ]
        )
    return session_factory
