"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payday.services.leave_service import LeaveService
from payday.stores.sql import SqlEmployeeDirectory, SqlLeaveStore, SqlPaymentStore


@dataclass(frozen=True)
class Stores:
    """The three record stores backing a request."""

    directory: SqlEmployeeDirectory
    leaves: SqlLeaveStore
    payments: SqlPaymentStore


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Session factory configured at app startup."""
    return request.app.state.session_factory


SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]


async def get_db_session(factory: SessionFactory) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_stores(factory: SessionFactory) -> Stores:
    return Stores(
        directory=SqlEmployeeDirectory(factory),
        leaves=SqlLeaveStore(factory),
        payments=SqlPaymentStore(factory),
    )


def get_leave_service(stores: Annotated[Stores, Depends(get_stores)]) -> LeaveService:
    return LeaveService(stores.leaves, stores.directory)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
StoresDep = Annotated[Stores, Depends(get_stores)]
LeaveServiceDep = Annotated[LeaveService, Depends(get_leave_service)]
