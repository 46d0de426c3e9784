from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionManager:
    """Runs a callback inside one database transaction.

    Commits when the callback returns and rolls back when it raises.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def execute_transaction(self, action: str, callback: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self._session_factory() as session:
            try:
                result = await callback(session)
                await session.commit()
            except Exception:
                logger.debug("Transaction %s rolled back", action)
                await session.rollback()
                raise
            return result

    async def read(self, callback: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Run a read-only callback in a fresh session."""
        async with self._session_factory() as session:
            return await callback(session)
