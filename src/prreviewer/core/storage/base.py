"""Base storage interface consumed by the assignment engine."""
from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional

from sqlalchemy.ext.asyncio import AsyncSession


class TransactionalStore(ABC):
    """Abstract relational store with scoped sessions and transactions."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """SQL dialect of the backend, e.g. 'postgresql' or 'sqlite'."""
        pass

    @abstractmethod
    def session(self) -> AsyncContextManager[AsyncSession]:
        """
        Open a session for point-in-time reads.

        Returns:
            Async context manager yielding an AsyncSession
        """
        pass

    @abstractmethod
    def transaction(
        self, isolation_level: Optional[str] = None
    ) -> AsyncContextManager[AsyncSession]:
        """
        Open a session wrapped in a single transaction.

        The transaction commits when the block exits normally and rolls
        back on every other exit path.

        Args:
            isolation_level: Optional isolation level for this transaction

        Returns:
            Async context manager yielding an AsyncSession
        """
        pass
