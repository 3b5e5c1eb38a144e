"""Bounded retry with linear backoff for write operations."""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from ..errors import InternalStoreError, PRReviewerError, TransientStoreError
from ..storage.errors import classify_error, is_transient

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 0.01


def translate_store_error(error: SQLAlchemyError) -> PRReviewerError:
    """Turn a raw storage exception into the matching domain error."""
    kind = classify_error(error)
    if is_transient(kind):
        return TransientStoreError(f"store conflict ({kind.value})")
    return InternalStoreError()


class RetryCoordinator:
    """Re-runs an operation while it fails with a transient store error.

    Domain errors (not found, already exists, conflicts) are deterministic
    outcomes of committed state and propagate on the first attempt, as do
    unclassified storage faults. Each attempt must open its own transaction.

    Usage:
        retry = RetryCoordinator(attempts=3, base_delay=0.01)
        pr = await retry.run(lambda: engine.create_pull_request(...), "create_pr")
    """

    def __init__(
        self,
        attempts: int = DEFAULT_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.attempts = attempts
        self.base_delay = base_delay
        self._sleep = sleep or asyncio.sleep

    def delay_for(self, attempt: int) -> float:
        """Backoff before the attempt following `attempt` (1-based)."""
        return attempt * self.base_delay

    async def run(self, operation: Callable[[], Awaitable[T]], name: str = "operation") -> T:
        """Run `operation` up to `attempts` times.

        Args:
            operation: Zero-argument callable returning a fresh awaitable
            name: Operation name for log messages

        Returns:
            The operation's result

        Raises:
            PRReviewerError: Domain errors unchanged; TransientStoreError once
                attempts are exhausted; InternalStoreError for other faults
        """
        last_error: Optional[SQLAlchemyError] = None

        for attempt in range(1, self.attempts + 1):
            try:
                return await operation()
            except PRReviewerError:
                raise
            except SQLAlchemyError as e:
                kind = classify_error(e)
                if not is_transient(kind):
                    raise InternalStoreError() from e

                last_error = e
                if attempt == self.attempts:
                    break

                delay = self.delay_for(attempt)
                logger.warning(
                    f"{name} hit a transient store error ({kind.value}), "
                    f"retrying in {delay:.3f}s (attempt {attempt}/{self.attempts})"
                )
                await self._sleep(delay)

        logger.error(f"{name} failed after {self.attempts} attempts: {last_error}")
        raise translate_store_error(last_error) from last_error
