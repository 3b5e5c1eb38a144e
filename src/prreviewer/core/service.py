"""Reviewer service - the entry point used by the HTTP layer and the CLI."""
import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Iterable
from typing import Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from .assignment import AssignmentEngine, CandidateSelector, RetryCoordinator, translate_store_error
from .config.settings import PRReviewerConfig
from .errors import OperationCanceledError
from .queries import ReviewQueries
from .schemas import (
    AssignmentStats,
    PullRequest,
    Team,
    TeamDeactivation,
    TeamMember,
    User,
    UserReviews,
)
from .storage.base import TransactionalStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReviewerService:
    """Runs engine writes through the retry coordinator and every call
    under an optional deadline.

    Args:
        store: Transactional store shared by engine and queries
        engine: Assignment engine; built from store and rng when omitted
        retry: Retry coordinator for write paths
        operation_timeout: Default deadline in seconds, None for no deadline
        rng: Randomness source for candidate selection
    """

    def __init__(
        self,
        store: TransactionalStore,
        engine: Optional[AssignmentEngine] = None,
        retry: Optional[RetryCoordinator] = None,
        operation_timeout: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.engine = engine or AssignmentEngine(store, CandidateSelector(rng))
        self.queries = ReviewQueries(store)
        self.retry = retry or RetryCoordinator()
        self.operation_timeout = operation_timeout

    @classmethod
    def from_config(
        cls, store: TransactionalStore, config: PRReviewerConfig, rng: Optional[random.Random] = None
    ) -> "ReviewerService":
        return cls(
            store,
            retry=RetryCoordinator(
                attempts=config.retry_attempts, base_delay=config.retry_base_delay
            ),
            operation_timeout=config.operation_timeout,
            rng=rng,
        )

    async def _call(
        self,
        name: str,
        operation: Callable[[], Awaitable[T]],
        retry: bool,
        timeout: Optional[float],
    ) -> T:
        deadline = timeout if timeout is not None else self.operation_timeout
        call = self.retry.run(operation, name) if retry else operation()

        try:
            if deadline is None:
                return await call
            return await asyncio.wait_for(call, deadline)
        except asyncio.TimeoutError as e:
            logger.warning(f"{name} canceled after exceeding its {deadline}s deadline")
            raise OperationCanceledError(f"{name} exceeded its {deadline}s deadline") from e
        except SQLAlchemyError as e:
            # Only reachable on paths without the retry coordinator
            logger.error(f"{name} failed with a storage error: {e}")
            raise translate_store_error(e) from e

    # Writes

    async def add_team(
        self, team_name: str, members: Iterable[TeamMember], timeout: Optional[float] = None
    ) -> Team:
        members = list(members)
        return await self._call(
            "add_team", lambda: self.engine.add_team(team_name, members), True, timeout
        )

    async def set_user_active(
        self, user_id: str, is_active: bool, timeout: Optional[float] = None
    ) -> User:
        return await self._call(
            "set_user_active",
            lambda: self.engine.set_user_active(user_id, is_active),
            False,
            timeout,
        )

    async def create_pull_request(
        self, pr_id: str, name: str, author_id: str, timeout: Optional[float] = None
    ) -> PullRequest:
        return await self._call(
            "create_pull_request",
            lambda: self.engine.create_pull_request(pr_id, name, author_id),
            True,
            timeout,
        )

    async def merge_pull_request(self, pr_id: str, timeout: Optional[float] = None) -> PullRequest:
        return await self._call(
            "merge_pull_request", lambda: self.engine.merge_pull_request(pr_id), False, timeout
        )

    async def reassign_reviewer(
        self, pr_id: str, old_reviewer_id: str, timeout: Optional[float] = None
    ) -> tuple[PullRequest, str]:
        return await self._call(
            "reassign_reviewer",
            lambda: self.engine.reassign_reviewer(pr_id, old_reviewer_id),
            True,
            timeout,
        )

    async def deactivate_team(
        self, team_name: str, timeout: Optional[float] = None
    ) -> TeamDeactivation:
        return await self._call(
            "deactivate_team", lambda: self.engine.deactivate_team(team_name), True, timeout
        )

    # Reads

    async def get_team(self, team_name: str, timeout: Optional[float] = None) -> Team:
        return await self._call(
            "get_team", lambda: self.queries.get_team(team_name), False, timeout
        )

    async def user_reviews(self, user_id: str, timeout: Optional[float] = None) -> UserReviews:
        return await self._call(
            "user_reviews", lambda: self.queries.user_reviews(user_id), False, timeout
        )

    async def stats(self, timeout: Optional[float] = None) -> AssignmentStats:
        return await self._call("stats", self.queries.stats, False, timeout)
