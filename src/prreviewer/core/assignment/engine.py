"""Transactional reviewer assignment for pull requests.

Every public operation opens exactly one transaction on the store and
either commits all of its writes or none of them. Operations whose
correctness depends on the reviewer set staying unchanged between read
and write (reassignment, team deactivation) run at SERIALIZABLE and lock
the rows they are about to rewrite; a concurrent writer makes one of the
transactions fail with a serialization error, which the retry coordinator
turns into another attempt.

Invariants kept at every commit:
- A pull request's author is never one of its reviewers.
- A merged pull request's reviewer set never changes.
- Replacement reviewers come from the team of the reviewer they replace
  (from the author's team at creation).
- merged_at is written once, on the first merge.
"""
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func, literal, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import (
    NoCandidateError,
    PullRequestExistsError,
    PullRequestMergedError,
    PullRequestNotFoundError,
    ReviewerNotAssignedError,
    TeamExistsError,
    TeamNotFoundError,
    UserNotFoundError,
)
from ..models import PullRequest, PullRequestStatus, ReviewerAssignment, Team, User
from ..schemas import PullRequest as PullRequestSchema
from ..schemas import Team as TeamSchema
from ..schemas import TeamDeactivation, TeamMember
from ..schemas import User as UserSchema
from ..storage import SERIALIZABLE, StoreErrorKind, classify_error, queries
from ..storage.base import TransactionalStore
from ..storage.types import UTCDateTime, as_utc
from .selector import CandidateSelector

logger = logging.getLogger(__name__)

MAX_REVIEWERS_ON_CREATE = 2


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AssignmentEngine:
    """Mutates pull request and reviewer state inside store transactions.

    Args:
        store: Transactional store (a Database in production)
        selector: Candidate selector; owns the randomness source
        clock: Returns the current UTC time for created_at/merged_at
    """

    def __init__(
        self,
        store: TransactionalStore,
        selector: Optional[CandidateSelector] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.selector = selector or CandidateSelector()
        self.clock = clock

    async def add_team(self, team_name: str, members: Iterable[TeamMember]) -> TeamSchema:
        """Register a team and upsert its members.

        Members are deduplicated by user_id (last occurrence wins) and
        entries without a user_id are skipped. An existing user is moved
        into this team with the given name and activity flag.

        Raises:
            TeamExistsError: If the team name is already registered
        """
        unique: dict[str, TeamMember] = {}
        for member in members:
            if member.user_id:
                unique[member.user_id] = member

        async with self.store.transaction() as session:
            session.add(Team(name=team_name))
            await self._flush_unique(session, TeamExistsError)

            if unique:
                rows: list[dict[str, Any]] = [
                    {
                        "user_id": m.user_id,
                        "username": m.username,
                        "is_active": m.is_active,
                        "team_name": team_name,
                    }
                    for m in unique.values()
                ]
                await session.execute(queries.user_upsert(self.store.dialect_name, rows))

            team = await queries.team_roster(session, team_name)

        logger.info(f"Registered team {team_name} with {len(team.members)} members")
        return team

    async def set_user_active(self, user_id: str, is_active: bool) -> UserSchema:
        """Flip one user's activity flag. Existing assignments are untouched.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        async with self.store.transaction() as session:
            result = await session.execute(
                update(User)
                .where(User.user_id == user_id)
                .values(is_active=is_active)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise UserNotFoundError()

            row = (
                await session.execute(
                    select(User.user_id, User.username, User.team_name, User.is_active)
                    .where(User.user_id == user_id)
                )
            ).one()

        return UserSchema(
            user_id=row.user_id,
            username=row.username,
            team_name=row.team_name,
            is_active=row.is_active,
        )

    async def create_pull_request(
        self, pr_id: str, name: str, author_id: str
    ) -> PullRequestSchema:
        """Create an OPEN pull request and assign up to two reviewers.

        Reviewers are active members of the author's team, never the author.
        The pull request row and its assignments commit together.

        Raises:
            PullRequestExistsError: If pr_id is taken (also on an insert race)
            UserNotFoundError: If the author does not exist
            TeamNotFoundError: If the author's team vanished concurrently
        """
        async with self.store.transaction() as session:
            if await queries.pull_request_exists(session, pr_id):
                raise PullRequestExistsError()

            team_name = await session.scalar(
                select(User.team_name).where(User.user_id == author_id)
            )
            if team_name is None:
                raise UserNotFoundError()
            if not await queries.team_exists(session, team_name):
                raise TeamNotFoundError()

            reviewers = await self.selector.select(
                session, team_name, exclude=author_id, limit=MAX_REVIEWERS_ON_CREATE
            )

            created_at = as_utc(self.clock())
            session.add(
                PullRequest(
                    pr_id=pr_id,
                    pr_name=name,
                    author_id=author_id,
                    status=PullRequestStatus.OPEN.value,
                    created_at=created_at,
                )
            )
            await self._flush_unique(session, PullRequestExistsError)

            session.add_all(
                ReviewerAssignment(pr_id=pr_id, user_id=reviewer) for reviewer in reviewers
            )
            await session.flush()

        logger.info(f"Created PR {pr_id} by {author_id} with reviewers {reviewers}")
        return PullRequestSchema(
            pull_request_id=pr_id,
            pull_request_name=name,
            author_id=author_id,
            status=PullRequestStatus.OPEN,
            assigned_reviewers=sorted(reviewers),
            created_at=created_at,
        )

    async def merge_pull_request(self, pr_id: str) -> PullRequestSchema:
        """Mark a pull request MERGED. Repeating the call is a no-op.

        Status and merged_at change in one UPDATE; merged_at keeps its first
        value through COALESCE, so concurrent merges cannot both stamp it.

        Raises:
            PullRequestNotFoundError: If the pull request does not exist
        """
        async with self.store.transaction() as session:
            result = await session.execute(
                update(PullRequest)
                .where(PullRequest.pr_id == pr_id)
                .values(
                    status=PullRequestStatus.MERGED.value,
                    merged_at=func.coalesce(
                        PullRequest.merged_at, literal(self.clock(), UTCDateTime())
                    ),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise PullRequestNotFoundError()

            merged = await queries.load_pull_request(session, pr_id)

        logger.info(f"Merged PR {pr_id}")
        return merged

    async def reassign_reviewer(
        self, pr_id: str, old_reviewer_id: str
    ) -> tuple[PullRequestSchema, str]:
        """Replace one reviewer with a random active member of their team.

        Returns:
            (updated pull request, new reviewer id)

        Raises:
            PullRequestNotFoundError: If the pull request does not exist
            PullRequestMergedError: If the pull request is merged
            UserNotFoundError: If the old reviewer does not exist
            ReviewerNotAssignedError: If the old reviewer is not assigned
            NoCandidateError: If no eligible replacement exists
        """
        async with self.store.transaction(isolation_level=SERIALIZABLE) as session:
            header = (
                await session.execute(
                    select(PullRequest.author_id, PullRequest.status)
                    .where(PullRequest.pr_id == pr_id)
                    .with_for_update()
                )
            ).one_or_none()
            if header is None:
                raise PullRequestNotFoundError()
            if header.status == PullRequestStatus.MERGED.value:
                raise PullRequestMergedError()

            current = await queries.reviewer_ids(session, pr_id)

            reviewer_team = await session.scalar(
                select(User.team_name).where(User.user_id == old_reviewer_id)
            )
            if reviewer_team is None:
                raise UserNotFoundError()

            if old_reviewer_id not in current:
                raise ReviewerNotAssignedError()

            block = set(current) | {old_reviewer_id, header.author_id}
            candidates = await self.selector.select(session, reviewer_team, block=block, limit=1)
            if not candidates:
                raise NoCandidateError()

            replacement = candidates[0]
            await queries.replace_reviewer(session, pr_id, old_reviewer_id, replacement)
            updated = await queries.load_pull_request(session, pr_id)

        logger.info(f"Reassigned PR {pr_id}: {old_reviewer_id} -> {replacement}")
        return updated, replacement

    async def deactivate_team(self, team_name: str) -> TeamDeactivation:
        """Deactivate every member of a team and rebalance open pull requests.

        Each open PR reviewed by a member of the team gets that reviewer
        replaced by an active member of the same team, or simply removed
        when there is none. Any failure rolls back the whole operation.

        Raises:
            TeamNotFoundError: If the team is not registered
        """
        reassigned: list[str] = []
        under_reviewed: list[str] = []

        async with self.store.transaction(isolation_level=SERIALIZABLE) as session:
            if not await queries.team_exists(session, team_name):
                raise TeamNotFoundError()

            result = await session.execute(
                update(User)
                .where(User.team_name == team_name)
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )
            deactivated = result.rowcount

            invalidated = (
                await session.execute(
                    select(PullRequest.pr_id, PullRequest.author_id, ReviewerAssignment.user_id)
                    .join(ReviewerAssignment, ReviewerAssignment.pr_id == PullRequest.pr_id)
                    .join(User, User.user_id == ReviewerAssignment.user_id)
                    .where(
                        PullRequest.status == PullRequestStatus.OPEN.value,
                        User.team_name == team_name,
                    )
                    .order_by(PullRequest.pr_id, ReviewerAssignment.user_id)
                    .with_for_update()
                )
            ).all()

            for pr_id, author_id, reviewer_id in invalidated:
                current = await queries.reviewer_ids(session, pr_id)
                block = set(current) | {author_id}
                candidates = await self.selector.select(session, team_name, block=block, limit=1)

                if candidates:
                    await queries.replace_reviewer(session, pr_id, reviewer_id, candidates[0])
                    reassigned.append(pr_id)
                else:
                    await queries.remove_reviewer(session, pr_id, reviewer_id)
                    under_reviewed.append(pr_id)

        summary = TeamDeactivation(
            team_name=team_name,
            deactivated_users=deactivated,
            reassigned_prs=sorted(set(reassigned)),
            under_reviewed_prs=sorted(set(under_reviewed)),
        )
        logger.info(
            f"Deactivated team {team_name}: {deactivated} users, "
            f"{len(summary.reassigned_prs)} PRs rebalanced, "
            f"{len(summary.under_reviewed_prs)} PRs left with fewer reviewers"
        )
        return summary

    @staticmethod
    async def _flush_unique(session: AsyncSession, error_cls: type[Exception]) -> None:
        """Flush pending inserts, mapping a primary key collision to error_cls."""
        try:
            await session.flush()
        except IntegrityError as e:
            if classify_error(e) is StoreErrorKind.UNIQUE_VIOLATION:
                raise error_cls() from e
            raise
