"""Read-only queries over teams, reviews and assignment statistics."""
from sqlalchemy import exists, func, select

from .errors import UserNotFoundError
from .models import PullRequest, PullRequestStatus, ReviewerAssignment, User
from .schemas import AssignmentStats, PullRequestShort, Team, UserReviews
from .storage import queries
from .storage.base import TransactionalStore


class ReviewQueries:
    """Point-in-time reads. Never opens write transactions, never retries."""

    def __init__(self, store: TransactionalStore):
        self.store = store

    async def get_team(self, team_name: str) -> Team:
        """Team roster ordered by user_id.

        Raises:
            TeamNotFoundError: If the team is neither registered nor has members
        """
        async with self.store.session() as session:
            return await queries.team_roster(session, team_name)

    async def user_reviews(self, user_id: str) -> UserReviews:
        """Pull requests the user is currently assigned to, ordered by id.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        async with self.store.session() as session:
            if not await session.scalar(select(exists().where(User.user_id == user_id))):
                raise UserNotFoundError()

            result = await session.execute(
                select(
                    PullRequest.pr_id,
                    PullRequest.pr_name,
                    PullRequest.author_id,
                    PullRequest.status,
                )
                .join(ReviewerAssignment, ReviewerAssignment.pr_id == PullRequest.pr_id)
                .where(ReviewerAssignment.user_id == user_id)
                .order_by(PullRequest.pr_id)
            )
            pull_requests = [
                PullRequestShort(
                    pull_request_id=row.pr_id,
                    pull_request_name=row.pr_name,
                    author_id=row.author_id,
                    status=row.status,
                )
                for row in result.all()
            ]

        return UserReviews(user_id=user_id, pull_requests=pull_requests)

    async def stats(self) -> AssignmentStats:
        """Assignment count per registered user plus open/merged PR totals."""
        async with self.store.session() as session:
            per_user = await session.execute(
                select(User.user_id, func.count(ReviewerAssignment.pr_id))
                .outerjoin(ReviewerAssignment, ReviewerAssignment.user_id == User.user_id)
                .group_by(User.user_id)
            )
            assignments_per_user = {user_id: count for user_id, count in per_user.all()}

            by_status = await session.execute(
                select(PullRequest.status, func.count()).group_by(PullRequest.status)
            )
            status_counts = {status: count for status, count in by_status.all()}

        return AssignmentStats(
            assignments_per_user=assignments_per_user,
            open_prs=status_counts.get(PullRequestStatus.OPEN.value, 0),
            merged_prs=status_counts.get(PullRequestStatus.MERGED.value, 0),
        )
