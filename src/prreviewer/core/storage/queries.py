"""Statements shared by the assignment engine and the read-only queries."""
from typing import Any

from sqlalchemy import Insert, delete, exists, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import PullRequestNotFoundError, TeamNotFoundError
from ..models import PullRequest, ReviewerAssignment, Team, User
from ..schemas import PullRequest as PullRequestSchema
from ..schemas import Team as TeamSchema
from ..schemas import TeamMember


async def team_exists(session: AsyncSession, team_name: str) -> bool:
    return bool(await session.scalar(select(exists().where(Team.name == team_name))))


async def pull_request_exists(session: AsyncSession, pr_id: str) -> bool:
    return bool(await session.scalar(select(exists().where(PullRequest.pr_id == pr_id))))


async def reviewer_ids(session: AsyncSession, pr_id: str) -> list[str]:
    """Currently assigned reviewers of a pull request, ordered by user_id."""
    result = await session.execute(
        select(ReviewerAssignment.user_id)
        .where(ReviewerAssignment.pr_id == pr_id)
        .order_by(ReviewerAssignment.user_id)
    )
    return list(result.scalars().all())


async def load_pull_request(session: AsyncSession, pr_id: str) -> PullRequestSchema:
    """Read a pull request together with its reviewer list.

    Raises:
        PullRequestNotFoundError: If no such pull request exists
    """
    row = (
        await session.execute(
            select(
                PullRequest.pr_id,
                PullRequest.pr_name,
                PullRequest.author_id,
                PullRequest.status,
                PullRequest.created_at,
                PullRequest.merged_at,
            ).where(PullRequest.pr_id == pr_id)
        )
    ).one_or_none()
    if row is None:
        raise PullRequestNotFoundError()

    return PullRequestSchema(
        pull_request_id=row.pr_id,
        pull_request_name=row.pr_name,
        author_id=row.author_id,
        status=row.status,
        assigned_reviewers=await reviewer_ids(session, pr_id),
        created_at=row.created_at,
        merged_at=row.merged_at,
    )


async def team_roster(session: AsyncSession, team_name: str) -> TeamSchema:
    """Read a team and its members ordered by user_id.

    A registered team without members is returned with an empty list.

    Raises:
        TeamNotFoundError: If the team has no members and is not registered
    """
    result = await session.execute(
        select(User.user_id, User.username, User.is_active)
        .where(User.team_name == team_name)
        .order_by(User.user_id)
    )
    members = [
        TeamMember(user_id=row.user_id, username=row.username, is_active=row.is_active)
        for row in result.all()
    ]
    if not members and not await team_exists(session, team_name):
        raise TeamNotFoundError()
    return TeamSchema(team_name=team_name, members=members)


async def replace_reviewer(session: AsyncSession, pr_id: str, old_id: str, new_id: str) -> None:
    await remove_reviewer(session, pr_id, old_id)
    await session.execute(insert(ReviewerAssignment).values(pr_id=pr_id, user_id=new_id))


async def remove_reviewer(session: AsyncSession, pr_id: str, user_id: str) -> None:
    await session.execute(
        delete(ReviewerAssignment).where(
            ReviewerAssignment.pr_id == pr_id,
            ReviewerAssignment.user_id == user_id,
        )
    )


def user_upsert(dialect_name: str, rows: list[dict[str, Any]]) -> Insert:
    """Build INSERT ... ON CONFLICT (user_id) DO UPDATE for the dialect.

    Args:
        dialect_name: 'postgresql' or 'sqlite'
        rows: Dicts with user_id, username, is_active, team_name

    Raises:
        ValueError: For dialects without ON CONFLICT support
    """
    if dialect_name == "postgresql":
        stmt = postgresql.insert(User).values(rows)
    elif dialect_name == "sqlite":
        stmt = sqlite.insert(User).values(rows)
    else:
        raise ValueError(f"Upsert not supported for dialect: {dialect_name}")

    return stmt.on_conflict_do_update(
        index_elements=[User.user_id],
        set_={
            "username": stmt.excluded.username,
            "is_active": stmt.excluded.is_active,
            "team_name": stmt.excluded.team_name,
        },
    )
