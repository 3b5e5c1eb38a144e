"""Candidate selector: uniform random choice of eligible reviewers.

Eligible means: active, member of the given team, not the excluded user
and not in the block set. The randomness source is injected so tests can
substitute a seeded generator; production uses system entropy.
"""
import random
from collections.abc import Iterable
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import User


class CandidateSelector:
    """Selects reviewer candidates from a team.

    Usage:
        selector = CandidateSelector(random.Random(42))
        ids = await selector.select(session, "backend", exclude="u1", limit=2)
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def pick(
        self,
        candidates: Iterable[str],
        exclude: Optional[str] = None,
        block: Optional[set[str]] = None,
        limit: int = 1,
    ) -> list[str]:
        """Filter, shuffle and truncate an iterable of user ids.

        Args:
            candidates: Active members of the team, in any order
            exclude: Single id to drop; None or "" means none
            block: Further ids to drop
            limit: Maximum number of ids returned

        Returns:
            Up to `limit` distinct ids in random order; empty when none qualify
        """
        if limit <= 0:
            return []

        blocked = set(block or ())
        if exclude:
            blocked.add(exclude)

        # dict.fromkeys dedupes while keeping first-seen order
        eligible = [uid for uid in dict.fromkeys(candidates) if uid not in blocked]
        self._rng.shuffle(eligible)
        return eligible[:limit]

    async def select(
        self,
        session: AsyncSession,
        team_name: str,
        exclude: Optional[str] = None,
        block: Optional[set[str]] = None,
        limit: int = 1,
    ) -> list[str]:
        """Read the active members of a team and pick up to `limit` of them.

        Runs on the caller's session so the read belongs to the caller's
        transaction.
        """
        result = await session.execute(
            select(User.user_id)
            .where(User.team_name == team_name, User.is_active.is_(True))
            .order_by(User.user_id)
        )
        return self.pick(result.scalars().all(), exclude=exclude, block=block, limit=limit)
