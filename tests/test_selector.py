"""Tests for the candidate selector."""
import random

import pytest

from prreviewer.core.assignment import CandidateSelector

from .conftest import members


def test_pick_respects_bounds_and_exclusions():
    """Every pick is bounded, distinct and free of excluded ids."""
    pool = ["a", "b", "c", "d", "e", "f"]

    for seed in range(25):
        selector = CandidateSelector(random.Random(seed))
        for limit in range(0, 8):
            for exclude in (None, "", "a", "zz"):
                block = {"b", "c"} if seed % 2 else set()
                picked = selector.pick(pool, exclude=exclude, block=block, limit=limit)

                assert len(picked) <= limit
                assert len(picked) == len(set(picked))
                assert set(picked) <= set(pool)
                assert not set(picked) & block
                if exclude:
                    assert exclude not in picked


def test_pick_returns_all_eligible_when_limit_is_large():
    """A limit above the pool size returns every eligible candidate."""
    selector = CandidateSelector(random.Random(3))
    picked = selector.pick(["a", "b", "c"], exclude="a", limit=10)
    assert sorted(picked) == ["b", "c"]


def test_pick_empty_pool_is_not_an_error():
    """No eligible candidates yields an empty list."""
    selector = CandidateSelector(random.Random(3))
    assert selector.pick([], limit=2) == []
    assert selector.pick(["a"], exclude="a", limit=2) == []
    assert selector.pick(["a", "b"], block={"a", "b"}, limit=2) == []


def test_pick_deduplicates_input():
    """Duplicate ids in the input never produce duplicate picks."""
    selector = CandidateSelector(random.Random(9))
    picked = selector.pick(["a", "a", "b", "b"], limit=4)
    assert sorted(picked) == ["a", "b"]


def test_same_seed_gives_same_choice():
    """Injected generators make selection reproducible."""
    pool = [f"u{i}" for i in range(10)]
    first = CandidateSelector(random.Random(42)).pick(pool, limit=3)
    second = CandidateSelector(random.Random(42)).pick(pool, limit=3)
    assert first == second


@pytest.mark.asyncio
async def test_select_only_returns_active_members_of_team(db, engine):
    """Inactive users and members of other teams are never selected."""
    await engine.add_team(
        "backend",
        members(("u1", "Alice"), ("u2", "Bob"), ("u3", "Carol", False), ("u4", "Dave")),
    )
    await engine.add_team("frontend", members(("f1", "Erin"), ("f2", "Finn")))

    selector = CandidateSelector(random.Random(5))
    for _ in range(10):
        async with db.session() as session:
            picked = await selector.select(session, "backend", exclude="u1", limit=5)
        assert sorted(picked) == ["u2", "u4"]

    async with db.session() as session:
        picked = await selector.select(session, "backend", block={"u1", "u2", "u4"}, limit=1)
    assert picked == []


@pytest.mark.asyncio
async def test_select_unknown_team_is_empty(db):
    """Selecting from a team with no members returns nothing."""
    selector = CandidateSelector(random.Random(5))
    async with db.session() as session:
        assert await selector.select(session, "ghosts", limit=2) == []
