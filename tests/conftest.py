"""Shared fixtures: a throwaway SQLite database per test and seeded teams."""
import random

import pytest

from prreviewer.core.assignment import AssignmentEngine, CandidateSelector
from prreviewer.core.schemas import TeamMember
from prreviewer.core.storage.database import Database


def members(*entries):
    """Build TeamMember entries from (user_id, username[, is_active]) tuples."""
    return [
        TeamMember(user_id=entry[0], username=entry[1], is_active=entry[2] if len(entry) > 2 else True)
        for entry in entries
    ]


@pytest.fixture
async def db(tmp_path):
    """Create test database."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'prreviewer.db'}")
    await database.create_tables()
    yield database
    await database.drop_tables()
    await database.close()


@pytest.fixture
def engine(db: Database):
    """Assignment engine with a seeded randomness source."""
    return AssignmentEngine(db, CandidateSelector(random.Random(1234)))


@pytest.fixture
async def backend(engine: AssignmentEngine):
    """Team backend = {u1, u2, u3}, all active."""
    return await engine.add_team(
        "backend", members(("u1", "Alice"), ("u2", "Bob"), ("u3", "Carol"))
    )


@pytest.fixture
async def platform(engine: AssignmentEngine):
    """Team platform = {p1, p2, p3, p4}, all active."""
    return await engine.add_team(
        "platform", members(("p1", "Dan"), ("p2", "Eve"), ("p3", "Frank"), ("p4", "Grace"))
    )
