"""Tests for the database wrapper."""
import asyncio

import pytest
from sqlalchemy import inspect

from prreviewer.core.models import Team
from prreviewer.core.storage import SERIALIZABLE, get_db, init_db


@pytest.mark.asyncio
async def test_init_db_registers_global_instance(tmp_path):
    """Test the process-wide database accessor."""
    db = init_db(f"sqlite+aiosqlite:///{tmp_path / 'global.db'}")
    try:
        assert get_db() is db
        assert db.dialect_name == "sqlite"
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_create_and_drop_tables(db):
    async with db.session() as session:
        connection = await session.connection()
        tables = await connection.run_sync(lambda conn: inspect(conn).get_table_names())
    assert set(tables) == {"teams", "users", "pull_requests", "assigned_reviewers"}

    await db.drop_tables()

    async with db.session() as session:
        connection = await session.connection()
        tables = await connection.run_sync(lambda conn: inspect(conn).get_table_names())
    assert tables == []

    await db.create_tables()


@pytest.mark.asyncio
async def test_write_transactions_run_one_at_a_time(db):
    """A second write transaction cannot start its reads until the first commits."""
    first_inside = asyncio.Event()
    release_first = asyncio.Event()
    order = []

    async def first():
        async with db.transaction(isolation_level=SERIALIZABLE) as session:
            await session.get(Team, "alpha")
            order.append("first-begin")
            first_inside.set()
            await release_first.wait()
            session.add(Team(name="alpha"))
            await session.flush()
            order.append("first-commit")

    async def second():
        await first_inside.wait()
        async with db.transaction() as session:
            existing = await session.get(Team, "alpha")
            order.append("second-begin")
            return existing

    first_task = asyncio.create_task(first())
    second_task = asyncio.create_task(second())
    await first_inside.wait()
    await asyncio.sleep(0.2)
    assert order == ["first-begin"]

    release_first.set()
    await first_task
    existing = await second_task

    assert order == ["first-begin", "first-commit", "second-begin"]
    assert existing is not None
