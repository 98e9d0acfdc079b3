"""
tests/test_database.py - Global engine lifecycle and setup helpers.
"""
import pytest

from database import (
    TABLES,
    check_database_exists,
    close_engine,
    create_tables,
    drop_tables,
    get_session,
    get_table_counts_async,
    init_engine,
)
from repositories import TerritoryRepository


@pytest.fixture
async def engine(tmp_path):
    db_path = tmp_path / "engine.db"
    await init_engine(f"sqlite+aiosqlite:///{db_path}")
    yield db_path
    await close_engine()


class TestGlobalEngine:
    async def test_tables_and_counts(self, engine):
        assert await get_table_counts_async() == {table: 0 for table in TABLES}

        await create_tables()
        assert check_database_exists(engine)

        async with get_session() as session:
            await TerritoryRepository(session).create_territory("paris", "Paris")

        counts = await get_table_counts_async()
        assert counts["territories"] == 1
        assert counts["votable_territories"] == 0

    async def test_session_rolls_back_on_error(self, engine):
        await create_tables()

        with pytest.raises(RuntimeError):
            async with get_session() as session:
                await TerritoryRepository(session).create_territory("paris", "Paris")
                raise RuntimeError("abort")

        async with get_session() as session:
            assert await TerritoryRepository(session).exists("paris") is False

    async def test_drop_tables(self, engine):
        await create_tables()
        await drop_tables()
        assert await get_table_counts_async() == {table: 0 for table in TABLES}
