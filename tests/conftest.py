"""Shared fixtures: a throwaway SQLite database per test and an ASGI client bound to it."""
import os

# Settings are read once at import; point the module engine at SQLite before teamcap loads.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import teamcap.models  # noqa: F401
from teamcap.database import Base, get_db
from teamcap.main import app
from teamcap.schemas.iteration import Iteration


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'teamcap.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def two_week_iteration() -> Iteration:
    # Mon 2024-03-04 .. Fri 2024-03-15: 10 working days
    return Iteration(id=1, project_id=1, name="Iteration 1", start_date=date(2024, 3, 4), end_date=date(2024, 3, 15))


@pytest.fixture
def longer_iteration() -> Iteration:
    # Mon 2024-03-18 .. Thu 2024-04-04: 14 working days
    return Iteration(id=2, project_id=1, name="Iteration 2", start_date=date(2024, 3, 18), end_date=date(2024, 4, 4))
