import os
import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

sys.path.append(str(Path(__file__).parents[1] / "src"))

from ledger.config import settings
from ledger.db.session import get_db
from ledger.main import app
from ledger.models.base import Base


@pytest.fixture
async def test_engine(tmp_path: Path):
    """Create tables for tests that need the database, and drop them after.

    Uses ``TEST_DATABASE_URL`` when set (e.g. a local Postgres), otherwise a
    throwaway SQLite file. Not autouse, so pure unit tests run without it.
    """
    url = os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'ledger_test.db'}"
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Provide test database session with fresh connection per test."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write CSV text to a file under the test's temp dir and return its path."""
    counter = {"n": 0}

    def _write(content: str, name: str | None = None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"import_{counter['n']}.csv")
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point uploads at the test's temp dir."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", path)
    return path


@pytest.fixture
async def client(db_session: AsyncSession, upload_dir: Path):
    """Provide test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
