"""
Test infrastructure for the product catalog API.

Strategy
--------
- SQLite in-memory via aiosqlite, so no Postgres instance is needed.
- StaticPool makes every session share the one in-memory connection; a
  second connection would see an empty database.
- Foreign keys are switched on for the test engine, so the store enforces
  referential integrity the same way Postgres does.
- The app's get_db dependency is overridden to hand out test sessions.
- All tables are created before each test and dropped after it.
"""
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, enforce_sqlite_foreign_keys, get_db
from app.main import app
from app.middleware import install_query_counter
from app.models import Category, Product

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)
enforce_sqlite_foreign_keys(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override — replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def expose_error_details(monkeypatch):
    """Pin the diagnostics flag so tests don't depend on the local .env."""
    monkeypatch.setattr(settings, "EXPOSE_ERROR_DETAILS", True)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that seed rows or call the
    service/repository layer directly.
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def category() -> Category:
    """A committed category, created in its own session."""
    async with async_session_test() as session:
        category = Category(name="Electronics")
        session.add(category)
        await session.commit()
        return category


@pytest_asyncio.fixture
async def product(category: Category) -> Product:
    """A committed product belonging to ``category``."""
    async with async_session_test() as session:
        product = Product(
            name="Desk Lamp",
            description="Warm white LED lamp",
            price=Decimal("24.50"),
            category_id=category.id,
            image_url="https://example.com/lamp.jpg",
        )
        session.add(product)
        await session.commit()
        return product


@pytest.fixture
def test_engine():
    return engine_test


@pytest.fixture
def session_factory():
    return async_session_test
