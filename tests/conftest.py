"""Pytest configuration and fixtures."""

import os

# Settings are read on import, so configure the environment first
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import StaticPool  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.api.deps import get_scoring_engine  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.scoring.definitions import TestDefinition  # noqa: E402
from app.scoring.engine import ScoringEngine  # noqa: E402
from app.scoring.store import TestDefinitionStore, parse_definition  # noqa: E402

# Use SQLite for testing (simpler than spinning up postgres)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="session")
def store() -> TestDefinitionStore:
    """Store loaded from the bundled questionnaires."""
    return TestDefinitionStore.from_directory()


@pytest.fixture(scope="session")
def scoring_engine(store: TestDefinitionStore) -> ScoringEngine:
    """Engine over the bundled questionnaires."""
    return ScoringEngine(store)


@pytest.fixture
def toy_definition() -> TestDefinition:
    """Three-question test with item 2 reverse scored."""
    return parse_definition(
        "toy",
        {
            "testType": "TOY-3",
            "title": {"en": "Toy test", "ks": "کھلونا ٹیسٹ"},
            "questions": ["First", "Second", "Third"],
            "options": [{"value": v, "label": str(v)} for v in range(4)],
            "scoring": {
                "reverseScoredQuestions": [2],
                "interpretation": [{"min": 0, "max": 9, "severity": "low"}],
            },
        },
    )


@pytest.fixture
def toy_engine(toy_definition: TestDefinition) -> ScoringEngine:
    """Engine over an in-memory store holding only the toy test."""
    return ScoringEngine(TestDefinitionStore([toy_definition]))


@pytest.fixture(scope="function")
async def client(
    async_session: AsyncSession,
    scoring_engine: ScoringEngine,
) -> AsyncGenerator[AsyncClient, None]:
    """Create API test client with overridden dependencies."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield async_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_scoring_engine] = lambda: scoring_engine

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
