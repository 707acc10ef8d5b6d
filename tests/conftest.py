"""
FoodHub Backend - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
       with the full schema created from the ORM metadata, and a seeded
       marketplace: customers, providers, an admin, a category and meals.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: in-memory async engine with all tables created
    ├── db_session: AsyncSession bound to db_engine
    ├── seed: committed users, category and meals (SimpleNamespace)
    ├── mock_db_session: AsyncMock session for failure-path unit tests
    └── test_client: HTTPX AsyncClient with get_db_session overridden

Seed data is written through its own session and committed, so a rollback
in the session under test never expires or discards it.
"""

import os

# Override settings for testing BEFORE any foodhub imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal
from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from foodhub.database import Base, enable_sqlite_savepoints, get_db_session
from foodhub.models import Category, Meal, ProviderProfile, User, UserRole, UserStatus
from foodhub.services.principal_service import Principal


def principal_for(user: User) -> Principal:
    """Principal as the resolver would build it for `user`."""
    return Principal(
        id=user.id,
        email=user.email,
        role=UserRole(user.role),
        status=UserStatus(user.status),
    )


def auth_headers(user: User) -> dict:
    return {"X-User-Id": str(user.id)}


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seed(session_factory):
    """
    Marketplace fixture data.

    Providers:
        provider            active, meals: burger (9.50), fries (5.00),
                            soup (unavailable)
        other_provider      active, meals: sushi (12.00)
        suspended_provider  suspended, meals: pasta (8.00)
    Accounts:
        customer, other_customer, suspended_customer, admin
    """
    def user(name, email, role, status=UserStatus.ACTIVE):
        return User(name=name, email=email, role=role.value, status=status.value)

    customer = user("Carla Customer", "carla@example.com", UserRole.CUSTOMER)
    other_customer = user("Omar Customer", "omar@example.com", UserRole.CUSTOMER)
    suspended_customer = user(
        "Sam Suspended", "sam@example.com", UserRole.CUSTOMER, UserStatus.SUSPENDED
    )
    admin = user("Ada Admin", "ada@example.com", UserRole.ADMIN)
    provider = user("Pat Provider", "pat@example.com", UserRole.PROVIDER)
    other_provider = user("Quinn Provider", "quinn@example.com", UserRole.PROVIDER)
    suspended_provider = user(
        "Rex Provider", "rex@example.com", UserRole.PROVIDER, UserStatus.SUSPENDED
    )
    session = session_factory()
    session.add_all([
        customer, other_customer, suspended_customer, admin,
        provider, other_provider, suspended_provider,
    ])
    session.add(ProviderProfile(user=provider, business_name="Pat's Grill"))

    category = Category(name="Mains")
    session.add(category)

    def meal(owner, name, price, available=True):
        return Meal(
            provider=owner,
            category=category,
            name=name,
            price=Decimal(price),
            is_available=available,
        )

    burger = meal(provider, "Burger", "9.50")
    fries = meal(provider, "Fries", "5.00")
    soup = meal(provider, "Soup", "6.00", available=False)
    sushi = meal(other_provider, "Sushi", "12.00")
    pasta = meal(suspended_provider, "Pasta", "8.00")
    session.add_all([burger, fries, soup, sushi, pasta])

    await session.commit()
    await session.close()

    return SimpleNamespace(
        customer=customer,
        other_customer=other_customer,
        suspended_customer=suspended_customer,
        admin=admin,
        provider=provider,
        other_provider=other_provider,
        suspended_provider=suspended_provider,
        category=category,
        burger=burger,
        fries=fries,
        soup=soup,
        sushi=sushi,
        pasta=pasta,
    )


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_store_failure(mock_db_session):
            mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    session.refresh = AsyncMock()
    # SAVEPOINT scope: an async context manager that never swallows errors
    session.begin_nested = MagicMock()
    session.begin_nested.return_value.__aexit__.return_value = False
    return session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    The app's session dependency is replaced by one bound to the test engine,
    with the same commit-on-success / rollback-on-error contract.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from foodhub.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
