from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from pto_tracker.db import create_schema, get_session
from pto_tracker.main import app
from pto_tracker.models import EmployeeProfile, PTOPolicy, User
from pto_tracker.models.enums import Role

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """A fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so every session sees the
    same in-memory database.
    """
    _engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_schema(_engine)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Data factories (insert directly, bypassing the API)
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make(role: Role = Role.EMPLOYEE, name: str | None = None, email: str | None = None) -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            name=name or f"{role.value.title()} {suffix}",
            email=email or f"{role.value.lower()}-{suffix}@example.com",
            password_hash="not-a-real-hash",
            role=role.value,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_employee(
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
) -> Callable[..., Awaitable[EmployeeProfile]]:
    async def _make(
        user: User | None = None,
        start_date: date | None = None,
        manager_id: uuid.UUID | None = None,
        team_id: uuid.UUID | None = None,
    ) -> EmployeeProfile:
        if user is None:
            user = await make_user()
        employee = EmployeeProfile(
            user_id=user.id,
            title="Engineer",
            department="Engineering",
            start_date=start_date,
            manager_id=manager_id,
            team_id=team_id,
        )
        db_session.add(employee)
        await db_session.commit()
        await db_session.refresh(employee)
        return employee

    return _make


@pytest.fixture
def make_policy(db_session: AsyncSession) -> Callable[..., Awaitable[PTOPolicy]]:
    async def _make(
        name: str = "US-Standard",
        accrual_hrs_per_month: float = 6.67,
        carryover_max: float = 40,
        effective_on: date = date(2025, 1, 1),
    ) -> PTOPolicy:
        policy = PTOPolicy(
            name=name,
            accrual_hrs_per_month=accrual_hrs_per_month,
            carryover_max=carryover_max,
            effective_on=effective_on,
        )
        db_session.add(policy)
        await db_session.commit()
        await db_session.refresh(policy)
        return policy

    return _make


def headers_for(user_id: uuid.UUID, role: Role) -> dict[str, str]:
    return {"X-User-Id": str(user_id), "X-Role": role.value}


@pytest.fixture
async def admin(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user(Role.ADMIN, name="Admin User")


@pytest.fixture
async def manager(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user(Role.MANAGER, name="Manny Manager")


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return headers_for(admin.id, Role.ADMIN)


@pytest.fixture
def manager_headers(manager: User) -> dict[str, str]:
    return headers_for(manager.id, Role.MANAGER)


@pytest.fixture
def auth_headers() -> Callable[[uuid.UUID, Role], dict[str, str]]:
    """Build dev auth headers for an arbitrary user and role."""
    return headers_for
