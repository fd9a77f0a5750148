"""Shared test fixtures — async DB, client, factories.

Reusable across all test modules (evaluator, schedule-check, compliance,
console). Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hr_compliance.database import Base, get_db
from hr_compliance.main import create_app

# Import ALL model modules so every table is registered on Base.metadata
import hr_compliance.common.audit  # noqa: F401
import hr_compliance.core_hr.models  # noqa: F401
import hr_compliance.compliance.models  # noqa: F401
import hr_compliance.schedule_check.models  # noqa: F401

# ── SQLite compat: compile PG-specific types to TEXT/CHAR ───────────

from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, "sqlite")
def _jsonb_sqlite(element, compiler, **kw):
    return "TEXT"


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Register PG-compatible functions for SQLite
@event.listens_for(engine.sync_engine, "connect")
def _register_sqlite_functions(dbapi_conn, connection_record):
    """Register NOW() and uuid_generate_v4() as SQLite custom functions."""
    dbapi_conn.create_function(
        "NOW", 0, lambda: datetime.now(timezone.utc).isoformat(),
    )
    dbapi_conn.create_function(
        "uuid_generate_v4", 0, lambda: str(uuid.uuid4()),
    )

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from hr_compliance.common.rate_limit import limiter
    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Dates ───────────────────────────────────────────────────────────

REFERENCE_DAY = date(2025, 6, 15)


def far_future(days: int = 0) -> date:
    """A day safely after today (for writes that reject past dates)."""
    return date.today() + timedelta(days=3650 + days)


# ── Model factories ─────────────────────────────────────────────────

def _make_company(*, name: str = "Acme Care Ltd") -> dict:
    return dict(
        id=uuid.uuid4(),
        name=name,
        is_active=True,
        created_at=datetime.now(timezone.utc),
    )


def _make_employee(
    *,
    company_id: uuid.UUID,
    email: str = "test.user@acme-care.co.uk",
    first_name: str = "Test",
    last_name: str = "User",
    is_active: bool = True,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        company_id=company_id,
        employee_code=f"AC-{uuid.uuid4().hex[:6].upper()}",
        first_name=first_name,
        last_name=last_name,
        email=email,
        is_active=is_active,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def _make_record(
    *,
    employee_id: uuid.UUID,
    company_id: uuid.UUID,
    created_at: datetime | None = None,
    **fields,
) -> dict:
    now = created_at or datetime.now(timezone.utc)
    return dict(
        id=uuid.uuid4(),
        employee_id=employee_id,
        company_id=company_id,
        document_url="https://files.example.com/doc.pdf",
        created_at=now,
        updated_at=now,
        **fields,
    )


@pytest.fixture
async def test_company(db) -> dict:
    """Insert a test company and return its data dict."""
    from hr_compliance.core_hr.models import Company

    data = _make_company()
    db.add(Company(**data))
    await db.flush()
    return data


@pytest.fixture
async def test_employee(db, test_company) -> dict:
    """Insert an active employee of test_company."""
    from hr_compliance.core_hr.models import Employee

    data = _make_employee(company_id=test_company["id"])
    db.add(Employee(**data))
    await db.flush()
    return data
