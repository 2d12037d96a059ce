import os

# Settings are read at import time; point them at SQLite before importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TICKET_SERVICE_URL"] = ""

from datetime import timedelta  # noqa: E402
from typing import AsyncGenerator, Dict, Optional  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.database import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import AuthSession, AuthUser, Base, CrmUser, Product  # noqa: E402
from app.models.base import utcnow  # noqa: E402


@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory database per test, schema created from the models."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Yield an ``httpx.AsyncClient`` wired to the FastAPI app and test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def create_identity(
    session_factory: async_sessionmaker,
    user_id: str,
    email: str,
    name: str = "Test User",
    role: Optional[str] = None,
) -> Dict[str, str]:
    """Insert an auth user with a live session; return its bearer header.

    With *role*, a linked CRM profile is created too.
    """
    token = f"token-{user_id}"
    async with session_factory() as session:
        session.add(AuthUser(id=user_id, name=name, email=email, email_verified=True))
        await session.flush()
        session.add(
            AuthSession(
                id=f"session-{user_id}",
                token=token,
                expires_at=utcnow() + timedelta(days=1),
                user_id=user_id,
            )
        )
        if role is not None:
            session.add(
                CrmUser(auth_user_id=user_id, email=email, name=name, role=role)
            )
        await session.commit()
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def auth_headers(session_factory) -> Dict[str, str]:
    """Authenticated agent."""
    return await create_identity(
        session_factory, "user-agent", "agent@example.com", "Ana Agent", role="agent"
    )


@pytest_asyncio.fixture
async def admin_headers(session_factory) -> Dict[str, str]:
    return await create_identity(
        session_factory, "user-admin", "admin@example.com", "Adam Admin", role="admin"
    )


@pytest_asyncio.fixture
async def other_headers(session_factory) -> Dict[str, str]:
    """A second authenticated identity with no CRM profile."""
    return await create_identity(session_factory, "user-other", "other@example.com")


@pytest_asyncio.fixture
async def product(session_factory) -> Product:
    async with session_factory() as session:
        item = Product(
            category="signs",
            name="Letrero exterior",
            base_price=450,
            description_es="Letrero para fachada",
            is_active=True,
        )
        session.add(item)
        await session.commit()
        return item


async def count_rows(session_factory: async_sessionmaker, model) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def create_lead(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "Jane Doe", "email": "jane@example.com", "source": "contact"}
    payload.update(overrides)
    response = await client.post("/api/v1/leads", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def make_identity(session_factory):
    """Factory fixture around :func:`create_identity`."""

    async def _make(user_id: str, email: str, name: str = "Test User", role=None):
        return await create_identity(session_factory, user_id, email, name, role)

    return _make


@pytest_asyncio.fixture
async def row_count(session_factory):
    """``await row_count(Model)`` -> number of rows in the model's table."""

    async def _count(model) -> int:
        return await count_rows(session_factory, model)

    return _count


@pytest_asyncio.fixture
async def new_lead(client):
    """``await new_lead(**fields)`` -> created lead JSON (via the public API)."""

    async def _create(**overrides) -> dict:
        return await create_lead(client, **overrides)

    return _create
