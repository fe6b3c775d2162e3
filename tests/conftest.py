from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from libs.db.base import Base

# Import all models so metadata includes every table
from services.store_service import models as _store_models  # noqa: F401


ADMIN_ID = 111
CUSTOMER_ID = 5001


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """
    A fresh SQLite database file per test.
    Tests exercise real commits and rollbacks, so nothing is wrapped in an
    outer transaction.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


class RecordingNotifier:
    """Stands in for ``TelegramNotifier``; keeps every message instead of sending it."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: list[str] = []

    async def notify_admins(self, text: str) -> int:
        if self.fail:
            raise RuntimeError("telegram is down")
        self.messages.append(text)
        return 1


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(session_factory, notifier) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient for the store app with DB and notifier overridden.
    Each request gets its own session, as in production.
    """
    from libs.common.telegram import get_notifier
    from libs.db.session import get_async_db
    from services.store_service.app.main import create_app

    app = create_app()

    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = _get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def user_headers(user_id: int = CUSTOMER_ID) -> dict:
    return {"X-Telegram-User-Id": str(user_id)}


def admin_headers(admin_id: int = ADMIN_ID) -> dict:
    return user_headers(admin_id)


