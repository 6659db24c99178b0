# tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from link_library.api.deps import get_scraper
from link_library.config import Settings
from link_library.database import Database
from link_library.main import create_app
from link_library.models import User
from link_library.schemas import PageMetadata
from link_library.services.metadata import MetadataScraper


class StubScraper(MetadataScraper):
    """Records requested URLs and answers with a canned result, no network."""

    def __init__(self, result: Optional[PageMetadata] = None) -> None:
        super().__init__()
        self.result = result or PageMetadata()
        self.calls: list[str] = []

    async def scrape(self, url: str) -> PageMetadata:
        self.calls.append(url)
        return self.result


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'links.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture()
async def database(settings) -> AsyncIterator[Database]:
    db = Database.from_settings(settings)
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture()
async def session(database) -> AsyncIterator[AsyncSession]:
    async with database.session_factory() as s:
        yield s


@pytest.fixture()
def scraper() -> StubScraper:
    return StubScraper()


@pytest.fixture()
def app(settings, database, scraper):
    """
    App bound to the per-test SQLite database. The scraper dependency is
    overridden so no test reaches the network.
    """
    application = create_app(settings, database)
    application.dependency_overrides[get_scraper] = lambda: scraper
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def make_user(session: AsyncSession, email: str, name: str = "Someone") -> User:
    user = User(email=email, password="not-a-real-hash", name=name)
    session.add(user)
    await session.commit()
    return user


@pytest.fixture()
async def alice(session) -> User:
    return await make_user(session, "alice@example.com", "Alice")


@pytest.fixture()
async def bob(session) -> User:
    return await make_user(session, "bob@example.com", "Bob")


async def signup(client: AsyncClient, email: str, password: str = "pw123456", name: str = "User") -> str:
    r = await client.post(
        "/api/auth/signup", json={"email": email, "password": password, "name": name}
    )
    assert r.status_code == 200, r.text
    return r.json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
