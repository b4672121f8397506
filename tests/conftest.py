"""
Pytest configuration and fixtures for the mailroom API.

Each test gets a fresh file-backed SQLite database (the insights queries open
several sessions concurrently, which an in-memory database cannot share), a
seeded organization and an httpx client bound to the ASGI app.
"""

import os

# Set env before importing app modules
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["AUTH_PROVIDER"] = "session"
os.environ.pop("OPENAI_API_KEY", None)

from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mailroom.core.config import settings
from mailroom.core.security import RequestContext, create_session_token
from mailroom.db.base import Base, get_db, get_session_factory
from mailroom.domain import ExternalPerson, MailItem, MailRoom, Organization, UserProfile
from mailroom.domain.enums import Role
from mailroom.domain.mixins import new_id
from mailroom.main import app


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'mailroom_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture(scope="function")
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A standalone session for arranging rows and asserting on them."""
    async with session_factory() as session:
        yield session


# =============================================================================
# Seed Fixtures
# =============================================================================

@dataclass
class Seed:
    """One organization with two mail rooms and a person for every role."""
    org: Organization
    mail_room: MailRoom
    annex: MailRoom
    admin: UserProfile
    staff: UserProfile
    recipient: UserProfile
    visitor: ExternalPerson
    other_org: Organization


def _profile(org: Organization, room: MailRoom, role: Role, first: str, last: str, **extra) -> UserProfile:
    return UserProfile(
        org_id=org.id,
        user_id=new_id(),
        mail_room_id=room.id,
        first_name=first,
        last_name=last,
        email=f"{first.lower()}.{last.lower()}@acme.example.com",
        role=role.value,
        **extra,
    )


@pytest.fixture(scope="function")
async def seed(session_factory) -> Seed:
    async with session_factory() as session:
        org = Organization(name="Acme Corp")
        other_org = Organization(name="Globex")
        session.add_all([org, other_org])
        await session.flush()

        mail_room = MailRoom(org_id=org.id, name="Main Lobby", location="Building A")
        annex = MailRoom(org_id=org.id, name="Annex", location="Building B")
        session.add_all([mail_room, annex])
        await session.flush()

        admin = _profile(org, mail_room, Role.ADMIN, "Ada", "Admin")
        staff = _profile(org, mail_room, Role.STAFF, "Sam", "Clerk")
        recipient = _profile(
            org, mail_room, Role.RECIPIENT, "Jane", "Doe",
            phone="+15550001111", department="Finance",
        )
        visitor = ExternalPerson(
            org_id=org.id, first_name="Victor", last_name="Vance", email="victor@contractor.test"
        )
        session.add_all([admin, staff, recipient, visitor])
        await session.commit()

    return Seed(
        org=org,
        mail_room=mail_room,
        annex=annex,
        admin=admin,
        staff=staff,
        recipient=recipient,
        visitor=visitor,
        other_org=other_org,
    )


# =============================================================================
# Auth Fixtures
# =============================================================================

def auth_headers(profile: UserProfile) -> dict[str, str]:
    """Bearer header carrying a session token for *profile*."""
    token = create_session_token(profile.user_id, settings.jwt_secret)
    return {"Authorization": f"Bearer {token}"}


def context_for(profile: UserProfile) -> RequestContext:
    return RequestContext(
        profile_id=profile.id,
        user_id=profile.user_id,
        org_id=profile.org_id,
        role=profile.role,
        mail_room_id=profile.mail_room_id,
    )


@pytest.fixture(scope="function")
def staff_headers(seed: Seed) -> dict[str, str]:
    return auth_headers(seed.staff)


@pytest.fixture(scope="function")
def admin_headers(seed: Seed) -> dict[str, str]:
    return auth_headers(seed.admin)


@pytest.fixture(scope="function")
def recipient_headers(seed: Seed) -> dict[str, str]:
    return auth_headers(seed.recipient)


@pytest.fixture(scope="function")
def staff_ctx(seed: Seed) -> RequestContext:
    return context_for(seed.staff)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient against the app, with the database dependencies pointed at
    the per-test engine. Requests are unauthenticated unless headers are passed.
    """
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def make_item(session_factory, seed: Seed):
    """Factory inserting a mail item directly, with full control over timestamps."""
    async def _make(**values) -> MailItem:
        values.setdefault("mail_room_id", seed.mail_room.id)
        if "external_recipient_id" not in values:
            values.setdefault("recipient_id", seed.recipient.id)
        values.setdefault("processed_by_id", seed.staff.id)
        async with session_factory() as session:
            item = MailItem(org_id=seed.org.id, **values)
            session.add(item)
            await session.commit()
        return item

    return _make
