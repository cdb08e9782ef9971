"""
Pytest fixtures for test database, clients, and authentication.

Each test gets a fresh in-memory SQLite schema; the app's get_db dependency
is overridden with the test session. Redis is disabled, so the sign-in
limiter fails open unless a test installs its own.
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REDIS_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="marketplace-uploads-")
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from datetime import date, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
import httpx
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.main import app
from marketplace.db.base import Base
from marketplace.db.session import get_db
from marketplace.core.security import hash_password, issue_token
from marketplace.domain import ApprovalStatus, Role
from marketplace.models.event import Event, TicketTier
from marketplace.models.organizer import Company, OrganizerProfile
from marketplace.models.user import User
from marketplace.client.session import SessionStore
from marketplace.client.storage import MemoryStorage
from marketplace.client.transport import ApiClient

TEST_DATABASE_URL = "sqlite+aiosqlite://"
PASSWORD = "testpassword123"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


def future_date(days: int = 30) -> date:
    return date.today() + timedelta(days=days)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory creating a user of any role; organizers get a company profile."""

    async def _make_user(role: Role = Role.USER, email: str = None, name: str = None, verified: bool = False) -> User:
        email = email or f"{role.value}@example.com"
        user = User(
            name=name or f"Test {role.value.title()}",
            email=email,
            hashed_password=hash_password(PASSWORD),
            role=role.value,
        )
        db_session.add(user)
        await db_session.flush()

        if role == Role.ORGANIZER:
            company = Company(name=f"{user.name} Events", contact_email=email, verified=verified)
            db_session.add(company)
            await db_session.flush()
            db_session.add(
                OrganizerProfile(
                    user_id=user.id,
                    company_id=company.id,
                    first_name=user.name.split()[0],
                    is_verified=verified,
                )
            )

        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest_asyncio.fixture
async def organizer(make_user) -> User:
    return await make_user(Role.ORGANIZER, name="Olivia Organizer")


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user(Role.ADMIN, name="Ada Admin")


@pytest_asyncio.fixture
async def regular_user(make_user) -> User:
    return await make_user(Role.USER, name="Uma User")


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def organizer_headers(organizer: User) -> dict:
    return bearer(organizer)


@pytest.fixture
def admin_headers(admin: User) -> dict:
    return bearer(admin)


@pytest.fixture
def user_headers(regular_user: User) -> dict:
    return bearer(regular_user)


@pytest.fixture
def make_event(db_session: AsyncSession):
    """Factory inserting an event directly, in any approval state."""

    async def _make_event(
        organizer: User,
        title: str = "Test Concert",
        approval_status: ApprovalStatus = ApprovalStatus.PENDING,
        published: bool = True,
        category: str = "music",
        description: str = "A test event",
        location: str = "Test Venue",
        days_ahead: int = 30,
    ) -> Event:
        event = Event(
            title=title,
            description=description,
            date=future_date(days_ahead),
            time="19:30",
            location=location,
            category=category,
            images=[],
            published=published,
            approval_status=approval_status.value,
            organizer_id=organizer.id,
            tickets=[TicketTier(position=0, name="General Admission", price=25, quantity=100, sold=0)],
        )
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)
        return event

    return _make_event


def event_payload(**overrides) -> dict:
    """A valid submission body in wire (camelCase) form."""
    payload = {
        "title": "Jazz Night",
        "description": "An evening of live jazz",
        "date": future_date().isoformat(),
        "time": "20:00",
        "location": "Blue Note Hall",
        "category": "music",
        "images": [],
        "published": True,
        "tickets": [
            {"name": "General Admission", "price": 30, "quantity": 100},
            {"name": "VIP", "price": 80, "quantity": 20},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(durable=MemoryStorage(), ephemeral=MemoryStorage())


@pytest_asyncio.fixture
async def api(client: AsyncClient, store: SessionStore) -> AsyncGenerator[ApiClient, None]:
    """Marketplace client wired straight into the app (end-to-end)."""
    async with ApiClient(store, base_url="http://test/api", transport=ASGITransport(app=app)) as api_client:
        yield api_client


@pytest_asyncio.fixture
async def mock_api(store: SessionStore):
    """
    Factory for a client backed by httpx.MockTransport. Returns the client
    and the list of requests it actually sent.
    """
    clients = []

    def _make(handler):
        sent: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return handler(request)

        api_client = ApiClient(store, base_url="http://mock/api", transport=httpx.MockTransport(_record))
        clients.append(api_client)
        return api_client, sent

    yield _make

    for api_client in clients:
        await api_client.aclose()


def event_json(
    event_id: int,
    title: str,
    approval_status: str = "approved",
    published: bool = True,
    category: str = "music",
    description: str = "",
    location: str = "Main Hall",
    organizer_name: str = "Olivia Organizer",
) -> dict:
    """An event as the API serializes it."""
    return {
        "id": event_id,
        "title": title,
        "description": description or f"About {title}",
        "date": future_date().isoformat(),
        "time": "19:00",
        "location": location,
        "category": category,
        "images": [],
        "published": published,
        "approvalStatus": approval_status,
        "adminFeedback": None,
        "reviewedAt": None,
        "organizer": {"id": 7, "name": organizer_name},
        "tickets": [{"id": event_id * 10, "name": "General Admission", "price": 20.0, "quantity": 100, "sold": 5}],
        "createdAt": "2026-01-01T10:00:00",
        "updatedAt": "2026-01-01T10:00:00",
    }


def user_json(role: str = "user", user_id: int = 1) -> dict:
    return {
        "id": user_id,
        "name": "Test Person",
        "email": f"{role}@example.com",
        "role": role,
        "phone": None,
        "isActive": True,
        "createdAt": "2026-01-01T10:00:00",
    }


class RecordingNotifier:
    """Collects notifications instead of showing them."""

    def __init__(self):
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)
