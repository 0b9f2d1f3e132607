"""
Centralized Test Configuration.
"""

import os

# Point the application engine at SQLite before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
from httpx import AsyncClient, ASGITransport

from backend.app.main import app
from backend.app.core.dependencies import get_payment_processor
from backend.app.db.gateway import DocumentStore
from backend.app.db.session import get_db, Base
from backend.app.models.enums import RiderStatus, UserRole, WorkStatus
from backend.app.services.payment_processor import PaymentProcessor
from backend.tests.helpers import Caller, TestingSessionLocal, engine


def gateway_handler(request: httpx.Request) -> httpx.Response:
    """Stand-in for the payment gateway's payment-intent endpoint."""
    return httpx.Response(200, json={"id": "pi_test_1", "client_secret": "pi_test_1_secret_abc"})


@pytest.fixture(scope="session", autouse=True)
def apply_overrides():
    """Apply overrides once for the session."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    def override_get_payment_processor():
        return PaymentProcessor(api_key="sk_test", transport=httpx.MockTransport(gateway_handler))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_processor] = override_get_payment_processor
    yield

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def store(db_session):
    return DocumentStore(db_session)


async def _signed_in(store: DocumentStore, uid: str, email: str, role: UserRole) -> Caller:
    await store.users.insert_one({"email": email, "role": role})
    return Caller(uid=uid, email=email)


@pytest.fixture
async def customer(store):
    return await _signed_in(store, "uid-customer", "customer@example.com", UserRole.USER)


@pytest.fixture
async def admin(store):
    return await _signed_in(store, "uid-admin", "admin@example.com", UserRole.ADMIN)


@pytest.fixture
async def rider_user(store):
    return await _signed_in(store, "uid-rider", "rider@example.com", UserRole.RIDER)


@pytest.fixture
async def rider(store, rider_user):
    """Active, available rider profile belonging to rider_user."""
    return await store.riders.insert_one({
        "name": "Rafi Rider",
        "email": rider_user.email,
        "district": "Dhaka",
        "status": RiderStatus.ACTIVE,
        "work_status": WorkStatus.AVAILABLE,
    })
