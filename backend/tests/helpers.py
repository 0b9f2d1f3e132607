"""
Shared test helpers: in-memory database, token minting and signed-in callers.
"""

from dataclasses import dataclass
import types
from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.app.core.config import settings
from backend.app.db.gateway import Collection, translate_store_errors

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


def issue_token(uid: str, email: str = None, expires_in: timedelta = timedelta(minutes=30), **claims) -> str:
    """Mint a token the way the identity service would."""
    payload = {"sub": uid, "exp": datetime.now(timezone.utc) + expires_in, **claims}
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.identity_secret_key, algorithm=settings.identity_algorithm)


@dataclass
class Caller:
    """A signed-in client: its token plus the uid it must echo in the query string."""
    uid: str
    email: str

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {issue_token(self.uid, self.email)}"}

    def params(self, **extra) -> dict:
        return {"uid": self.uid, **extra}


def break_collection(collection: Collection, operation: str = "update_one"):
    """Make one collection operation fail the way a dropped database connection does."""

    @translate_store_errors
    async def lost_connection(self, *args, **kwargs):
        raise OperationalError(f"{operation} on {self.name}", {}, Exception("server closed the connection"))

    setattr(collection, operation, types.MethodType(lost_connection, collection))
