"""
Test infrastructure for the CMS API.

Strategy
--------
- SQLite in-memory via aiosqlite removes the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection; a new connection would see an empty database.
- ``PRAGMA foreign_keys=ON`` is installed on the test engine so the
  ``ON DELETE SET NULL`` / ``CASCADE`` rules behave as on PostgreSQL.
- The app's get_db dependency is overridden so every request uses the
  test session factory rather than the production one.
- All tables are created fresh before each test and dropped after.
- ``PUBLIC_DIR`` points at a per-test temporary directory for resource
  tests, so nothing is written into the working tree.
"""
import os

# Must be set before cms.config is imported anywhere.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["APP_ENV"] = "development"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cms.config import settings
from cms.database import Base, get_db, install_sqlite_foreign_keys
from cms.main import app
from cms.middleware import install_query_counter
from cms.models import User
from cms.security import create_access_token, hash_password

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)
install_sqlite_foreign_keys(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)

TEST_PASSWORD = "password123"


# ---------------------------------------------------------------------------
# Dependency override — replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live AsyncSession for tests that call services or repositories directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def make_user(
    name: str = "Admin",
    email: str = "admin@example.com",
    password: str = TEST_PASSWORD,
    is_active: bool = True,
) -> User:
    """Insert a user in its own committed session."""
    async with async_session_test() as session:
        user = User(name=name, email=email, password=hash_password(password), is_active=is_active)
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def admin_user() -> User:
    return await make_user()


@pytest_asyncio.fixture
async def auth_headers(admin_user: User) -> dict:
    """Bearer header for ``admin_user``."""
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}


@pytest.fixture
def public_dir(tmp_path, monkeypatch):
    """Point ``settings.PUBLIC_DIR`` at an empty temporary directory."""
    monkeypatch.setattr(settings, "PUBLIC_DIR", str(tmp_path))
    return tmp_path
