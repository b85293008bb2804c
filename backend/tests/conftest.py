import os
import sys
from pathlib import Path
import pytest

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

# Test environment, applied before the app modules are imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Put backend/ on sys.path so the 'app' package resolves when running from the repo root
backend_path = Path(__file__).resolve().parents[1]
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from app.main import app
from app.database import Base
from app.database import get_db as real_get_db
from app.auth.passwords import PasswordHasher
from app.auth.service import AuthService
from app.auth.tokens import TokenCodec
from app.users.models import UserRole
from app.users.repository import UserRepository
from app.users.service import UserService


@pytest.fixture()
async def test_engine():
    # one in-memory SQLite database per test, shared by every session of that test
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db(test_engine):
    async_session = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture(autouse=True)
async def override_db(db):
    async def _get_db():
        yield db
    app.dependency_overrides[real_get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture()
def tokens():
    return TokenCodec(secret_key="test-secret-key", algorithm="HS256", expire_minutes=5)


@pytest.fixture()
def repository(db):
    return UserRepository(db)


@pytest.fixture()
def user_service(repository, hasher):
    return UserService(repository, hasher)


@pytest.fixture()
def auth_service(repository, hasher, tokens):
    return AuthService(repository, hasher, tokens)


@pytest.fixture()
async def admin(user_service):
    return await user_service.create_user(
        name="Admin", email="admin@example.com", password="admin123", role=UserRole.ADMIN
    )


@pytest.fixture()
async def member(user_service):
    return await user_service.create_user(
        name="Member", email="member@example.com", password="member123"
    )


@pytest.fixture()
async def admin_headers(client, admin):
    response = await client.post("/auth/login", json={"email": "admin@example.com", "password": "admin123"})
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture()
async def member_headers(client, member):
    response = await client.post("/auth/login", json={"email": "member@example.com", "password": "member123"})
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}
