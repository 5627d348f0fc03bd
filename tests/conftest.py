"""Pytest configuration and fixtures."""

import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.password import BcryptPasswordHasher
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

TEST_SECRET_KEY = "test-secret-key"

# Minimum bcrypt cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a file-backed SQLite engine with all tables, one per test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""
    return lambda: SQLAlchemyUnitOfWork(session_factory)


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key=TEST_SECRET_KEY,
        algorithm="HS256",
        expire_minutes=60,
    )


@pytest.fixture
def password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def test_user() -> TokenUser:
    """A token identity that does not need to exist in the database."""
    return TokenUser(id=uuid4(), name="Test User", avatar="https://example.com/a.png")


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider, test_user: TokenUser) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_provider.create_token(test_user)}"}


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
    password_hasher: BcryptPasswordHasher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the per-test database.

    This client:
    - Uses a fresh SQLite database file
    - Overrides the auth provider to sign with the test secret
    - Overrides every service factory to use the test Unit of Work
    - Points the readiness check at the test database
    """
    from api.dependencies.auth import get_auth_provider
    from api.dependencies.services import (
        get_auth_service,
        get_post_service,
        get_profile_service,
    )
    from domain.services.auth_service import AuthService
    from domain.services.post_service import PostService
    from domain.services.profile_service import ProfileService
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_auth_service] = lambda: AuthService(
        uow_factory, auth_provider, password_hasher
    )
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(uow_factory)
    app.dependency_overrides[get_post_service] = lambda: PostService(uow_factory)

    async def _session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


RegisterFn = Callable[..., Awaitable[tuple[dict[str, str], str]]]


@pytest.fixture
def register_user(client: AsyncClient) -> RegisterFn:
    """Register and log in a user; returns (auth headers, user id)."""

    async def _register(
        name: str = "Alice Smith",
        email: str = "alice@example.com",
        password: str = "secret123",
    ) -> tuple[dict[str, str], str]:
        response = await client.post(
            "/api/users/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "password2": password,
            },
        )
        assert response.status_code == 200, response.text
        user_id = response.json()["id"]

        login = await client.post(
            "/api/users/login",
            json={"email": email, "password": password},
        )
        assert login.status_code == 200, login.text
        return {"Authorization": login.json()["token"]}, user_id

    return _register
