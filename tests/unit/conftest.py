import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.memory_cache import InMemoryCache
from src.adapter.services.memory_rate_limit_store import InMemoryRateLimitStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.rate_limit_service import RateLimitService
from src.app.services.session_service import SessionService
from src.app.services.token_generator import TokenGeneratorService
from src.app.services.token_service import TokenService
from src.app.services.user_cache_service import UserCacheService
from src.app.use_cases.auth import SessionTokenIssuer
from src.domain.entities import User
from tests.fakes import FakeOAuthVerifier, FakeUserDirectory


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.sessions = MagicMock()
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.get_by_user_id = AsyncMock(return_value=[])
    uow.sessions.find_by_refresh_token = AsyncMock(return_value=None)
    uow.sessions.update = AsyncMock(return_value=None)
    uow.sessions.delete_by_refresh_token = AsyncMock(return_value=0)
    uow.sessions.delete_by_user_id = AsyncMock(return_value=0)
    uow.sessions.delete_expired = AsyncMock(return_value=0)
    uow.sessions.count = AsyncMock(return_value=0)
    uow.sessions.exists_by_refresh_token = AsyncMock(return_value=False)
    return uow


@pytest_asyncio.fixture
async def db_session():
    """Real sessions table on in-memory SQLite"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def session_service(db_session):
    return SessionService(SqlAlchemyUnitOfWork(db_session))


@pytest.fixture
def token_service():
    return TokenService("unit-test-secret")


@pytest.fixture
def token_generator(token_service):
    return TokenGeneratorService(token_service)


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def user_cache(cache):
    return UserCacheService(cache)


@pytest.fixture
def rate_limiter():
    return RateLimitService(InMemoryRateLimitStore())


@pytest.fixture
def directory():
    return FakeUserDirectory()


@pytest.fixture
def verifier():
    return FakeOAuthVerifier()


@pytest.fixture
def issuer(session_service, token_generator, user_cache):
    return SessionTokenIssuer(session_service, token_generator, user_cache)


@pytest.fixture
def user():
    return User(
        id=str(uuid4()),
        email="user@acme.com",
        first_name="Ada",
        last_name="Lovelace",
        role="user",
        provider="local",
    )
