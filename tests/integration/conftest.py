import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.memory_cache import InMemoryCache
from src.adapter.services.memory_rate_limit_store import InMemoryRateLimitStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.rate_limit_service import RateLimitService
from src.depends import (
    get_cache,
    get_oauth_verifier,
    get_rate_limit_service,
    get_unit_of_work,
    get_user_directory,
)
from tests.fakes import FakeOAuthVerifier, FakeUserDirectory


@pytest.fixture
def directory():
    return FakeUserDirectory()


@pytest.fixture
def verifier():
    return FakeOAuthVerifier()


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session, directory, verifier, cache):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)
    rate_limiter = RateLimitService(InMemoryRateLimitStore())

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_user_directory] = lambda: directory
    app.dependency_overrides[get_oauth_verifier] = lambda: verifier
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_rate_limit_service] = lambda: rate_limiter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
