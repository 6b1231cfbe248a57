from contextlib import asynccontextmanager
from functools import lru_cache

import redis.asyncio as redis
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.google_auth_service import GoogleAuthService
from src.adapter.services.memory_cache import InMemoryCache
from src.adapter.services.memory_rate_limit_store import InMemoryRateLimitStore
from src.adapter.services.redis_cache import RedisCache
from src.adapter.services.redis_rate_limit_store import RedisRateLimitStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.user_directory_client import UserDirectoryClient
from src.app.services.cache import ICache
from src.app.services.oauth_verifier import IOAuthVerifier
from src.app.services.rate_limit_service import RateLimitService
from src.app.services.session_service import SessionService
from src.app.services.token_generator import TokenGeneratorService
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_cache_service import UserCacheService
from src.app.services.user_directory import IUserDirectory
from src.app.use_cases.auth import (
    GoogleCallbackUseCase,
    GoogleLoginUseCase,
    GoogleRegisterUseCase,
    GoogleSignupUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterUseCase,
    SessionTokenIssuer,
)
from src.domain.entities import ClientInfo, JwtPayload

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


# ============================================================================
# Process-wide collaborators
# ============================================================================


@lru_cache
def get_redis() -> redis.Redis:
    return redis.from_url(ApplicationConfig.REDIS_URL, decode_responses=True)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(ApplicationConfig.JWT_SECRET, ApplicationConfig.JWT_ALGORITHM)


@lru_cache
def get_cache() -> ICache:
    if ApplicationConfig.CACHE_BACKEND == "redis":
        return RedisCache(get_redis())
    return InMemoryCache()


@lru_cache
def get_rate_limit_service() -> RateLimitService:
    if ApplicationConfig.RATE_LIMIT_BACKEND == "redis":
        store = RedisRateLimitStore(get_redis())
    else:
        store = InMemoryRateLimitStore()
    return RateLimitService(
        store,
        max_attempts=ApplicationConfig.RATE_LIMIT_MAX_ATTEMPTS,
        lockout_seconds=ApplicationConfig.RATE_LIMIT_LOCKOUT_SECONDS,
    )


@lru_cache
def get_user_directory() -> IUserDirectory:
    return UserDirectoryClient(
        ApplicationConfig.USERS_SERVICE_URL,
        timeout=ApplicationConfig.USERS_SERVICE_TIMEOUT_SECONDS,
    )


@lru_cache
def get_oauth_verifier() -> IOAuthVerifier:
    return GoogleAuthService(
        ApplicationConfig.GOOGLE_CLIENT_ID,
        certs_url=ApplicationConfig.GOOGLE_CERTS_URL,
        timeout=ApplicationConfig.OAUTH_TIMEOUT_SECONDS,
    )


# ============================================================================
# Request-scoped services
# ============================================================================


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@asynccontextmanager
async def session_service_scope():
    """SessionService on its own DB session, for work outside a request"""
    async with AsyncSessionLocal() as session:
        yield SessionService(
            SqlAlchemyUnitOfWork(session),
            pending_grace_seconds=ApplicationConfig.PENDING_SESSION_GRACE_SECONDS,
        )


def get_session_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> SessionService:
    return SessionService(
        uow, pending_grace_seconds=ApplicationConfig.PENDING_SESSION_GRACE_SECONDS
    )


def get_user_cache_service(cache: ICache = Depends(get_cache)) -> UserCacheService:
    return UserCacheService(cache, default_ttl=ApplicationConfig.USER_CACHE_TTL_SECONDS)


def get_token_generator(
    token_service: TokenService = Depends(get_token_service),
) -> TokenGeneratorService:
    return TokenGeneratorService(
        token_service,
        access_ttl=ApplicationConfig.JWT_ACCESS_EXPIRES_SECONDS,
        refresh_ttl=ApplicationConfig.JWT_REFRESH_EXPIRES_SECONDS,
    )


def get_session_issuer(
    sessions: SessionService = Depends(get_session_service),
    token_generator: TokenGeneratorService = Depends(get_token_generator),
    user_cache: UserCacheService = Depends(get_user_cache_service),
) -> SessionTokenIssuer:
    return SessionTokenIssuer(
        sessions,
        token_generator,
        user_cache,
        session_ttl_seconds=ApplicationConfig.SESSION_TTL_SECONDS,
    )


def get_client_info(request: Request) -> ClientInfo:
    forwarded = request.headers.get("X-Forwarded-For", "")
    ip_address = forwarded.split(",")[0].strip() if forwarded else ""
    if not ip_address and request.client:
        ip_address = request.client.host
    return ClientInfo(
        user_agent=request.headers.get("User-Agent", ""),
        ip_address=ip_address or "",
    )


# ============================================================================
# Use cases
# ============================================================================


def get_login_use_case(
    directory: IUserDirectory = Depends(get_user_directory),
    rate_limiter: RateLimitService = Depends(get_rate_limit_service),
    issuer: SessionTokenIssuer = Depends(get_session_issuer),
) -> LoginUseCase:
    return LoginUseCase(directory, rate_limiter, issuer)


def get_register_use_case(
    directory: IUserDirectory = Depends(get_user_directory),
    issuer: SessionTokenIssuer = Depends(get_session_issuer),
) -> RegisterUseCase:
    return RegisterUseCase(directory, issuer)


def get_refresh_token_use_case(
    sessions: SessionService = Depends(get_session_service),
    directory: IUserDirectory = Depends(get_user_directory),
    user_cache: UserCacheService = Depends(get_user_cache_service),
    token_generator: TokenGeneratorService = Depends(get_token_generator),
) -> RefreshTokenUseCase:
    return RefreshTokenUseCase(sessions, directory, user_cache, token_generator)


def get_logout_use_case(
    sessions: SessionService = Depends(get_session_service),
    user_cache: UserCacheService = Depends(get_user_cache_service),
) -> LogoutUseCase:
    return LogoutUseCase(sessions, user_cache)


def get_google_login_use_case(
    verifier: IOAuthVerifier = Depends(get_oauth_verifier),
    directory: IUserDirectory = Depends(get_user_directory),
    user_cache: UserCacheService = Depends(get_user_cache_service),
    issuer: SessionTokenIssuer = Depends(get_session_issuer),
) -> GoogleLoginUseCase:
    return GoogleLoginUseCase(verifier, directory, user_cache, issuer)


def get_google_register_use_case(
    verifier: IOAuthVerifier = Depends(get_oauth_verifier),
    directory: IUserDirectory = Depends(get_user_directory),
    user_cache: UserCacheService = Depends(get_user_cache_service),
    issuer: SessionTokenIssuer = Depends(get_session_issuer),
) -> GoogleRegisterUseCase:
    return GoogleRegisterUseCase(verifier, directory, user_cache, issuer)


def get_google_signup_use_case(
    verifier: IOAuthVerifier = Depends(get_oauth_verifier),
    directory: IUserDirectory = Depends(get_user_directory),
    user_cache: UserCacheService = Depends(get_user_cache_service),
    issuer: SessionTokenIssuer = Depends(get_session_issuer),
) -> GoogleSignupUseCase:
    return GoogleSignupUseCase(verifier, directory, user_cache, issuer)


def get_google_callback_use_case(
    login: GoogleLoginUseCase = Depends(get_google_login_use_case),
    register: GoogleRegisterUseCase = Depends(get_google_register_use_case),
) -> GoogleCallbackUseCase:
    return GoogleCallbackUseCase(login, register)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> JwtPayload:
    """
    Dependency to extract and verify the access token from the Authorization header.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    payload = token_service.verify_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload
