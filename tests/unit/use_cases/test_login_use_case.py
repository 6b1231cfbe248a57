from unittest.mock import AsyncMock, MagicMock

import pytest

from libs.result import Return
from src.app.errors import UpstreamError
from src.app.use_cases.auth import LoginCommand, LoginUseCase
from src.domain.entities import AuthTokens, ClientInfo


@pytest.fixture
def use_case(directory, rate_limiter, issuer):
    return LoginUseCase(directory, rate_limiter, issuer)


@pytest.mark.asyncio
async def test_successful_login(use_case, directory, session_service, token_service):
    """Valid credentials issue one session bound to the tokens"""
    user = directory.add_user("user@acme.com", password="SecurePass123!", role="user")

    result = await use_case.execute(
        LoginCommand(email="user@acme.com", password="SecurePass123!"),
        ClientInfo(user_agent="pytest", ip_address="10.0.0.1"),
    )

    assert result.is_ok()
    tokens = result.value
    assert tokens.expires_in == 604800

    sessions = await session_service.aggregate(user.id)
    assert len(sessions) == 1
    assert sessions[0].refresh_token == tokens.refresh_token
    assert sessions[0].user_agent == "pytest"
    assert sessions[0].ip_address == "10.0.0.1"
    assert token_service.verify_token(tokens.access_token).sid == str(sessions[0].id)


@pytest.mark.asyncio
async def test_login_replaces_previous_sessions(use_case, directory, session_service):
    user = directory.add_user("user@acme.com", password="SecurePass123!")
    command = LoginCommand(email="user@acme.com", password="SecurePass123!")

    first = await use_case.execute(command)
    second = await use_case.execute(command)

    sessions = await session_service.aggregate(user.id)
    assert len(sessions) == 1
    assert sessions[0].refresh_token == second.value.refresh_token
    assert await session_service.find_by_refresh_token(first.value.refresh_token) is None


@pytest.mark.asyncio
async def test_login_populates_user_cache(use_case, directory, user_cache):
    user = directory.add_user("user@acme.com", password="SecurePass123!")

    result = await use_case.execute(LoginCommand(email="user@acme.com", password="SecurePass123!"))

    cached = await user_cache.get_by_id(user.id)
    assert cached.refresh_token == result.value.refresh_token
    assert (await user_cache.get_by_email("user@acme.com")).id == user.id


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_look_the_same(use_case, directory, rate_limiter):
    directory.add_user("user@acme.com", password="SecurePass123!")

    wrong = await use_case.execute(LoginCommand(email="user@acme.com", password="nope"))
    unknown = await use_case.execute(LoginCommand(email="ghost@acme.com", password="nope"))

    assert wrong.error == unknown.error
    assert wrong.error.code == "INVALID_CREDENTIALS"
    assert wrong.error.message == "Invalid credentials"
    assert (await rate_limiter.store.get("user@acme.com")).count == 1
    assert (await rate_limiter.store.get("ghost@acme.com")).count == 1


@pytest.mark.asyncio
async def test_lockout_after_five_failures(use_case, directory):
    directory.add_user("user@acme.com", password="SecurePass123!")
    for _ in range(5):
        await use_case.execute(LoginCommand(email="user@acme.com", password="nope"))
    calls_before = directory.validate_calls

    result = await use_case.execute(
        LoginCommand(email="USER@acme.com", password="SecurePass123!")
    )

    assert result.is_err()
    assert result.error.code == "RATE_LIMITED"
    assert 0 < result.error.details["retry_after"] <= 900
    assert directory.validate_calls == calls_before


@pytest.mark.asyncio
async def test_success_clears_failed_attempts(use_case, directory, rate_limiter):
    directory.add_user("user@acme.com", password="SecurePass123!")
    for _ in range(3):
        await use_case.execute(LoginCommand(email="user@acme.com", password="nope"))

    result = await use_case.execute(LoginCommand(email="user@acme.com", password="SecurePass123!"))

    assert result.is_ok()
    assert await rate_limiter.store.get("user@acme.com") is None


@pytest.mark.asyncio
async def test_inactive_account(use_case, directory, session_service):
    user = directory.add_user("user@acme.com", password="SecurePass123!", is_active=False)

    result = await use_case.execute(LoginCommand(email="user@acme.com", password="SecurePass123!"))

    assert result.is_err()
    assert result.error.code == "ACCOUNT_INACTIVE"
    assert await session_service.count(user.id) == 0


@pytest.mark.asyncio
async def test_directory_failure_is_upstream_error(use_case, directory):
    directory.fail_with = UpstreamError("User directory timed out", status_code=504)

    result = await use_case.execute(LoginCommand(email="user@acme.com", password="x"))

    assert result.is_err()
    assert result.error.code == "UPSTREAM_ERROR"
    assert result.error.details["status_code"] == 504


@pytest.mark.asyncio
async def test_rate_limit_checked_before_directory():
    directory = MagicMock()
    directory.find_by_email = AsyncMock()
    rate_limiter = MagicMock()
    locked = Return.err(MagicMock(code="RATE_LIMITED"))
    rate_limiter.check_rate_limit = AsyncMock(return_value=locked)
    issuer = MagicMock()
    issuer.start_fresh = AsyncMock(
        return_value=Return.ok(AuthTokens(access_token="a", refresh_token="r", expires_in=1))
    )

    result = await LoginUseCase(directory, rate_limiter, issuer).execute(
        LoginCommand(email=" User@Acme.com ", password="x")
    )

    assert result is locked
    rate_limiter.check_rate_limit.assert_called_once_with("user@acme.com")
    directory.find_by_email.assert_not_called()
    issuer.start_fresh.assert_not_called()
