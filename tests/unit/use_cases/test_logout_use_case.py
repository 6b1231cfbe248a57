import pytest

from src.app.use_cases.auth import LoginCommand, LoginUseCase, LogoutUseCase


@pytest.fixture
def use_case(session_service, user_cache):
    return LogoutUseCase(session_service, user_cache)


@pytest.mark.asyncio
async def test_logout_deletes_session_and_cache(
    use_case, directory, rate_limiter, issuer, session_service, user_cache
):
    user = directory.add_user("user@acme.com", password="SecurePass123!")
    login = LoginUseCase(directory, rate_limiter, issuer)
    tokens = (
        await login.execute(LoginCommand(email="user@acme.com", password="SecurePass123!"))
    ).value

    result = await use_case.execute(tokens.refresh_token)

    assert result.is_ok()
    assert await session_service.exists(tokens.refresh_token) is False
    assert await user_cache.get_by_id(user.id) is None
    assert await user_cache.get_by_email(user.email) is None


@pytest.mark.asyncio
async def test_logout_twice(use_case, directory, rate_limiter, issuer):
    directory.add_user("user@acme.com", password="SecurePass123!")
    login = LoginUseCase(directory, rate_limiter, issuer)
    tokens = (
        await login.execute(LoginCommand(email="user@acme.com", password="SecurePass123!"))
    ).value
    await use_case.execute(tokens.refresh_token)

    result = await use_case.execute(tokens.refresh_token)

    assert result.is_err()
    assert result.error.code == "SESSION_NOT_FOUND"
    assert result.error.message == "Session not found"


@pytest.mark.asyncio
async def test_logout_unknown_token(use_case):
    result = await use_case.execute("a" * 64)

    assert result.error.code == "SESSION_NOT_FOUND"
