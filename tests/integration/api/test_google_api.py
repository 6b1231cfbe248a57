import pytest
from httpx import AsyncClient


@pytest.fixture
def google_token(verifier):
    verifier.add_token("google-token", "ada@gmail.com", given_name="Ada", family_name="Lovelace")
    return "google-token"


@pytest.mark.asyncio
async def test_google_login_requires_account(client: AsyncClient, google_token):
    response = await client.post("/auth/google/login", json={"token": google_token})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NO_ACCOUNT"


@pytest.mark.asyncio
async def test_google_login_existing_account(client: AsyncClient, google_token, directory):
    directory.add_user("ada@gmail.com")

    response = await client.post("/auth/google/login", json={"token": google_token})

    assert response.status_code == 200
    assert response.json()["message"] == "User logged in with Google"
    assert response.json()["data"]["expiresIn"] == 604800


@pytest.mark.asyncio
async def test_google_login_invalid_token(client: AsyncClient):
    response = await client.post("/auth/google/login", json={"token": "forged"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_google_signup_without_password(client: AsyncClient, google_token, directory):
    response = await client.post("/auth/google/signup", json={"token": google_token})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data == {"kind": "needs_profile_completion", "email": "ada@gmail.com"}
    assert directory.created == []


@pytest.mark.asyncio
async def test_google_signup_with_password(client: AsyncClient, google_token):
    response = await client.post(
        "/auth/google/signup", json={"token": google_token, "password": "ChosenPass123!"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["kind"] == "tokens"
    assert len(data["tokens"]["refreshToken"]) == 64

    conflict = await client.post(
        "/auth/google/signup", json={"token": google_token, "password": "ChosenPass123!"}
    )
    assert conflict.status_code == 409


@pytest.mark.asyncio
async def test_google_callback_registers_then_logs_in(client: AsyncClient, google_token):
    first = await client.post("/auth/google/callback", json={"token": google_token})
    second = await client.post("/auth/google/callback", json={"token": google_token})

    assert first.status_code == 200
    assert first.json()["message"] == "User registered and logged in with Google"
    assert second.status_code == 200
    assert second.json()["message"] == "User logged in with Google"
    assert second.json()["data"]["refreshToken"] != first.json()["data"]["refreshToken"]
