from typing import Generic, Optional, TypeVar

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.api.error import to_http_error
from src.app.use_cases.auth import (
    GoogleCallbackUseCase,
    GoogleLoginUseCase,
    GoogleSignupCommand,
    GoogleSignupUseCase,
    LoginCommand,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
)
from src.depends import (
    get_client_info,
    get_current_user,
    get_google_callback_use_case,
    get_google_login_use_case,
    get_google_signup_use_case,
    get_login_use_case,
    get_logout_use_case,
    get_refresh_token_use_case,
    get_register_use_case,
)
from src.domain.entities import (
    AuthTokens,
    ClientInfo,
    JwtPayload,
    NeedsProfileCompletion,
    SignupOutcome,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every auth endpoint"""

    success: bool = True
    message: str
    data: Optional[T] = None


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    email: EmailStr = Field(..., max_length=255, description="User email address")
    password: str = Field(..., min_length=8, max_length=128, description="User password")
    first_name: str = Field("", max_length=50)
    last_name: str = Field("", max_length=50)
    phone: Optional[str] = None
    avatar: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token")


class GoogleTokenRequest(CamelModel):
    token: str = Field(..., min_length=1, description="Google ID token")


class GoogleSignupRequest(GoogleTokenRequest):
    password: Optional[str] = Field(None, min_length=8, max_length=128)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[AuthTokens],
)
async def register(
    request: RegisterRequest,
    client_info: ClientInfo = Depends(get_client_info),
    use_case: RegisterUseCase = Depends(get_register_use_case),
):
    """
    User Registration

    Creates the account in the user directory and logs it in.

    Raises:
        - 409 Conflict: Email already in use
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
        - 502 Bad Gateway: User directory failure
    """
    command = RegisterCommand(**request.model_dump())
    result = await use_case.execute(command, client_info)

    if result.is_err():
        raise to_http_error(result.error)

    return ApiResponse(message="User registered successfully", data=result.value)


@router.post("/login", status_code=status.HTTP_200_OK, response_model=ApiResponse[AuthTokens])
async def login(
    request: LoginRequest,
    client_info: ClientInfo = Depends(get_client_info),
    use_case: LoginUseCase = Depends(get_login_use_case),
):
    """
    User Login

    Raises:
        - 400 Bad Request: Too many failed attempts (Retry-After header set)
        - 401 Unauthorized: Invalid credentials or inactive account
        - 502 Bad Gateway: User directory failure
    """
    command = LoginCommand(email=request.email, password=request.password)
    result = await use_case.execute(command, client_info)

    if result.is_err():
        raise to_http_error(result.error)

    return ApiResponse(message="User logged in successfully", data=result.value)


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=ApiResponse[None])
async def logout(
    request: RefreshTokenRequest,
    use_case: LogoutUseCase = Depends(get_logout_use_case),
):
    """
    User Logout

    Raises:
        - 404 Not Found: No session holds this refresh token
    """
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise to_http_error(result.error)

    return ApiResponse(message="User logged out successfully")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=ApiResponse[AuthTokens])
async def refresh(
    request: RefreshTokenRequest,
    use_case: RefreshTokenUseCase = Depends(get_refresh_token_use_case),
):
    """
    Refresh Tokens

    Rotates the refresh token and issues a new access token for the same session.

    Raises:
        - 401 Unauthorized: Unknown, inactive or expired session, or inactive user
    """
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise to_http_error(result.error)

    return ApiResponse(message="Tokens refreshed successfully", data=result.value)


@router.post(
    "/google/login", status_code=status.HTTP_200_OK, response_model=ApiResponse[AuthTokens]
)
async def google_login(
    request: GoogleTokenRequest,
    client_info: ClientInfo = Depends(get_client_info),
    use_case: GoogleLoginUseCase = Depends(get_google_login_use_case),
):
    """
    Login with Google

    Raises:
        - 401 Unauthorized: Invalid Google token, no account, or inactive account
    """
    result = await use_case.execute(request.token, client_info)

    if result.is_err():
        raise to_http_error(result.error)

    return ApiResponse(message="User logged in with Google", data=result.value)


@router.post(
    "/google/signup", status_code=status.HTTP_200_OK, response_model=ApiResponse[SignupOutcome]
)
async def google_signup(
    request: GoogleSignupRequest,
    client_info: ClientInfo = Depends(get_client_info),
    use_case: GoogleSignupUseCase = Depends(get_google_signup_use_case),
):
    """
    Signup with Google

    Without a password the account is not created and data.kind is
    "needs_profile_completion".

    Raises:
        - 401 Unauthorized: Invalid Google token
        - 409 Conflict: Email already in use
    """
    command = GoogleSignupCommand(token=request.token, password=request.password)
    result = await use_case.execute(command, client_info)

    if result.is_err():
        raise to_http_error(result.error)

    outcome = result.value
    if isinstance(outcome, NeedsProfileCompletion):
        return ApiResponse(message="Profile completion required", data=outcome)
    return ApiResponse(message="User signed up with Google", data=outcome)


@router.post(
    "/google/callback", status_code=status.HTTP_200_OK, response_model=ApiResponse[AuthTokens]
)
async def google_callback(
    request: GoogleTokenRequest,
    client_info: ClientInfo = Depends(get_client_info),
    use_case: GoogleCallbackUseCase = Depends(get_google_callback_use_case),
):
    """
    Google OAuth callback

    Logs the Google identity in, registering it first if no account exists.
    """
    result = await use_case.execute(request.token, client_info)

    if result.is_err():
        raise to_http_error(result.error)

    callback = result.value
    message = (
        "User registered and logged in with Google"
        if callback.registered
        else "User logged in with Google"
    )
    return ApiResponse(message=message, data=callback.tokens)


@router.get("/me", status_code=status.HTTP_200_OK, response_model=ApiResponse[JwtPayload])
async def me(current_user: JwtPayload = Depends(get_current_user)):
    """Claims of the presented access token"""
    return ApiResponse(message="Authenticated", data=current_user)
