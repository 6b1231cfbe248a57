"""
Error codes returned by the auth use cases, and the exceptions adapters raise
when a collaborator fails.
"""

from typing import Optional

from libs.result import Error

# 401
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
INVALID_SESSION = "INVALID_SESSION"
ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
NO_ACCOUNT = "NO_ACCOUNT"
INVALID_TOKEN = "INVALID_TOKEN"
# 409
EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
# 400
RATE_LIMITED = "RATE_LIMITED"
# 404
SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
# 5xx / passthrough
UPSTREAM_ERROR = "UPSTREAM_ERROR"


class UpstreamError(Exception):
    """A remote collaborator (directory, cache, OAuth provider) failed or timed out"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class OAuthVerificationError(Exception):
    """The identity provider rejected the presented token"""


def invalid_credentials() -> Error:
    return Error(INVALID_CREDENTIALS, "Invalid credentials")


def email_in_use() -> Error:
    return Error(EMAIL_ALREADY_EXISTS, "This email is already in use. Try to login instead.")


def upstream_error(exc: UpstreamError) -> Error:
    details = {"status_code": exc.status_code} if exc.status_code else {}
    return Error(UPSTREAM_ERROR, exc.message, details)
