from fastapi import status
from libs.result import Error

from src.app import errors

ERROR_STATUS = {
    errors.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    errors.INVALID_SESSION: status.HTTP_401_UNAUTHORIZED,
    errors.ACCOUNT_INACTIVE: status.HTTP_401_UNAUTHORIZED,
    errors.NO_ACCOUNT: status.HTTP_401_UNAUTHORIZED,
    errors.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    errors.EMAIL_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    errors.RATE_LIMITED: status.HTTP_400_BAD_REQUEST,
    errors.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


def to_http_error(error: Error) -> Exception:
    """
    Map a use-case error to the exception the API raises.

    Upstream failures keep a 4xx status reported by the directory;
    anything else from upstream is a 502.
    """
    if error.code == errors.UPSTREAM_ERROR:
        upstream_status = error.details.get("status_code")
        if upstream_status and 400 <= upstream_status < 500:
            return ClientError(error, status_code=upstream_status)
        return ServerError(error, status_code=upstream_status or status.HTTP_502_BAD_GATEWAY)

    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        return ServerError(error)
    return ClientError(error, status_code=status_code)
