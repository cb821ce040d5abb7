"""HTTP error taxonomy shared by routers and services.

Every error renders as ``{"detail": {"error": {"code": ..., "message": ...}}}``.
"""

from fastapi import HTTPException, status


class APIError(HTTPException):
    """Base class for errors with a machine-checkable code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, headers: dict[str, str] | None = None):
        self.message = message
        super().__init__(
            status_code=self.status_code,
            detail={
                "error": {
                    "code": self.code,
                    "message": message,
                }
            },
            headers=headers,
        )


class BadRequest(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"


class Unauthorized(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"

    def __init__(self, message: str):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class InternalError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"
