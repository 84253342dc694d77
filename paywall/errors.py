"""Typed failures surfaced to API callers.

Each error is an HTTPException so FastAPI renders it as `{"detail": message}`
with the matching status code, whether it is raised from a router, a
dependency, or the billing and access rules underneath them.
"""

from fastapi import HTTPException, status


class BadRequest(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Login required"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InternalError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
        )


class DatabaseUnavailableError(InternalError):
    """Raised when a write is attempted without a configured database."""

    def __init__(self, detail: str = "Database not available"):
        super().__init__(detail=detail)
