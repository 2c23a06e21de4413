"""
Application error types.

Each error maps to one HTTP status. `api/main.py` renders them as
`{"error": "<message>"}`.
"""

from __future__ import annotations

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputError(AppError):
    """400 - malformed id, body or form value"""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """401 - missing or wrong credentials"""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    """404 - no matching row"""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """409 - unique constraint violated"""

    status_code = status.HTTP_409_CONFLICT


class StoreError(AppError):
    """500 - any other database failure; the driver message is kept verbatim"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
