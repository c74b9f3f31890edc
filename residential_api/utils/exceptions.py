"""
Service-layer exceptions.

Services raise these; `residential_api.main` registers handlers that turn
them into JSON error responses.
"""

from fastapi import status


class AppError(Exception):
    """Base error carrying the component that raised it."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, component: str = "app"):
        super().__init__(message)
        self.message = message
        self.component = component

    def __str__(self) -> str:
        return self.message


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Unique field already taken by another record."""
    status_code = status.HTTP_400_BAD_REQUEST


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
