"""Domain exceptions raised by the services and translated by ``main``.

Each subclass carries the HTTP status and :class:`ErrorType` it maps to, so
routers never need ``try``/``except`` blocks just to pick a status code.
"""

from __future__ import annotations

from fastapi import status

from streamverse_api.schemas.error import ErrorType


class ServiceError(Exception):
    """Base class for expected, client-facing failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: ErrorType = ErrorType.INTERNAL_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = ErrorType.VALIDATION_ERROR
    default_message = "Invalid request payload."


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = ErrorType.AUTHENTICATION_ERROR
    default_message = "Unauthorized."


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = ErrorType.NOT_FOUND
    default_message = "Not found."


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    error_type = ErrorType.CONFLICT
    default_message = "The resource already exists."


class BlobStorageError(ServiceError):
    """The external blob store rejected or failed an avatar operation."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_type = ErrorType.UPSTREAM_ERROR
    default_message = "Avatar storage is unavailable."


__all__ = [
    "BlobStorageError",
    "ConflictError",
    "InvalidInputError",
    "NotFoundError",
    "ServiceError",
    "UnauthorizedError",
]
