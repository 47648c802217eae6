"""Pydantic schemas shared by the API routers and services."""

from .auth import AuthResponse, LoginRequest, RegisterRequest
from .error import ErrorResponse, ErrorType, ValidationErrorDetail, ValidationErrorResponse
from .favourites import FavouriteCandidate, FavouriteItem, FavouriteListResponse
from .user import ProfileUpdate, UserEnvelope, UserRead

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "ErrorType",
    "FavouriteCandidate",
    "FavouriteItem",
    "FavouriteListResponse",
    "LoginRequest",
    "ProfileUpdate",
    "RegisterRequest",
    "UserEnvelope",
    "UserRead",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
]
