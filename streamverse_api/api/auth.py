"""Account registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from streamverse_api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from streamverse_api.services.auth_service import AuthService, get_auth_service

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Create an account and return a session token for it."""

    token, user = await service.register(payload)
    return AuthResponse(token=token, user=user)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Exchange an email or username plus password for a session token."""

    token, user = await service.login(payload)
    return AuthResponse(token=token, user=user)
