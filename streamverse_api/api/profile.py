"""Endpoints operating on the authenticated caller's own profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from streamverse_api.db.models import User
from streamverse_api.schemas.user import ProfileUpdate, UserEnvelope
from streamverse_api.services.profile_service import ProfileService, get_profile_service
from streamverse_api.services.session_validator import get_current_user

router = APIRouter()


@router.get("/me", response_model=UserEnvelope)
@router.get("", response_model=UserEnvelope, include_in_schema=False)
async def get_profile(
    user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> UserEnvelope:
    return UserEnvelope(user=service.get_profile(user))


@router.put("", response_model=UserEnvelope)
async def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> UserEnvelope:
    """Update any subset of name, username, email and avatar."""

    return UserEnvelope(user=await service.update_profile(user, payload))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> Response:
    """Delete the account, its favourites and its avatar. Irreversible."""

    await service.delete_profile(user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
