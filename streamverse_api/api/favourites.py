"""FastAPI router exposing the caller's favourites list."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from streamverse_api.db.models import User
from streamverse_api.schemas.favourites import FavouriteCandidate, FavouriteListResponse
from streamverse_api.services.favourites_service import (
    FavouritesService,
    get_favourites_service,
)
from streamverse_api.services.session_validator import get_current_user

router = APIRouter()


@router.get("", response_model=FavouriteListResponse)
async def list_favourites(
    user: User = Depends(get_current_user),
    service: FavouritesService = Depends(get_favourites_service),
) -> FavouriteListResponse:
    """Return the caller's favourites in the order they were added."""

    return FavouriteListResponse(items=await service.list_items(user))


@router.post(
    "",
    response_model=FavouriteListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_favourite(
    payload: FavouriteCandidate,
    response: Response,
    user: User = Depends(get_current_user),
    service: FavouritesService = Depends(get_favourites_service),
) -> FavouriteListResponse:
    """Save a catalogue item; re-adding an existing item answers 200."""

    outcome = await service.add(user, payload)
    if not outcome.created:
        response.status_code = status.HTTP_200_OK
    return FavouriteListResponse(items=outcome.items)


@router.delete("/{item_id}", response_model=FavouriteListResponse)
async def remove_favourite(
    item_id: str,
    user: User = Depends(get_current_user),
    service: FavouritesService = Depends(get_favourites_service),
) -> FavouriteListResponse:
    return FavouriteListResponse(items=await service.remove(user, item_id))
