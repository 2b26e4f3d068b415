from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional

from parkfinder.application.services.favorite_service import FavoriteService
from parkfinder.domain.exceptions import DuplicateFavoriteError
from parkfinder.infrastructure.api.dependencies import get_favorite_service
from parkfinder.infrastructure.api.routers.errors import http_error
from parkfinder.infrastructure.api.schemas.parking import FavoriteCreate, FavoriteResponse

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


@router.get("", response_model=List[FavoriteResponse])
async def list_favorites(
    user_id: Optional[int] = Query(default=None, alias="userId"),
    service: FavoriteService = Depends(get_favorite_service)
):
    if not user_id:
        raise HTTPException(status_code=400, detail="User ID is required")
    try:
        return await service.list_favorites(user_id)
    except Exception as e:
        raise http_error(e, "fetch favorites")


@router.post("", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    favorite_data: FavoriteCreate,
    service: FavoriteService = Depends(get_favorite_service)
):
    try:
        favorite, created = await service.add_favorite(favorite_data.user_id, favorite_data.parking_spot_id)
        if not created:
            raise DuplicateFavoriteError(favorite.id)
        return favorite
    except Exception as e:
        raise http_error(e, "add favorite")


@router.delete("/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    favorite_id: int,
    service: FavoriteService = Depends(get_favorite_service)
):
    try:
        await service.remove_favorite(favorite_id)
    except Exception as e:
        raise http_error(e, "remove favorite")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
