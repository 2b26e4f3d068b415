from typing import List, Tuple
from loguru import logger

from parkfinder.application.repositories import AbstractFavoriteRepository, AbstractParkingSpotRepository
from parkfinder.domain.entities import Favorite
from parkfinder.domain.exceptions import NotFoundError


class FavoriteService:
    def __init__(
        self,
        favorite_repo: AbstractFavoriteRepository,
        parking_spot_repo: AbstractParkingSpotRepository,
    ):
        self.favorite_repo = favorite_repo
        self.parking_spot_repo = parking_spot_repo

    async def add_favorite(self, user_id: int, parking_spot_id: int) -> Tuple[Favorite, bool]:
        """Save a spot for a user. A repeat call returns the existing row with created=False."""
        spot = await self.parking_spot_repo.get_by_id(parking_spot_id)
        if not spot:
            raise NotFoundError("Parking spot", parking_spot_id)

        favorite, created = await self.favorite_repo.get_or_create(
            Favorite(user_id=user_id, parking_spot_id=parking_spot_id)
        )
        favorite.parking_spot = spot
        if created:
            logger.info(f"User {user_id} saved parking spot {parking_spot_id}")
        return favorite, created

    async def list_favorites(self, user_id: int) -> List[Favorite]:
        favorites = await self.favorite_repo.get_by_user(user_id)
        for favorite in favorites:
            favorite.parking_spot = await self.parking_spot_repo.get_by_id(favorite.parking_spot_id)
        return favorites

    async def remove_favorite(self, favorite_id: int) -> None:
        if not await self.favorite_repo.delete(favorite_id):
            raise NotFoundError("Favorite", favorite_id)
        logger.info(f"Favorite {favorite_id} removed")
