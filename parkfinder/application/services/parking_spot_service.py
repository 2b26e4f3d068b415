from typing import Iterable, List, Optional, Tuple
from loguru import logger

from parkfinder.application.providers import AbstractExternalParkingSource, AbstractParkingCatalog
from parkfinder.application.repositories import AbstractParkingSpotRepository
from parkfinder.domain.common import SpotSource
from parkfinder.domain.entities import ParkingSpot
from parkfinder.domain.exceptions import NotFoundError


def merge_unique(*sources: Iterable[ParkingSpot]) -> List[ParkingSpot]:
    """Concatenate spot lists, keeping the first spot seen for each (name, address)."""
    seen = set()
    merged = []
    for spots in sources:
        for spot in spots:
            if spot.identity_key in seen:
                continue
            seen.add(spot.identity_key)
            merged.append(spot)
    return merged


def filter_by_location(spots: Iterable[ParkingSpot], location: str) -> List[ParkingSpot]:
    """Plain substring match on city or address; there is no geocoding behind it."""
    if not location:
        return list(spots)
    return [spot for spot in spots if spot.matches_location(location)]


class ParkingSpotService:
    def __init__(
        self,
        parking_spot_repo: AbstractParkingSpotRepository,
        catalog: AbstractParkingCatalog,
        external_source: AbstractExternalParkingSource,
    ):
        self.parking_spot_repo = parking_spot_repo
        self.catalog = catalog
        self.external_source = external_source

    async def search(self, location: Optional[str], radius: Optional[float] = None) -> List[ParkingSpot]:
        location = (location or "").strip()

        local_spots = await self.parking_spot_repo.get_all()
        catalog_spots = self.catalog.list()
        external_spots = await self.external_source.fetch()

        # Radius is accepted for API compatibility only; matching is by text
        if location and radius is not None:
            logger.debug(f"Radius {radius} mi ignored for location search '{location}'")

        results = merge_unique(
            filter_by_location(local_spots, location),
            filter_by_location(catalog_spots, location),
            filter_by_location(external_spots, location),
        )
        logger.info(
            f"Search '{location}' returned {len(results)} spots "
            f"(local={len(local_spots)}, catalog={len(catalog_spots)}, external={len(external_spots)})"
        )
        return results

    async def list_spots(self) -> List[ParkingSpot]:
        local_spots = await self.parking_spot_repo.get_all()
        return merge_unique(local_spots, self.catalog.list())

    async def get_spot(self, spot_id: int) -> ParkingSpot:
        spot = await self.parking_spot_repo.get_by_id(spot_id)
        if not spot:
            raise NotFoundError("Parking spot", spot_id)
        return spot

    async def create_spot(self, spot: ParkingSpot) -> ParkingSpot:
        spot.source = SpotSource.LOCAL
        spot.external_id = None
        created = await self.parking_spot_repo.add(spot)
        logger.info(f"Created parking spot {created.id} '{created.name}'")
        return created

    async def update_spot(self, spot_id: int, changes: ParkingSpot) -> ParkingSpot:
        existing = await self.get_spot(spot_id)
        changes.id = existing.id
        updated = await self.parking_spot_repo.update(changes)
        logger.info(f"Updated parking spot {spot_id}")
        return updated

    async def delete_spot(self, spot_id: int) -> None:
        deleted = await self.parking_spot_repo.delete(spot_id)
        if not deleted:
            raise NotFoundError("Parking spot", spot_id)
        logger.info(f"Deleted parking spot {spot_id} with its reservations and favorites")

    async def import_spot(self, source: SpotSource, external_id: str) -> Tuple[ParkingSpot, bool]:
        """Persist a catalog or feed location so it can be reserved. Returns (spot, created)."""
        source = SpotSource(source)
        if source is SpotSource.LOCAL:
            raise ValueError("Only static_catalog or external_api spots can be imported")

        existing = await self.parking_spot_repo.get_by_external_id(source, external_id)
        if existing:
            return existing, False

        if source is SpotSource.STATIC_CATALOG:
            candidate = self.catalog.find_by_external_id(external_id)
        else:
            candidate = next(
                (s for s in await self.external_source.fetch() if s.external_id == external_id),
                None,
            )
        if candidate is None:
            raise NotFoundError(f"{source.value} spot", external_id)

        candidate.id = None
        candidate.distance = None
        imported = await self.parking_spot_repo.add(candidate)
        logger.info(f"Imported {source.value} spot {external_id} as parking spot {imported.id}")
        return imported, True
