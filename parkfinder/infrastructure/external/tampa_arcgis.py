"""City of Tampa parking garages and lots, read from the ArcGIS feature service."""
from decimal import Decimal, InvalidOperation
from typing import List, Optional

import httpx
from loguru import logger

from parkfinder.application.providers import AbstractExternalParkingSource
from parkfinder.config.settings_env import settings
from parkfinder.domain.common import SpotSource
from parkfinder.domain.entities import ParkingSpot

QUERY_PARAMS = {
    "where": "1=1",
    "outFields": "*",
    "outSR": "4326",
    "f": "geojson",
}

UNKNOWN_NAME = "Unknown Parking"
UNKNOWN_ADDRESS = "No address provided"


def parse_rate(rate: Optional[str]) -> Decimal:
    """'$2.50' -> Decimal('2.50'); anything unparsable is free."""
    if rate is None:
        return Decimal("0")
    text = str(rate).strip()
    if text.startswith("$"):
        text = text[1:].strip()
    try:
        price = Decimal(text)
    except InvalidOperation:
        return Decimal("0")
    if not price.is_finite() or price < 0:
        return Decimal("0")
    return price


def _lat_lon(lat, lon) -> tuple:
    try:
        return float(lat), float(lon)
    except (TypeError, ValueError):
        return None, None


def _coordinates(feature: dict, properties: dict) -> tuple:
    """Point geometry first, then the LAT/LON attributes; unreadable values give (None, None)."""
    geometry = feature.get("geometry")
    coordinates = geometry.get("coordinates") if isinstance(geometry, dict) else None
    # GeoJSON points are [longitude, latitude]
    if isinstance(coordinates, (list, tuple)) and len(coordinates) >= 2:
        latitude, longitude = _lat_lon(coordinates[1], coordinates[0])
        if latitude is not None:
            return latitude, longitude
    lat, lon = properties.get("LAT"), properties.get("LON")
    if lat is not None and lon is not None:
        return _lat_lon(lat, lon)
    return None, None


class TampaArcGISParkingSource(AbstractExternalParkingSource):
    def __init__(
        self,
        url: str = settings.EXTERNAL_PARKING_API_URL,
        timeout: float = settings.EXTERNAL_PARKING_TIMEOUT,
        city: str = settings.EXTERNAL_PARKING_CITY,
        default_available_spots: int = settings.EXTERNAL_DEFAULT_AVAILABLE_SPOTS,
        default_rating: float = settings.EXTERNAL_DEFAULT_RATING,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.city = city
        self.default_available_spots = default_available_spots
        self.default_rating = default_rating
        self.transport = transport

    async def fetch(self) -> List[ParkingSpot]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.url, params=QUERY_PARAMS)
                response.raise_for_status()
                payload = response.json()

            features = payload.get("features") if isinstance(payload, dict) else None
            if not features:
                logger.warning("Tampa parking feed returned no features")
                return []

            spots = []
            for feature in features:
                spot = self.map_feature(feature)
                if spot is not None:
                    spots.append(spot)
            logger.debug(f"Fetched {len(spots)} locations from the Tampa parking feed")
            return spots
        except Exception as e:
            # The feed is optional; search keeps working without it
            logger.warning(f"Error fetching Tampa parking data: {e}")
            return []

    def map_feature(self, feature: dict) -> Optional[ParkingSpot]:
        if not isinstance(feature, dict):
            return None
        properties = feature.get("properties") or feature.get("attributes")
        if not isinstance(properties, dict):
            return None

        try:
            available_spots = int(properties["SPACES"])
        except (KeyError, TypeError, ValueError):
            available_spots = self.default_available_spots
        latitude, longitude = _coordinates(feature, properties)
        object_id = properties.get("OBJECTID")

        return ParkingSpot(
            name=properties.get("NAME") or UNKNOWN_NAME,
            address=properties.get("ADDRESS") or UNKNOWN_ADDRESS,
            city=self.city,
            price=parse_rate(properties.get("RATE")),
            available_spots=available_spots,
            latitude=latitude,
            longitude=longitude,
            source=SpotSource.EXTERNAL_API,
            external_id=str(object_id) if object_id is not None else None,
            rating=self.default_rating,
        )
