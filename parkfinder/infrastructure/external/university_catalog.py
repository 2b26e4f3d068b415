import copy
from decimal import Decimal
from typing import List, Optional

from parkfinder.application.providers import AbstractParkingCatalog
from parkfinder.domain.common import SpotSource
from parkfinder.domain.entities import ParkingSpot

# (external_id, name, address, hourly price, spaces, latitude, longitude, rating)
UNIVERSITY_OF_TAMPA_LOCATIONS = (
    ("UT1001", "Thomas Parking Garage", "401 W Kennedy Blvd", "2.00", 120, 27.9447, -82.4640, 4.2),
    ("UT1002", "West Parking Garage", "318 N North Blvd", "1.50", 85, 27.9465, -82.4655, 3.9),
    ("UT1003", "Vaughn Center Parking", "200 N Boulevard", "1.00", 65, 27.9437, -82.4637, 4.5),
    ("UT1004", "Plant Hall Visitor Parking", "401 W Kennedy Blvd", "2.50", 40, 27.9444, -82.4648, 4.1),
    ("UT1005", "North Parking Lot", "304 N Boulevard", "1.00", 55, 27.9475, -82.4640, 3.8),
)


class UniversityParkingCatalog(AbstractParkingCatalog):
    """Campus lots that are always offered, with no network call behind them."""

    def __init__(self, locations=UNIVERSITY_OF_TAMPA_LOCATIONS, city: str = "Tampa"):
        self._spots = tuple(
            ParkingSpot(
                name=name,
                address=address,
                city=city,
                price=Decimal(price),
                available_spots=spaces,
                latitude=latitude,
                longitude=longitude,
                source=SpotSource.STATIC_CATALOG,
                external_id=external_id,
                rating=rating,
            )
            for external_id, name, address, price, spaces, latitude, longitude, rating in locations
        )

    def list(self) -> List[ParkingSpot]:
        # Copies, so a caller setting distance or id never leaks into the table
        return [copy.copy(spot) for spot in self._spots]

    def find_by_external_id(self, external_id: str) -> Optional[ParkingSpot]:
        for spot in self._spots:
            if spot.external_id == external_id:
                return copy.copy(spot)
        return None
