from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from parkfinder.domain.common import SpotSource, ReservationStatus, PaymentStatus, PaymentMethod


class User:
    def __init__(self, username: str, name: str, email: str, id: Optional[int] = None):
        self.id = id
        self.username = username
        self.name = name
        self.email = email


class ParkingSpot:
    def __init__(
        self,
        name: str,
        address: str,
        city: str,
        price: Decimal,
        available_spots: int,
        source: SpotSource = SpotSource.LOCAL,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        external_id: Optional[str] = None,
        rating: Optional[float] = None,
        distance: Optional[float] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.address = address
        self.city = city
        self.price = price
        self.available_spots = available_spots
        self.source = source
        self.latitude = latitude
        self.longitude = longitude
        self.external_id = external_id
        self.rating = rating
        # Miles from the search location; never persisted
        self.distance = distance
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def identity_key(self) -> tuple:
        """Key used to spot the same physical location coming from two sources."""
        return (self.name, self.address)

    def matches_location(self, location: str) -> bool:
        return location in (self.city or "") or location in (self.address or "")


class Reservation:
    def __init__(
        self,
        user_id: int,
        parking_spot_id: int,
        date: date,
        start_time: time,
        duration: int,
        vehicle_type: str,
        license_plate: str,
        total_price: Optional[Decimal] = None,
        status: ReservationStatus = ReservationStatus.PENDING,
        payment_id: Optional[int] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.parking_spot_id = parking_spot_id
        self.date = date
        self.start_time = start_time
        self.duration = duration
        self.vehicle_type = vehicle_type
        self.license_plate = license_plate
        self.total_price = total_price
        self.status = status
        self.payment_id = payment_id
        self.created_at = created_at
        # Filled in by services that embed the spot in responses
        self.parking_spot: Optional[ParkingSpot] = None


class Payment:
    def __init__(
        self,
        user_id: int,
        amount: Decimal,
        payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        stripe_payment_intent_id: Optional[str] = None,
        last_four: Optional[str] = None,
        card_brand: Optional[str] = None,
        id: Optional[int] = None,
        transaction_date: Optional[datetime] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.amount = amount
        self.payment_method = payment_method
        self.payment_status = payment_status
        self.stripe_payment_intent_id = stripe_payment_intent_id
        self.last_four = last_four
        self.card_brand = card_brand
        self.transaction_date = transaction_date


class Favorite:
    def __init__(self, user_id: int, parking_spot_id: int, id: Optional[int] = None):
        self.id = id
        self.user_id = user_id
        self.parking_spot_id = parking_spot_id
        self.parking_spot: Optional[ParkingSpot] = None


class CapacityData:
    """Spaces per lot for the capacity chart."""

    def __init__(self, name: str, capacity: int, available: int, id: Optional[int] = None):
        self.id = id
        self.name = name
        self.capacity = capacity
        self.available = available

    @property
    def percentage_available(self) -> int:
        if self.capacity <= 0:
            return 0
        return round(self.available * 100 / self.capacity)


class UsageData:
    def __init__(self, name: str, value: int, id: Optional[int] = None):
        self.id = id
        self.name = name
        self.value = value


class TrendData:
    def __init__(self, time: str, available: int, id: Optional[int] = None):
        self.id = id
        self.time = time
        self.available = available
