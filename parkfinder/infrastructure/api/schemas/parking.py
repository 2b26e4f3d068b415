from pydantic import BaseModel, Field, field_validator, ConfigDict
from datetime import date as date_type, datetime, time, timezone
from decimal import Decimal
from typing import Optional, List
from parkfinder.domain.common import SpotSource, ReservationStatus


def _aware(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return dt
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class ParkingSpotBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=300)
    city: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    available_spots: int = Field(..., ge=0)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    rating: Optional[float] = Field(default=None, ge=0, le=5)


class ParkingSpotCreate(ParkingSpotBase):
    pass


class ParkingSpotUpdate(ParkingSpotBase):
    id: int


class ParkingSpotResponse(BaseModel):
    id: Optional[int] = None
    name: str
    address: str
    city: str
    price: float
    available_spots: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: SpotSource
    external_id: Optional[str] = None
    rating: Optional[float] = None
    distance: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class SearchRequest(BaseModel):
    location: str = ""
    date: Optional[str] = None
    radius: float = Field(default=5.0, gt=0, le=50, description="Search radius in miles")

    @field_validator('location')
    def strip_location(cls, v):  # pylint: disable=no-self-argument
        return v.strip()


class ImportSpotRequest(BaseModel):
    source: SpotSource
    external_id: str = Field(..., min_length=1)


class ReservationCreate(BaseModel):
    user_id: int
    parking_spot_id: int
    date: date_type
    start_time: time
    duration: int = Field(..., ge=1, le=24 * 30)
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    license_plate: str = Field(..., min_length=1, max_length=20)
    # Accepted so older clients keep working; the server always recomputes it
    total_price: Optional[Decimal] = None

    @field_validator('license_plate')
    def validate_license_plate(cls, v):  # pylint: disable=no-self-argument
        v = v.upper().strip()
        if not v:
            raise ValueError("License plate is required")
        return v


class ReservationUpdate(BaseModel):
    parking_spot_id: Optional[int] = None
    date: Optional[date_type] = None
    start_time: Optional[time] = None
    duration: Optional[int] = Field(default=None, ge=1, le=24 * 30)
    vehicle_type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    license_plate: Optional[str] = Field(default=None, min_length=1, max_length=20)

    @field_validator('license_plate')
    def validate_license_plate(cls, v):  # pylint: disable=no-self-argument
        if v is None:
            return v
        v = v.upper().strip()
        if not v:
            raise ValueError("License plate is required")
        return v


class QuoteRequest(BaseModel):
    parking_spot_id: int
    duration: int = Field(..., ge=1, le=24 * 30)


class QuoteResponse(BaseModel):
    hourly_rate: float
    duration: int
    subtotal: float
    service_fee: float
    total: float

    model_config = ConfigDict(from_attributes=True)


class ReservationResponse(BaseModel):
    id: int
    user_id: int
    parking_spot_id: int
    date: date_type
    start_time: time
    duration: int
    vehicle_type: str
    license_plate: str
    total_price: float
    status: ReservationStatus
    payment_id: Optional[int] = None
    created_at: datetime
    parking_spot: Optional[ParkingSpotResponse] = None

    @field_validator('created_at')
    @classmethod
    def make_datetime_aware(cls, dt: datetime) -> datetime:
        return _aware(dt)

    model_config = ConfigDict(from_attributes=True)


class FavoriteCreate(BaseModel):
    user_id: int
    parking_spot_id: int


class FavoriteResponse(BaseModel):
    id: int
    user_id: int
    parking_spot_id: int
    parking_spot: Optional[ParkingSpotResponse] = None

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
    errors: Optional[List[dict]] = None
