from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, Date, Time, ForeignKey, UniqueConstraint
from sqlalchemy.orm import declarative_base
from parkfinder.shared.custom_types import UTCDateTime, Money

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)


class ParkingSpot(Base):
    __tablename__ = "parking_spots"
    __table_args__ = (
        # NULL external ids never collide, so local spots are unaffected
        UniqueConstraint("source", "external_id", name="uq_parking_spots_source_external_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    price = Column(Money, nullable=False, default=0)
    available_spots = Column(Integer, nullable=False, default=0)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    source = Column(String, nullable=False, default="local")  # local, static_catalog, external_api
    external_id = Column(String, nullable=True)
    rating = Column(Float, nullable=True)
    created_at = Column(UTCDateTime, default=_utcnow, nullable=False)
    updated_at = Column(UTCDateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    payment_method = Column(String, nullable=False, default="credit_card")  # credit_card, wallet
    payment_status = Column(String, nullable=False, default="pending")  # pending, succeeded, failed
    stripe_payment_intent_id = Column(String, unique=True, index=True, nullable=True)
    transaction_date = Column(UTCDateTime, default=_utcnow, nullable=False)
    last_four = Column(String(4), nullable=True)
    card_brand = Column(String(20), nullable=True)


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    parking_spot_id = Column(Integer, ForeignKey("parking_spots.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    duration = Column(Integer, nullable=False)  # whole hours
    vehicle_type = Column(String, nullable=False)
    license_plate = Column(String, nullable=False)
    total_price = Column(Money, nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending, confirmed, cancelled, failed
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(UTCDateTime, default=_utcnow, nullable=False)


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "parking_spot_id", name="uq_favorites_user_spot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    parking_spot_id = Column(Integer, ForeignKey("parking_spots.id", ondelete="CASCADE"), nullable=False, index=True)


class CapacityData(Base):
    __tablename__ = "capacity_data"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    available = Column(Integer, nullable=False)


class UsageData(Base):
    __tablename__ = "usage_data"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    value = Column(Integer, nullable=False)  # percent of all parkers


class TrendData(Base):
    __tablename__ = "trend_data"

    id = Column(Integer, primary_key=True, index=True)
    time = Column(String(20), nullable=False)  # display label, e.g. "8am"
    available = Column(Integer, nullable=False)
