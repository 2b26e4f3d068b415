from datetime import date, time, datetime, timezone
from decimal import Decimal
from parkfinder.domain.entities import User, ParkingSpot, Reservation, Payment, Favorite, CapacityData
from parkfinder.domain.common import SpotSource, ReservationStatus, PaymentStatus, PaymentMethod


def test_user_creation():
    """Test that a User object can be created with correct attributes."""
    user = User(username="demo", name="Demo User", email="demo@example.com", id=1)
    assert user.id == 1
    assert user.username == "demo"
    assert user.email == "demo@example.com"


def test_parking_spot_defaults():
    """Test ParkingSpot creation with default optional arguments."""
    spot = ParkingSpot(name="Lot", address="1 Main St", city="Tampa", price=Decimal("3.00"), available_spots=4)
    assert spot.id is None
    assert spot.source == SpotSource.LOCAL
    assert spot.external_id is None
    assert spot.distance is None


def test_parking_spot_identity_key():
    spot = ParkingSpot(name="Lot", address="1 Main St", city="Tampa", price=Decimal("3.00"), available_spots=4,
                       source=SpotSource.STATIC_CATALOG, external_id="UT1")
    assert spot.identity_key == ("Lot", "1 Main St")


def test_parking_spot_matches_location():
    spot = ParkingSpot(name="Lot", address="1 Main St", city="Tampa", price=Decimal("3.00"), available_spots=4)
    assert spot.matches_location("Tam")
    assert spot.matches_location("Main")
    assert not spot.matches_location("tampa")
    assert not spot.matches_location("Orlando")


def test_reservation_defaults():
    """Test that a Reservation starts pending with no payment."""
    reservation = Reservation(
        user_id=1, parking_spot_id=2, date=date(2026, 11, 2), start_time=time(9, 30),
        duration=3, vehicle_type="sedan", license_plate="ABC123",
    )
    assert reservation.status == ReservationStatus.PENDING
    assert reservation.payment_id is None
    assert reservation.total_price is None
    assert reservation.parking_spot is None


def test_payment_creation():
    now = datetime.now(timezone.utc)
    payment = Payment(user_id=1, amount=Decimal("22.00"), stripe_payment_intent_id="pi_1", id=5, transaction_date=now)
    assert payment.payment_method == PaymentMethod.CREDIT_CARD
    assert payment.payment_status == PaymentStatus.PENDING
    assert payment.transaction_date == now
    assert payment.card_brand is None


def test_favorite_creation():
    favorite = Favorite(user_id=1, parking_spot_id=9)
    assert favorite.id is None
    assert favorite.parking_spot is None


def test_payment_status_terminal():
    assert PaymentStatus.SUCCEEDED.is_terminal
    assert PaymentStatus.FAILED.is_terminal
    assert not PaymentStatus.PENDING.is_terminal


def test_capacity_percentage_available():
    """Percentage available rounds half to even, and an empty lot reports zero."""
    assert CapacityData(name="Collins Garage", capacity=200, available=75).percentage_available == 38
    assert CapacityData(name="Laurel Drive", capacity=8, available=1).percentage_available == 12
    assert CapacityData(name="Closed", capacity=0, available=0).percentage_available == 0
