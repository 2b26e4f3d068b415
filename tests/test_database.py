import pytest
from datetime import date, time
from decimal import Decimal
from unittest.mock import patch
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from parkfinder.domain.common import SpotSource, PaymentStatus, ReservationStatus
from parkfinder.domain.entities import User, ParkingSpot, Reservation, Payment, Favorite, TrendData
from parkfinder.domain.exceptions import DuplicateUsernameError
from parkfinder.infrastructure.persistence import database
from parkfinder.infrastructure.persistence.models.models import (
    User as ORMUser,
    ParkingSpot as ORMParkingSpot,
    CapacityData as ORMCapacityData,
    TrendData as ORMTrendData,
)
from parkfinder.infrastructure.persistence.sqlalchemy_repositories import (
    SQLAlchemyParkingSpotRepository,
    SQLAlchemyReservationRepository,
    SQLAlchemyFavoriteRepository,
    SQLAlchemyUserRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyTrendDataRepository,
)


class TestInitDb:
    """Schema creation and demo seed data."""

    def test_init_db_seeds_once(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'seed.db'}")
        with patch.object(database, "engine", engine):
            database.init_db()
            database.init_db()

        with Session(engine) as session:
            assert session.query(ORMUser).count() == 1
            spots = session.scalars(select(ORMParkingSpot)).all()
        assert len(spots) == len(database.SEED_SPOTS)
        assert all(spot.source == "local" for spot in spots)
        assert spots[0].price == Decimal("5.00")
        with Session(engine) as session:
            assert session.query(ORMCapacityData).count() == len(database.SEED_CAPACITY)
            assert session.query(ORMTrendData).count() == len(database.SEED_TRENDS)


class TestUserRepository:
    async def test_add_duplicate_username(self, db_session, sample_user):
        repo = SQLAlchemyUserRepository(db_session)

        with pytest.raises(DuplicateUsernameError):
            await repo.add(User(username=sample_user.username, name="Copy", email="copy@example.com"))

        assert [u.username for u in await repo.get_all()] == [sample_user.username]
        assert (await repo.get_by_username(sample_user.username)).id == sample_user.id


class TestParkingSpotRepository:
    async def test_get_by_external_id(self, db_session):
        repo = SQLAlchemyParkingSpotRepository(db_session)
        added = await repo.add(ParkingSpot(
            name="Vaughn Center Parking", address="200 N Boulevard", city="Tampa", price=Decimal("1.00"),
            available_spots=65, source=SpotSource.STATIC_CATALOG, external_id="UT1003",
        ))

        found = await repo.get_by_external_id(SpotSource.STATIC_CATALOG, "UT1003")

        assert found.id == added.id
        assert await repo.get_by_external_id(SpotSource.EXTERNAL_API, "UT1003") is None

    async def test_update_missing_spot(self, db_session):
        repo = SQLAlchemyParkingSpotRepository(db_session)
        missing = ParkingSpot(name="X", address="Y", city="Tampa", price=Decimal("1"), available_spots=1, id=77)
        with pytest.raises(ValueError, match="not found"):
            await repo.update(missing)


class TestReservationRepository:
    async def test_get_by_payment_id(self, db_session, sample_user, sample_spot):
        payment = await SQLAlchemyPaymentRepository(db_session).add(
            Payment(user_id=sample_user.id, amount=Decimal("22.00"), stripe_payment_intent_id="pi_1")
        )
        repo = SQLAlchemyReservationRepository(db_session)
        reservation = await repo.add(Reservation(
            user_id=sample_user.id, parking_spot_id=sample_spot.id, date=date(2026, 11, 2), start_time=time(9, 0),
            duration=4, vehicle_type="sedan", license_plate="ABC123", total_price=Decimal("22.00"),
            payment_id=payment.id,
        ))

        linked = await repo.get_by_payment_id(payment.id)

        assert [r.id for r in linked] == [reservation.id]
        assert linked[0].status == ReservationStatus.PENDING


class TestFavoriteRepository:
    async def test_get_or_create(self, db_session, sample_user, sample_spot):
        repo = SQLAlchemyFavoriteRepository(db_session)

        first, created = await repo.get_or_create(Favorite(user_id=sample_user.id, parking_spot_id=sample_spot.id))
        second, created_again = await repo.get_or_create(Favorite(user_id=sample_user.id, parking_spot_id=sample_spot.id))

        assert created is True
        assert created_again is False
        assert second.id == first.id


class TestPaymentRepository:
    async def test_update_status_keeps_amount(self, db_session, sample_user):
        repo = SQLAlchemyPaymentRepository(db_session)
        payment = await repo.add(
            Payment(user_id=sample_user.id, amount=Decimal("22.00"), stripe_payment_intent_id="pi_7")
        )

        updated = await repo.update_status(payment.id, PaymentStatus.SUCCEEDED, card_brand="amex", last_four="0005")

        assert updated.payment_status == PaymentStatus.SUCCEEDED
        assert updated.amount == Decimal("22.00")
        assert (updated.card_brand, updated.last_four) == ("amex", "0005")
        assert (await repo.get_by_intent_id("pi_7")).id == payment.id


class TestChartDataRepository:
    async def test_update_missing_row(self, db_session):
        repo = SQLAlchemyTrendDataRepository(db_session)
        with pytest.raises(ValueError, match="TrendData with ID 3 not found"):
            await repo.update(TrendData(time="8am", available=10, id=3))

    async def test_rows_come_back_in_insert_order(self, db_session):
        repo = SQLAlchemyTrendDataRepository(db_session)
        for label, available in [("8am", 180), ("10am", 120), ("12pm", 60)]:
            await repo.add(TrendData(time=label, available=available))

        assert [(r.time, r.available) for r in await repo.get_all()] == [("8am", 180), ("10am", 120), ("12pm", 60)]
