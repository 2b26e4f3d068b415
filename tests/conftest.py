import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
import tempfile
import os
import json
from datetime import date, time
from decimal import Decimal

from parkfinder.infrastructure.persistence.models.models import Base
from parkfinder.infrastructure.persistence.database import enable_sqlite_foreign_keys
from parkfinder.infrastructure.persistence.sqlalchemy_repositories import (
    SQLAlchemyUserRepository,
    SQLAlchemyParkingSpotRepository,
    SQLAlchemyReservationRepository,
    SQLAlchemyFavoriteRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyCapacityDataRepository,
    SQLAlchemyUsageDataRepository,
    SQLAlchemyTrendDataRepository,
)
from parkfinder.infrastructure.external.university_catalog import UniversityParkingCatalog
from parkfinder.application.providers import (
    AbstractExternalParkingSource,
    AbstractPaymentGateway,
    ProviderIntent,
    ProviderEvent,
)
from parkfinder.application.services.parking_spot_service import ParkingSpotService
from parkfinder.application.services.reservation_service import ReservationService
from parkfinder.application.services.favorite_service import FavoriteService
from parkfinder.application.services.payment_service import PaymentService
from parkfinder.application.services.user_service import UserService
from parkfinder.application.services.visualization_service import VisualizationService
from parkfinder.domain.common import SpotSource
from parkfinder.domain.entities import User, ParkingSpot
from parkfinder.domain.exceptions import PaymentProviderError


class FakeExternalSource(AbstractExternalParkingSource):
    """Stands in for the ArcGIS feed."""

    def __init__(self, spots=None):
        self.spots = spots or []
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        return [
            ParkingSpot(
                name=s.name, address=s.address, city=s.city, price=s.price,
                available_spots=s.available_spots, source=s.source,
                external_id=s.external_id, rating=s.rating,
            )
            for s in self.spots
        ]


class FakePaymentGateway(AbstractPaymentGateway):
    """In-memory payment provider. Intents are kept so tests can flip their status."""

    def __init__(self):
        self.intents = {}
        self.created = []
        self.fail_with = None

    async def create_intent(self, amount_cents, currency, metadata):
        if self.fail_with:
            raise PaymentProviderError(self.fail_with)
        intent_id = f"pi_test_{len(self.intents) + 1}"
        intent = ProviderIntent(
            id=intent_id,
            status="requires_payment_method",
            amount_cents=amount_cents,
            client_secret=f"{intent_id}_secret",
        )
        self.intents[intent_id] = intent
        self.created.append({"amount_cents": amount_cents, "currency": currency, "metadata": metadata})
        return intent

    async def retrieve_intent(self, intent_id):
        if intent_id not in self.intents:
            raise PaymentProviderError(f"No such payment_intent: '{intent_id}'")
        return self.intents[intent_id]

    def parse_event(self, payload, signature):
        event = json.loads(payload)
        if "type" not in event:
            raise ValueError("Event has no type")
        obj = event.get("data", {}).get("object") or {}
        intent = None
        if obj.get("id"):
            known = self.intents.get(obj["id"])
            intent = ProviderIntent(
                id=obj["id"],
                status=obj.get("status", "succeeded"),
                amount_cents=obj.get("amount", known.amount_cents if known else 0),
                card_brand=obj.get("card_brand"),
                last_four=obj.get("last_four"),
            )
        return ProviderEvent(type=event["type"], intent=intent)

    def succeed(self, intent_id, card_brand="visa", last_four="4242"):
        intent = self.intents[intent_id]
        intent.status = "succeeded"
        intent.card_brand = card_brand
        intent.last_four = last_four


@pytest.fixture(scope="function")
async def test_db():
    """Create a test database for each test function."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp_file:
        test_db_path = tmp_file.name

    # NullPool avoids connections outliving the temp file
    test_db_url = f"sqlite+aiosqlite:///{test_db_path}"
    engine = create_async_engine(
        test_db_url,
        poolclass=NullPool,
        echo=False
    )
    enable_sqlite_foreign_keys(engine.sync_engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    yield async_session_maker

    await engine.dispose()
    os.unlink(test_db_path)


@pytest.fixture
async def db_session(test_db):
    """Create a database session for a test."""
    async with test_db() as session:
        yield session
        await session.rollback()


@pytest.fixture
def catalog():
    return UniversityParkingCatalog()


@pytest.fixture
def external_source():
    return FakeExternalSource([
        ParkingSpot(
            name="Fort Brooke Garage", address="107 N Franklin St", city="Tampa",
            price=Decimal("1.60"), available_spots=1200,
            source=SpotSource.EXTERNAL_API, external_id="7", rating=4.0,
        ),
        ParkingSpot(
            name="Thomas Parking Garage", address="401 W Kennedy Blvd", city="Tampa",
            price=Decimal("2.00"), available_spots=50,
            source=SpotSource.EXTERNAL_API, external_id="12", rating=4.0,
        ),
    ])


@pytest.fixture
def fake_gateway():
    return FakePaymentGateway()


@pytest.fixture
async def sample_user(db_session):
    return await SQLAlchemyUserRepository(db_session).add(
        User(username="jdoe", name="Jamie Doe", email="jamie@example.com")
    )


@pytest.fixture
async def other_user(db_session):
    return await SQLAlchemyUserRepository(db_session).add(
        User(username="asmith", name="Alex Smith", email="alex@example.com")
    )


@pytest.fixture
async def sample_spot(db_session):
    return await SQLAlchemyParkingSpotRepository(db_session).add(
        ParkingSpot(
            name="Downtown Garage", address="123 Main St", city="Tampa",
            price=Decimal("5.00"), available_spots=42, latitude=27.9506, longitude=-82.4572, rating=4.3,
        )
    )


@pytest.fixture
async def parking_spot_service(db_session, catalog, external_source):
    return ParkingSpotService(
        parking_spot_repo=SQLAlchemyParkingSpotRepository(db_session),
        catalog=catalog,
        external_source=external_source,
    )


@pytest.fixture
async def reservation_service(db_session):
    return ReservationService(
        reservation_repo=SQLAlchemyReservationRepository(db_session),
        parking_spot_repo=SQLAlchemyParkingSpotRepository(db_session),
        user_repo=SQLAlchemyUserRepository(db_session),
        service_fee=Decimal("2.00"),
    )


@pytest.fixture
async def favorite_service(db_session):
    return FavoriteService(
        favorite_repo=SQLAlchemyFavoriteRepository(db_session),
        parking_spot_repo=SQLAlchemyParkingSpotRepository(db_session),
    )


@pytest.fixture
async def payment_service(db_session, reservation_service, fake_gateway):
    return PaymentService(
        payment_repo=SQLAlchemyPaymentRepository(db_session),
        reservation_repo=reservation_service.reservation_repo,
        reservation_service=reservation_service,
        user_repo=SQLAlchemyUserRepository(db_session),
        gateway=fake_gateway,
        currency="usd",
    )


@pytest.fixture
async def user_service(db_session):
    return UserService(user_repo=SQLAlchemyUserRepository(db_session))


@pytest.fixture
async def visualization_service(db_session):
    return VisualizationService(
        capacity_repo=SQLAlchemyCapacityDataRepository(db_session),
        usage_repo=SQLAlchemyUsageDataRepository(db_session),
        trend_repo=SQLAlchemyTrendDataRepository(db_session),
    )


@pytest.fixture
async def pending_reservation(reservation_service, sample_user, sample_spot):
    """A four hour booking at the $5.00 garage: 5.00 x 4 + 2.00."""
    return await reservation_service.create_reservation(
        user_id=sample_user.id,
        parking_spot_id=sample_spot.id,
        date=date(2026, 11, 2),
        start_time=time(9, 0),
        duration=4,
        vehicle_type="sedan",
        license_plate=" abc123 ",
    )
