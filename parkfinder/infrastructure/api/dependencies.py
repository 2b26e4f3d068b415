from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from parkfinder.application.providers import (
    AbstractExternalParkingSource,
    AbstractParkingCatalog,
    AbstractPaymentGateway,
)
from parkfinder.application.services.favorite_service import FavoriteService
from parkfinder.application.services.parking_spot_service import ParkingSpotService
from parkfinder.application.services.payment_service import PaymentService
from parkfinder.application.services.reservation_service import ReservationService
from parkfinder.application.services.user_service import UserService
from parkfinder.application.services.visualization_service import VisualizationService
from parkfinder.config.settings_env import settings
from parkfinder.infrastructure.external.tampa_arcgis import TampaArcGISParkingSource
from parkfinder.infrastructure.external.university_catalog import UniversityParkingCatalog
from parkfinder.infrastructure.payments.stripe_gateway import StripePaymentGateway
from parkfinder.infrastructure.persistence.database import get_async_db
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


@lru_cache
def get_catalog() -> AbstractParkingCatalog:
    return UniversityParkingCatalog()


@lru_cache
def get_external_source() -> AbstractExternalParkingSource:
    return TampaArcGISParkingSource(
        url=settings.EXTERNAL_PARKING_API_URL,
        timeout=settings.EXTERNAL_PARKING_TIMEOUT,
        city=settings.EXTERNAL_PARKING_CITY,
        default_available_spots=settings.EXTERNAL_DEFAULT_AVAILABLE_SPOTS,
        default_rating=settings.EXTERNAL_DEFAULT_RATING,
    )


@lru_cache
def get_payment_gateway() -> AbstractPaymentGateway:
    return StripePaymentGateway()


def get_parking_spot_service(
    db: AsyncSession = Depends(get_async_db),
    catalog: AbstractParkingCatalog = Depends(get_catalog),
    external_source: AbstractExternalParkingSource = Depends(get_external_source),
) -> ParkingSpotService:
    return ParkingSpotService(
        parking_spot_repo=SQLAlchemyParkingSpotRepository(db),
        catalog=catalog,
        external_source=external_source,
    )


def get_reservation_service(db: AsyncSession = Depends(get_async_db)) -> ReservationService:
    return ReservationService(
        reservation_repo=SQLAlchemyReservationRepository(db),
        parking_spot_repo=SQLAlchemyParkingSpotRepository(db),
        user_repo=SQLAlchemyUserRepository(db),
    )


def get_favorite_service(db: AsyncSession = Depends(get_async_db)) -> FavoriteService:
    return FavoriteService(
        favorite_repo=SQLAlchemyFavoriteRepository(db),
        parking_spot_repo=SQLAlchemyParkingSpotRepository(db),
    )


def get_payment_service(
    db: AsyncSession = Depends(get_async_db),
    gateway: AbstractPaymentGateway = Depends(get_payment_gateway),
) -> PaymentService:
    user_repo = SQLAlchemyUserRepository(db)
    reservation_repo = SQLAlchemyReservationRepository(db)
    return PaymentService(
        payment_repo=SQLAlchemyPaymentRepository(db),
        reservation_repo=reservation_repo,
        reservation_service=ReservationService(
            reservation_repo=reservation_repo,
            parking_spot_repo=SQLAlchemyParkingSpotRepository(db),
            user_repo=user_repo,
        ),
        user_repo=user_repo,
        gateway=gateway,
    )


def get_user_service(db: AsyncSession = Depends(get_async_db)) -> UserService:
    return UserService(user_repo=SQLAlchemyUserRepository(db))


def get_visualization_service(db: AsyncSession = Depends(get_async_db)) -> VisualizationService:
    return VisualizationService(
        capacity_repo=SQLAlchemyCapacityDataRepository(db),
        usage_repo=SQLAlchemyUsageDataRepository(db),
        trend_repo=SQLAlchemyTrendDataRepository(db),
    )
