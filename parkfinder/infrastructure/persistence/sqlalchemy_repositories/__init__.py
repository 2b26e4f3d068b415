from .sqlalchemy_repositories import (
    SQLAlchemyUserRepository,
    SQLAlchemyParkingSpotRepository,
    SQLAlchemyReservationRepository,
    SQLAlchemyFavoriteRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyCapacityDataRepository,
    SQLAlchemyUsageDataRepository,
    SQLAlchemyTrendDataRepository,
)

__all__ = [
    "SQLAlchemyUserRepository",
    "SQLAlchemyParkingSpotRepository",
    "SQLAlchemyReservationRepository",
    "SQLAlchemyFavoriteRepository",
    "SQLAlchemyPaymentRepository",
    "SQLAlchemyCapacityDataRepository",
    "SQLAlchemyUsageDataRepository",
    "SQLAlchemyTrendDataRepository",
]
