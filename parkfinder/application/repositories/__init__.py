from .abstract_repositories import (
    AbstractUserRepository,
    AbstractParkingSpotRepository,
    AbstractReservationRepository,
    AbstractFavoriteRepository,
    AbstractPaymentRepository,
    AbstractChartDataRepository,
)

__all__ = [
    "AbstractUserRepository",
    "AbstractParkingSpotRepository",
    "AbstractReservationRepository",
    "AbstractFavoriteRepository",
    "AbstractPaymentRepository",
    "AbstractChartDataRepository",
]
