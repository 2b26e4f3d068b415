from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from parkfinder.domain.common import SpotSource, PaymentStatus
from parkfinder.domain.entities import User, ParkingSpot, Reservation, Payment, Favorite


class AbstractUserRepository(ABC):
    @abstractmethod
    async def get_all(self) -> List[User]:
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def delete(self, user_id: int) -> bool:
        pass


class AbstractParkingSpotRepository(ABC):
    @abstractmethod
    async def get_all(self) -> List[ParkingSpot]:
        pass

    @abstractmethod
    async def get_by_id(self, spot_id: int) -> Optional[ParkingSpot]:
        pass

    @abstractmethod
    async def get_by_external_id(self, source: SpotSource, external_id: str) -> Optional[ParkingSpot]:
        pass

    @abstractmethod
    async def add(self, spot: ParkingSpot) -> ParkingSpot:
        pass

    @abstractmethod
    async def update(self, spot: ParkingSpot) -> ParkingSpot:
        pass

    @abstractmethod
    async def delete(self, spot_id: int) -> bool:
        pass


class AbstractReservationRepository(ABC):
    @abstractmethod
    async def get_by_id(self, reservation_id: int) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def get_by_user(self, user_id: int) -> List[Reservation]:
        pass

    @abstractmethod
    async def get_by_payment_id(self, payment_id: int) -> List[Reservation]:
        pass

    @abstractmethod
    async def add(self, reservation: Reservation) -> Reservation:
        pass

    @abstractmethod
    async def update(self, reservation: Reservation) -> Reservation:
        pass

    @abstractmethod
    async def delete(self, reservation_id: int) -> bool:
        pass


class AbstractFavoriteRepository(ABC):
    @abstractmethod
    async def get_by_id(self, favorite_id: int) -> Optional[Favorite]:
        pass

    @abstractmethod
    async def get_by_user(self, user_id: int) -> List[Favorite]:
        pass

    @abstractmethod
    async def get_by_user_and_spot(self, user_id: int, parking_spot_id: int) -> Optional[Favorite]:
        pass

    @abstractmethod
    async def get_or_create(self, favorite: Favorite) -> Tuple[Favorite, bool]:
        """Insert unless the (user, spot) pair exists; returns (row, created)."""
        pass

    @abstractmethod
    async def delete(self, favorite_id: int) -> bool:
        pass


class AbstractPaymentRepository(ABC):
    @abstractmethod
    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        pass

    @abstractmethod
    async def get_by_user(self, user_id: int) -> List[Payment]:
        pass

    @abstractmethod
    async def get_by_intent_id(self, intent_id: str) -> Optional[Payment]:
        pass

    @abstractmethod
    async def add(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def update_status(
        self,
        payment_id: int,
        status: PaymentStatus,
        card_brand: Optional[str] = None,
        last_four: Optional[str] = None,
    ) -> Payment:
        pass


class AbstractChartDataRepository(ABC):
    """Rows behind one dashboard chart: capacity per lot, usage by type or availability over the day."""

    @abstractmethod
    async def get_all(self) -> list:
        pass

    @abstractmethod
    async def get_by_id(self, item_id: int):
        pass

    @abstractmethod
    async def add(self, item):
        pass

    @abstractmethod
    async def update(self, item):
        pass

    @abstractmethod
    async def delete(self, item_id: int) -> bool:
        pass
