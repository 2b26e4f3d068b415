from abc import ABC, abstractmethod
from typing import List, Optional

from parkfinder.domain.entities import ParkingSpot


class ProviderIntent:
    """What the payment provider tells us about one payment intent."""

    def __init__(
        self,
        id: str,
        status: str,
        amount_cents: int,
        client_secret: Optional[str] = None,
        card_brand: Optional[str] = None,
        last_four: Optional[str] = None,
        last_payment_error: Optional[str] = None,
    ):
        self.id = id
        self.status = status
        self.amount_cents = amount_cents
        self.client_secret = client_secret
        self.card_brand = card_brand
        self.last_four = last_four
        self.last_payment_error = last_payment_error


class ProviderEvent:
    def __init__(self, type: str, intent: Optional[ProviderIntent] = None):
        self.type = type
        self.intent = intent


class AbstractExternalParkingSource(ABC):
    @abstractmethod
    async def fetch(self) -> List[ParkingSpot]:
        """Return the provider's locations; an empty list when it is unavailable."""
        pass


class AbstractParkingCatalog(ABC):
    @abstractmethod
    def list(self) -> List[ParkingSpot]:
        pass

    @abstractmethod
    def find_by_external_id(self, external_id: str) -> Optional[ParkingSpot]:
        pass


class AbstractPaymentGateway(ABC):
    @abstractmethod
    async def create_intent(self, amount_cents: int, currency: str, metadata: dict) -> ProviderIntent:
        pass

    @abstractmethod
    async def retrieve_intent(self, intent_id: str) -> ProviderIntent:
        pass

    @abstractmethod
    def parse_event(self, payload: bytes, signature: Optional[str]) -> ProviderEvent:
        """Verify and decode a webhook delivery; raises ValueError when it is not acceptable."""
        pass
