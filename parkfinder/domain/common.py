from enum import Enum


class SpotSource(str, Enum):
    LOCAL = "local"
    STATIC_CATALOG = "static_catalog"
    EXTERNAL_API = "external_api"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    WALLET = "wallet"


class ChartKind(str, Enum):
    CAPACITY = "capacity"
    USAGE = "usage"
    TREND = "trend"
