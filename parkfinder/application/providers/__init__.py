from .abstract_providers import (
    ProviderIntent,
    ProviderEvent,
    AbstractExternalParkingSource,
    AbstractParkingCatalog,
    AbstractPaymentGateway,
)

__all__ = [
    "ProviderIntent",
    "ProviderEvent",
    "AbstractExternalParkingSource",
    "AbstractParkingCatalog",
    "AbstractPaymentGateway",
]
