"""Business errors raised by the application services.

They subclass ``ValueError`` so callers that only care about "the request
was rejected" can keep catching that; routers map each subclass to its
HTTP status.
"""


class DomainError(ValueError):
    pass


class NotFoundError(DomainError):
    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")


class OwnershipError(DomainError):
    """Raised when a user acts on a record that belongs to someone else."""


class InvalidStateError(DomainError):
    """Raised for a status transition the lifecycle does not allow."""


class DuplicateFavoriteError(DomainError):
    def __init__(self, favorite_id: int):
        self.favorite_id = favorite_id
        super().__init__("Parking spot already exists in favorites")


class PaymentProviderError(DomainError):
    """The payment provider rejected the call or could not be reached."""


class DuplicateUsernameError(DomainError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username '{username}' is already taken")
