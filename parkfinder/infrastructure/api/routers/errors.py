from fastapi import HTTPException
from loguru import logger

from parkfinder.domain.exceptions import (
    NotFoundError,
    OwnershipError,
    InvalidStateError,
    DuplicateFavoriteError,
    PaymentProviderError,
)


def http_error(e: Exception, action: str) -> HTTPException:
    """Translate a service exception into the response the API promises."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, OwnershipError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, DuplicateFavoriteError):
        return HTTPException(status_code=400, detail={"message": str(e), "favorite_id": e.favorite_id})
    if isinstance(e, PaymentProviderError):
        logger.error(f"Payment provider error while trying to {action}: {e}")
        return HTTPException(status_code=502, detail=f"Payment failed: {e}")
    if isinstance(e, (InvalidStateError, ValueError)):
        return HTTPException(status_code=400, detail=str(e))

    logger.exception(f"Unexpected error while trying to {action}")
    return HTTPException(status_code=500, detail=f"Failed to {action}")
