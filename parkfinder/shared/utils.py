import sys
from decimal import Decimal, ROUND_HALF_UP
from loguru import logger as loguru_logger

from parkfinder.config.settings_env import settings

CENT = Decimal("0.01")


def initialize_logger():
    """Initialize the logger based on DEV_MODE setting."""
    loguru_logger.remove()

    if settings.DEV_MODE:
        loguru_logger.add(sys.stderr, level="TRACE")
    else:
        loguru_logger.add(sys.stderr, level="INFO")

    return loguru_logger


def to_decimal(value) -> Decimal:
    """Coerce floats, ints and strings to a two-place Decimal."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount) -> int:
    """Dollars to integer cents."""
    return int((to_decimal(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


# Initialize logger
logger = initialize_logger()
