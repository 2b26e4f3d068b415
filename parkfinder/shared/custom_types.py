# parkfinder/shared/custom_types.py
import datetime
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import DateTime, Integer, TypeDecorator
from sqlalchemy.dialects.sqlite import DATETIME as SQLITE_DATETIME


class UTCDateTime(TypeDecorator):
    """Stores timezone-aware datetimes in UTC.

    SQLite has no timezone support, so values are written there as naive UTC
    and re-tagged with ``timezone.utc`` on the way out.
    """
    impl = DateTime
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'sqlite':
            return dialect.type_descriptor(SQLITE_DATETIME())
        return dialect.type_descriptor(DateTime(timezone=True))

    def process_bind_param(self, value: datetime.datetime | None, dialect) -> datetime.datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            # Naive values are treated as UTC already
            value = value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: datetime.datetime | None, dialect) -> datetime.datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)


class Money(TypeDecorator):
    """A dollar amount persisted as integer cents.

    Accepts Decimal, int, float or numeric strings and always returns a
    two-place Decimal, so prices never pick up float rounding noise.
    """
    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect) -> int | None:
        if value is None:
            return None
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        return int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))

    def process_result_value(self, value, dialect) -> Decimal | None:
        if value is None:
            return None
        return (Decimal(value) / 100).quantize(Decimal("0.01"))
