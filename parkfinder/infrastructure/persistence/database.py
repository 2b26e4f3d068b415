import os
from decimal import Decimal

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session

from parkfinder.config.settings_env import settings
from parkfinder.infrastructure.persistence.models.models import (
    Base, User, ParkingSpot, CapacityData, UsageData, TrendData
)

DATABASE_URL = settings.DATABASE_URL
ASYNC_DATABASE_URL = settings.ASYNC_DATABASE_URL

# Ensure we're using absolute paths for file-backed SQLite
if DATABASE_URL.startswith("sqlite:///") and ":memory:" not in DATABASE_URL:
    db_path = os.path.abspath(DATABASE_URL[len("sqlite:///"):])
    DATABASE_URL = f"sqlite:///{db_path}"
    ASYNC_DATABASE_URL = f"sqlite+aiosqlite:///{db_path}"


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Make SQLite enforce the ON DELETE rules declared on the models."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Sync engine for initialization
engine = create_engine(DATABASE_URL, connect_args={
                       "check_same_thread": False} if "sqlite" in DATABASE_URL else {})
enable_sqlite_foreign_keys(engine)

# Async engine for application
async_engine = create_async_engine(ASYNC_DATABASE_URL, echo=False)
enable_sqlite_foreign_keys(async_engine.sync_engine)
AsyncSessionLocal = async_sessionmaker(
    async_engine, class_=AsyncSession, expire_on_commit=False)


async def get_async_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


SEED_SPOTS = [
    ("Downtown Garage", "123 Main St", "Tampa", "5.00", 42, 27.9506, -82.4572, 4.3),
    ("Channelside Lot", "615 Channelside Dr", "Tampa", "3.50", 25, 27.9432, -82.4487, 3.9),
    ("Ybor City Deck", "1600 E 8th Ave", "Tampa", "4.00", 60, 27.9608, -82.4404, 4.1),
    ("Harbour Island Surface Lot", "777 S Harbour Island Blvd", "Tampa", "6.00", 18, 27.9389, -82.4561, 4.0),
]

# Starting rows for the dashboard charts
SEED_CAPACITY = [
    ("Collins Garage", 200, 75),
    ("Laurel Drive", 150, 32),
    ("Crescent Hill", 180, 120),
    ("Leroy Collins", 250, 90),
    ("Sun Dome", 300, 210),
]
SEED_USAGE = [("Students", 65), ("Faculty", 25), ("Visitors", 10)]
SEED_TRENDS = [("8am", 180), ("10am", 120), ("12pm", 60), ("2pm", 80), ("4pm", 100), ("6pm", 150)]


def init_db():
    logger.info(f"Initializing database at: {DATABASE_URL}")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Tables created")

    with Session(engine) as session:
        if session.query(User).count() == 0:
            session.add(User(username="demo", name="Demo User", email="demo@example.com"))
            logger.info("Created demo user")

        if session.query(ParkingSpot).count() == 0:
            for name, address, city, price, available, lat, lon, rating in SEED_SPOTS:
                session.add(ParkingSpot(
                    name=name,
                    address=address,
                    city=city,
                    price=Decimal(price),
                    available_spots=available,
                    latitude=lat,
                    longitude=lon,
                    rating=rating,
                    source="local",
                ))
            logger.info(f"Created {len(SEED_SPOTS)} parking spots")

        if session.query(CapacityData).count() == 0:
            session.add_all(CapacityData(name=n, capacity=c, available=a) for n, c, a in SEED_CAPACITY)
            session.add_all(UsageData(name=n, value=v) for n, v in SEED_USAGE)
            session.add_all(TrendData(time=t, available=a) for t, a in SEED_TRENDS)
            logger.info("Created dashboard chart data")
        session.commit()
