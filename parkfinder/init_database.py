"""Initialize the ParkFinder database."""
from loguru import logger

from parkfinder.infrastructure.persistence.database import init_db, DATABASE_URL
from parkfinder.shared.utils import initialize_logger

if __name__ == "__main__":
    initialize_logger()
    logger.info(f"Initializing ParkFinder database at {DATABASE_URL}...")
    init_db()
    logger.info("Database initialization complete!")
