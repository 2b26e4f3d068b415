from decimal import Decimal
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Development
    DEV_MODE: bool = Field(default=True, description="Enable debug mode")

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./parkfinder.db", description="Database connection URL")
    ASYNC_DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./parkfinder.db", description="Async database URL")

    # FastAPI
    FASTAPI_HOST: str = Field(default="localhost", description="FastAPI host")
    FASTAPI_PORT: int = Field(default=8080, description="FastAPI port")
    CORS_ORIGINS: List[str] = Field(default=["*"], description="Allowed CORS origins")

    # Reservation pricing
    SERVICE_FEE: Decimal = Field(default=Decimal("2.00"), ge=0, description="Flat fee added to every reservation")

    # External parking feed (Tampa ArcGIS)
    EXTERNAL_PARKING_API_URL: str = Field(
        default="https://services.arcgis.com/Qmpo5vdPrOQHt7MX/arcgis/rest/services/ParkingGaragesandLots_0/FeatureServer/0/query",
        description="ArcGIS feature service query endpoint",
    )
    EXTERNAL_PARKING_TIMEOUT: float = Field(default=30.0, gt=0, description="Timeout in seconds for the feed request")
    EXTERNAL_PARKING_CITY: str = Field(default="Tampa", description="City assigned to every feed location")
    EXTERNAL_DEFAULT_AVAILABLE_SPOTS: int = Field(default=50, ge=0, description="Capacity used when the feed omits SPACES")
    EXTERNAL_DEFAULT_RATING: float = Field(default=4.0, ge=0, le=5, description="Rating shown for feed locations")

    # Payments (Stripe)
    STRIPE_SECRET_KEY: Optional[str] = Field(default=None, description="Stripe secret API key")
    STRIPE_WEBHOOK_SECRET: Optional[str] = Field(default=None, description="Stripe webhook signing secret")
    PAYMENT_CURRENCY: str = Field(default="usd", description="Currency for payment intents")


# Create settings instance
settings = Settings()
