from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from parkfinder.config.settings_env import settings
from parkfinder.infrastructure.api.routers import (
    parking_spots, reservations, favorites, payments, users, visualizations
)
from parkfinder.infrastructure.persistence.database import init_db
from parkfinder.shared.utils import initialize_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_logger()
    logger.info("Starting ParkFinder API")
    init_db()
    yield
    logger.info("Shutting down ParkFinder API")


app = FastAPI(
    title="ParkFinder API",
    description="Find, reserve and pay for parking spots",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.debug(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})


app.include_router(parking_spots.router)
app.include_router(reservations.router)
app.include_router(favorites.router)
app.include_router(payments.router)
app.include_router(users.router)
app.include_router(visualizations.router)


@app.get("/api/health", tags=["health"])
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.FASTAPI_HOST, port=settings.FASTAPI_PORT)
