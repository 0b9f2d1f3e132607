"""
FastAPI Application Entry Point.

REST backend for the parcel delivery marketplace: customers book and pay
for parcels, admins assign riders, riders move parcels to delivery.
"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from backend.app.core.config import settings
from backend.app.api.v1.router import router as api_v1_router
from backend.app.db.session import get_db, init_models
from backend.app.core.observability import ObservabilityMiddleware, configure_logging, logger
from backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from backend.app.models.user import User
from backend.app.models.parcel import Parcel
from backend.app.models.rider import Rider
from backend.app.models.payment import Payment
from backend.app.models.tracking_event import TrackingEvent

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create collections on startup."""
    await init_models()
    logger.info("%s running", settings.app_name)
    yield


app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="REST backend for a parcel delivery marketplace",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Parcel delivery server is running", "docs": "/docs", "health": "/health"}


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """Liveness plus a round trip to the document store."""
    try:
        await db.execute(text("SELECT 1"))
        store_status = "up"
    except SQLAlchemyError:
        logger.exception("Health check could not reach the document store")
        store_status = "down"

    return JSONResponse(
        status_code=200 if store_status == "up" else 503,
        content={
            "status": "healthy" if store_status == "up" else "degraded",
            "store": store_status,
            "version": settings.api_version,
        },
    )


app.include_router(api_v1_router, prefix=settings.api_prefix)
