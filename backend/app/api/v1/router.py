"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import (
    parcels, rider_tasks, trackings, payments, users, riders
)

router = APIRouter()

# Parcel booking and lifecycle
router.include_router(parcels.router)
router.include_router(rider_tasks.router)

# Shipment history
router.include_router(trackings.router)

# Payment intents and captured payments
router.include_router(payments.router)

# Identity and rider onboarding
router.include_router(users.router)
router.include_router(riders.router)
