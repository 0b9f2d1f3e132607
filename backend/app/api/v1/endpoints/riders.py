"""
Rider API Endpoints.

Applications are open to any signed-in user; reviewing them and looking up
available riders is for admins.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query
from backend.app.core.dependencies import get_rider_registry
from backend.app.core.guards import AuthContext, Guard, require_guards
from backend.app.models.enums import RiderStatus
from backend.app.schemas.rider import RiderApplication, RiderResponse, RiderStatusUpdate
from backend.app.services.rider_registry import RiderRegistry

router = APIRouter(prefix="/riders", tags=["Riders"])

owner_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH)
admin_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH, Guard.ADMIN)


@router.post("", response_model=RiderResponse)
async def apply_as_rider(
    application: RiderApplication,
    ctx: AuthContext = Depends(owner_guards),
    registry: RiderRegistry = Depends(get_rider_registry)
):
    """Submit a rider application. It stays pending until an admin reviews it."""
    return await registry.apply(application)


@router.get("/pending", response_model=List[RiderResponse])
async def pending_riders(
    ctx: AuthContext = Depends(admin_guards),
    registry: RiderRegistry = Depends(get_rider_registry)
):
    return await registry.list_by_status(RiderStatus.PENDING)


@router.get("/active", response_model=List[RiderResponse])
async def active_riders(
    ctx: AuthContext = Depends(admin_guards),
    registry: RiderRegistry = Depends(get_rider_registry)
):
    return await registry.list_by_status(RiderStatus.ACTIVE)


@router.get("/available", response_model=List[RiderResponse])
async def available_riders(
    district: str = Query(..., min_length=1, description="Pickup district"),
    ctx: AuthContext = Depends(admin_guards),
    registry: RiderRegistry = Depends(get_rider_registry)
):
    """Active riders in a district who are free to take a parcel."""
    return await registry.available_in_district(district)


@router.patch("/{rider_id}/status", response_model=RiderResponse)
async def update_rider_status(
    update: RiderStatusUpdate,
    rider_id: int = Path(..., description="Rider ID"),
    ctx: AuthContext = Depends(admin_guards),
    registry: RiderRegistry = Depends(get_rider_registry)
):
    """
    Approve or deactivate a rider (Admin only).

    Approving (status=active) also promotes the rider's user account to
    role "rider".
    """
    return await registry.set_status(rider_id, update.status, update.email)
