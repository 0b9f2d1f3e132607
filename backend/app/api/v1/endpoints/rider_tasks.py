"""
Rider task lists.

Parcels assigned to the calling rider. The rider is the one resolved by
the role guard, so a rider can only ever see their own parcels.
"""

from typing import List
from fastapi import APIRouter, Depends
from backend.app.core.dependencies import get_lifecycle
from backend.app.core.guards import AuthContext, Guard, require_guards
from backend.app.schemas.parcel import ParcelResponse
from backend.app.services.parcel_lifecycle import ParcelLifecycle

router = APIRouter(prefix="/rider", tags=["Rider - Parcels"])

rider_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH, Guard.RIDER)


@router.get("/parcels", response_model=List[ParcelResponse])
async def active_parcels(
    ctx: AuthContext = Depends(rider_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """Parcels waiting for pickup or in transit with the calling rider."""
    return await lifecycle.rider_active_parcels(ctx.user.email)


@router.get("/completed-parcels", response_model=List[ParcelResponse])
async def completed_parcels(
    ctx: AuthContext = Depends(rider_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """Parcels the calling rider has delivered, most recent first."""
    return await lifecycle.rider_completed_parcels(ctx.user.email)
