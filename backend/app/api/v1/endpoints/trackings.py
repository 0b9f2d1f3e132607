"""
Tracking API Endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, Path
from backend.app.core.dependencies import get_tracking_log
from backend.app.core.guards import AuthContext, Guard, require_guards
from backend.app.schemas.tracking import TrackingCreate, TrackingEventResponse
from backend.app.services.tracking_log import TrackingLog

router = APIRouter(prefix="/trackings", tags=["Tracking"])

owner_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH)


@router.post("", response_model=TrackingEventResponse)
async def append_tracking_event(
    event: TrackingCreate,
    ctx: AuthContext = Depends(owner_guards),
    tracking_log: TrackingLog = Depends(get_tracking_log)
):
    """
    Append an event to a shipment's history.

    Returns 400 when tracking_id or status is missing.
    """
    if event.updated_by is None:
        event = event.model_copy(update={"updated_by": ctx.email or ctx.subject_id})
    return await tracking_log.append(event)


@router.get("/{tracking_id}", response_model=List[TrackingEventResponse])
async def tracking_history(
    tracking_id: str = Path(..., description="Shipment tracking id"),
    ctx: AuthContext = Depends(owner_guards),
    tracking_log: TrackingLog = Depends(get_tracking_log)
):
    """Full history for a tracking id, oldest event first."""
    return await tracking_log.history(tracking_id)
