"""
Parcel API Endpoints.

Booking, lookup and lifecycle transitions for parcels. Every route needs a
verified credential whose subject matches the uid query parameter; assignment
additionally needs an admin, status and cashout changes a rider.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from backend.app.core.dependencies import get_lifecycle
from backend.app.core.guards import AuthContext, Guard, require_guards
from backend.app.models.enums import DeliveryStatus, PaymentStatus
from backend.app.schemas.parcel import (
    DeleteResult,
    DeliveryStatusUpdate,
    ParcelCreate,
    ParcelResponse,
    RiderAssignment,
    StatusCount,
)
from backend.app.services.parcel_lifecycle import ParcelLifecycle

router = APIRouter(prefix="/parcels", tags=["Parcels"])

owner_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH)
admin_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH, Guard.ADMIN)
rider_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH, Guard.RIDER)


@router.get("", response_model=List[ParcelResponse])
async def list_parcels(
    email: Optional[str] = Query(None, description="Filter by creator email"),
    payment_status: Optional[PaymentStatus] = Query(None),
    delivery_status: Optional[DeliveryStatus] = Query(None),
    ctx: AuthContext = Depends(owner_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """List parcels, newest first, optionally filtered by creator and statuses."""
    return await lifecycle.list_parcels(
        created_by=email,
        payment_status=payment_status,
        delivery_status=delivery_status,
    )


@router.get("/delivery/status-count", response_model=List[StatusCount])
async def delivery_status_count(
    ctx: AuthContext = Depends(admin_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """Number of parcels in each delivery status (admin dashboard)."""
    return await lifecycle.status_histogram()


@router.get("/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    ctx: AuthContext = Depends(owner_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    return await lifecycle.get_parcel(parcel_id)


@router.post("", response_model=ParcelResponse)
async def create_parcel(
    parcel_data: ParcelCreate,
    ctx: AuthContext = Depends(owner_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """
    Book a new parcel.

    The parcel starts unpaid, pending and not cashed out. A tracking id is
    generated when the client does not send one.
    """
    return await lifecycle.create_parcel(parcel_data)


@router.patch("/{parcel_id}/assign", response_model=ParcelResponse)
async def assign_rider(
    assignment: RiderAssignment,
    parcel_id: int = Path(..., description="Parcel ID"),
    ctx: AuthContext = Depends(admin_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """
    Assign a rider to a parcel (Admin only).

    Sets delivery_status to rider_assigned, copies the rider's identity onto
    the parcel and marks the rider in_delivery.
    """
    return await lifecycle.assign_rider(parcel_id, assignment)


@router.patch("/{parcel_id}/status", response_model=ParcelResponse)
async def update_delivery_status(
    update: DeliveryStatusUpdate,
    parcel_id: int = Path(..., description="Parcel ID"),
    ctx: AuthContext = Depends(rider_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """
    Move a parcel to a new delivery status (Rider only).

    in_transit stamps picked_at; delivered stamps delivered_at and frees the
    assigned rider.
    """
    return await lifecycle.update_delivery_status(parcel_id, update.status)


@router.patch("/{parcel_id}/cashout", response_model=ParcelResponse)
async def cash_out(
    parcel_id: int = Path(..., description="Parcel ID"),
    ctx: AuthContext = Depends(rider_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """Mark a parcel's delivery earnings as cashed out (Rider only)."""
    return await lifecycle.cash_out(parcel_id)


@router.delete("/{parcel_id}", response_model=DeleteResult)
async def delete_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    ctx: AuthContext = Depends(owner_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    deleted = await lifecycle.delete_parcel(parcel_id)
    return DeleteResult(deleted_count=deleted)
