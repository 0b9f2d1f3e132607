"""
Parcel Pydantic schemas.

Defines request and response models for parcel booking and lifecycle routes.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from backend.app.models.enums import (
    PaymentStatus, DeliveryStatus, CashoutStatus, ParcelType
)


class ParcelCreate(BaseModel):
    """Schema for booking a new parcel."""
    created_by: EmailStr = Field(..., description="Email of the customer booking the parcel")
    tracking_id: Optional[str] = Field(None, min_length=1, max_length=64, description="Generated when omitted")
    title: Optional[str] = Field(None, max_length=255)
    parcel_type: Optional[ParcelType] = Field(None, alias="type")
    weight: Optional[float] = Field(None, gt=0, description="Weight in kilograms")
    cost: Optional[float] = Field(None, ge=0)

    sender_name: Optional[str] = Field(None, max_length=255)
    sender_contact: Optional[str] = Field(None, max_length=64)
    sender_region: Optional[str] = Field(None, max_length=128)
    sender_district: Optional[str] = Field(None, max_length=128)
    sender_address: Optional[str] = Field(None, max_length=500)
    pickup_instruction: Optional[str] = Field(None, max_length=500)

    receiver_name: Optional[str] = Field(None, max_length=255)
    receiver_contact: Optional[str] = Field(None, max_length=64)
    receiver_region: Optional[str] = Field(None, max_length=128)
    receiver_district: Optional[str] = Field(None, max_length=128)
    receiver_address: Optional[str] = Field(None, max_length=500)
    delivery_instruction: Optional[str] = Field(None, max_length=500)

    class Config:
        populate_by_name = True


class RiderAssignment(BaseModel):
    """Schema for PATCH /parcels/{id}/assign."""
    rider_id: int = Field(..., alias="riderId")
    rider_name: str = Field(..., min_length=1, alias="riderName")
    rider_email: EmailStr = Field(..., alias="riderEmail")

    class Config:
        populate_by_name = True


class DeliveryStatusUpdate(BaseModel):
    """Schema for PATCH /parcels/{id}/status."""
    status: DeliveryStatus


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: int
    tracking_id: str
    title: Optional[str]
    parcel_type: Optional[ParcelType]
    weight: Optional[float]
    cost: Optional[float]
    sender_name: Optional[str]
    sender_contact: Optional[str]
    sender_region: Optional[str]
    sender_district: Optional[str]
    sender_address: Optional[str]
    pickup_instruction: Optional[str]
    receiver_name: Optional[str]
    receiver_contact: Optional[str]
    receiver_region: Optional[str]
    receiver_district: Optional[str]
    receiver_address: Optional[str]
    delivery_instruction: Optional[str]
    created_by: str
    payment_status: PaymentStatus
    delivery_status: DeliveryStatus
    cashout_status: CashoutStatus
    assigned_rider_id: Optional[int]
    assigned_rider_name: Optional[str]
    assigned_rider_email: Optional[str]
    creation_date: datetime
    picked_at: Optional[datetime]
    delivered_at: Optional[datetime]
    cashed_out_at: Optional[datetime]

    class Config:
        from_attributes = True


class StatusCount(BaseModel):
    """One bucket of the delivery-status histogram."""
    status: DeliveryStatus
    count: int


class DeleteResult(BaseModel):
    deleted_count: int
