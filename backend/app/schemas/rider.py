"""
Rider Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from backend.app.models.enums import RiderStatus, WorkStatus


class RiderApplication(BaseModel):
    """Schema for POST /riders."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    age: Optional[int] = Field(None, ge=18, le=100)
    phone: Optional[str] = Field(None, max_length=64)
    nid: Optional[str] = Field(None, max_length=64)
    region: Optional[str] = Field(None, max_length=128)
    district: str = Field(..., min_length=1, max_length=128)
    bike_brand: Optional[str] = Field(None, max_length=128)
    bike_registration: Optional[str] = Field(None, max_length=64)


class RiderStatusUpdate(BaseModel):
    """
    Schema for PATCH /riders/{id}/status.

    email names the user account that is promoted when the rider becomes active.
    """
    status: RiderStatus
    email: Optional[EmailStr] = None


class RiderResponse(BaseModel):
    id: int
    name: str
    email: str
    age: Optional[int]
    phone: Optional[str]
    nid: Optional[str]
    region: Optional[str]
    district: str
    bike_brand: Optional[str]
    bike_registration: Optional[str]
    status: RiderStatus
    work_status: WorkStatus
    created_at: datetime

    class Config:
        from_attributes = True
