"""
Tracking event Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class TrackingCreate(BaseModel):
    """
    Schema for appending a tracking event.

    tracking_id and status are checked by the tracking log itself so that
    an empty value is reported as InvalidArgument rather than a 422.
    """
    tracking_id: Optional[str] = None
    parcel_id: Optional[int] = None
    status: Optional[str] = None
    message: Optional[str] = None
    updated_by: Optional[str] = None


class TrackingEventResponse(BaseModel):
    id: int
    tracking_id: str
    parcel_id: Optional[int]
    status: str
    message: Optional[str]
    timestamp: datetime
    updated_by: Optional[str]

    class Config:
        from_attributes = True
