"""
Tracking event database model.

Append-only history of a shipment, keyed by tracking id.
"""

from sqlalchemy import Column, Integer, String, DateTime
from backend.app.db.session import Base, utcnow


class TrackingEvent(Base):
    __tablename__ = "trackings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tracking_id = Column(String(64), nullable=False, index=True)
    parcel_id = Column(Integer, nullable=True, index=True)
    status = Column(String(64), nullable=False)
    message = Column(String(1000), nullable=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_by = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<TrackingEvent(id={self.id}, tracking_id='{self.tracking_id}', status='{self.status}')>"
