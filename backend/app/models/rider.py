"""
Rider database model.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import RiderStatus, WorkStatus, enum_values


class Rider(Base):
    """
    Courier application and availability.

    status tracks the application (pending → active / deactivated);
    work_status tracks whether the rider can take a new parcel.
    """
    __tablename__ = "riders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    age = Column(Integer, nullable=True)
    phone = Column(String(64), nullable=True)
    nid = Column(String(64), nullable=True)
    region = Column(String(128), nullable=True)
    district = Column(String(128), nullable=False, index=True)
    bike_brand = Column(String(128), nullable=True)
    bike_registration = Column(String(64), nullable=True)

    status = Column(
        Enum(RiderStatus, values_callable=enum_values),
        default=RiderStatus.PENDING, nullable=False, index=True
    )
    work_status = Column(
        Enum(WorkStatus, values_callable=enum_values),
        default=WorkStatus.NOT_AVAILABLE, nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.status.value}', work_status='{self.work_status.value}')>"
