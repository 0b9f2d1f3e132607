"""
Parcel database model.

A parcel is a shipment booked by a customer and carried by one rider.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import (
    PaymentStatus, DeliveryStatus, CashoutStatus, ParcelType, enum_values
)


class Parcel(Base):
    """
    Parcel model for the delivery marketplace.

    Rider identity is denormalised onto the parcel at assignment time so
    rider task lists can be served from this table alone.
    """
    __tablename__ = "parcels"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tracking_id = Column(String(64), unique=True, nullable=False, index=True)

    # Booking details
    title = Column(String(255), nullable=True)
    parcel_type = Column(Enum(ParcelType, values_callable=enum_values), nullable=True)
    weight = Column(Float, nullable=True)
    cost = Column(Float, nullable=True)

    sender_name = Column(String(255), nullable=True)
    sender_contact = Column(String(64), nullable=True)
    sender_region = Column(String(128), nullable=True)
    sender_district = Column(String(128), nullable=True)
    sender_address = Column(String(500), nullable=True)
    pickup_instruction = Column(String(500), nullable=True)

    receiver_name = Column(String(255), nullable=True)
    receiver_contact = Column(String(64), nullable=True)
    receiver_region = Column(String(128), nullable=True)
    receiver_district = Column(String(128), nullable=True)
    receiver_address = Column(String(500), nullable=True)
    delivery_instruction = Column(String(500), nullable=True)

    created_by = Column(String(255), nullable=False, index=True)

    # Lifecycle
    payment_status = Column(
        Enum(PaymentStatus, values_callable=enum_values),
        default=PaymentStatus.UNPAID, nullable=False, index=True
    )
    delivery_status = Column(
        Enum(DeliveryStatus, values_callable=enum_values),
        default=DeliveryStatus.PENDING, nullable=False, index=True
    )
    cashout_status = Column(
        Enum(CashoutStatus, values_callable=enum_values),
        default=CashoutStatus.NOT_CASHED_OUT, nullable=False
    )

    # Assignment (denormalised from riders)
    assigned_rider_id = Column(Integer, nullable=True, index=True)
    assigned_rider_name = Column(String(255), nullable=True)
    assigned_rider_email = Column(String(255), nullable=True, index=True)

    # Timestamps
    creation_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    picked_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cashed_out_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking_id='{self.tracking_id}', delivery_status='{self.delivery_status.value}')>"
