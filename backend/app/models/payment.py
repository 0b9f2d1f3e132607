"""
Payment database model.

Rows are written once, after the parcel has been flagged as paid, and never
updated.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from backend.app.db.session import Base, utcnow


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    parcel_id = Column(Integer, nullable=False, index=True)
    email = Column(String(255), nullable=True, index=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(64), nullable=False)
    transaction_id = Column(String(255), nullable=False)
    paid_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Payment(id={self.id}, parcel_id={self.parcel_id}, amount={self.amount})>"
