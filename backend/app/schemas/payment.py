"""
Payment Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional


class PaymentCreate(BaseModel):
    """
    Schema for recording a captured payment.

    Field aliases match the checkout client's camelCase payload.
    """
    parcel_id: int = Field(..., alias="parcelId")
    email: Optional[EmailStr] = Field(None, description="Payer email")
    amount: float = Field(..., gt=0)
    payment_method: str = Field(..., min_length=1, alias="paymentMethod")
    transaction_id: str = Field(..., min_length=1, alias="transactionId")

    class Config:
        populate_by_name = True


class PaymentResponse(BaseModel):
    id: int
    parcel_id: int
    email: Optional[str]
    amount: float
    payment_method: str
    transaction_id: str
    paid_at: datetime

    class Config:
        from_attributes = True


class PaymentIntentRequest(BaseModel):
    amount_in_cents: int = Field(..., gt=0, alias="amountInCents")

    class Config:
        populate_by_name = True


class PaymentIntentResponse(BaseModel):
    client_secret: str = Field(..., serialization_alias="clientSecret")
