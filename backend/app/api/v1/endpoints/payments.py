"""
Payment API Endpoints.

The browser first asks for a payment intent, confirms the card with the
gateway, then reports the captured transaction through POST /payments.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from backend.app.core.config import settings
from backend.app.core.dependencies import get_lifecycle, get_payment_processor
from backend.app.core.guards import AuthContext, Guard, require_guards
from backend.app.schemas.payment import (
    PaymentCreate,
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentResponse,
)
from backend.app.services.parcel_lifecycle import ParcelLifecycle
from backend.app.services.payment_processor import PaymentProcessor

router = APIRouter(tags=["Payments"])

owner_guards = require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH)


@router.get("/payments", response_model=List[PaymentResponse])
async def list_payments(
    email: Optional[str] = Query(None, description="Filter by payer email"),
    ctx: AuthContext = Depends(owner_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """Payment history, most recent first."""
    return await lifecycle.list_payments(email)


@router.post("/payments", response_model=PaymentResponse)
async def record_payment(
    payment: PaymentCreate,
    ctx: AuthContext = Depends(owner_guards),
    lifecycle: ParcelLifecycle = Depends(get_lifecycle)
):
    """
    Record a captured payment against a parcel.

    Flags the parcel paid and stores the payment. A parcel that is missing
    or already paid is rejected with 404 and nothing is stored.
    """
    if payment.email is None and ctx.email:
        payment = payment.model_copy(update={"email": ctx.email})
    return await lifecycle.record_payment(payment)


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    intent: PaymentIntentRequest,
    ctx: AuthContext = Depends(owner_guards),
    processor: PaymentProcessor = Depends(get_payment_processor)
):
    """Create a card payment intent and return its client secret."""
    client_secret = await processor.create_intent(intent.amount_in_cents, settings.payment_currency)
    return PaymentIntentResponse(client_secret=client_secret)
