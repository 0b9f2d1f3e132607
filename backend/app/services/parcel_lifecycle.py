"""
Parcel lifecycle management.

Owns every write that moves a parcel through its delivery states and the
rider / payment side effects those moves carry:

    assign          parcel → rider_assigned, rider → in_delivery
    in_transit      stamps picked_at
    delivered       stamps delivered_at, assigned rider → available
    cash out        cashout_status → cashed_out
    record payment  parcel → paid, then one Payment row

Multi-document operations are sequences of independent writes with no
enclosing transaction. A failure part-way leaves the earlier writes in
place and surfaces as UpstreamFailure.
"""

import logging
import secrets
from typing import Any, Dict, List, Optional

from backend.app.core.exceptions import Conflict, NotFound
from backend.app.db.gateway import DocumentStore
from backend.app.db.session import utcnow
from backend.app.models.enums import (
    ACTIVE_DELIVERY_STATUSES,
    COMPLETED_DELIVERY_STATUSES,
    CashoutStatus,
    DeliveryStatus,
    PaymentStatus,
    RiderStatus,
    WorkStatus,
)
from backend.app.models.parcel import Parcel
from backend.app.models.payment import Payment
from backend.app.schemas.parcel import ParcelCreate, RiderAssignment
from backend.app.schemas.payment import PaymentCreate

logger = logging.getLogger("parcel_delivery.lifecycle")


def generate_tracking_id() -> str:
    """Tracking ids look like PCL-20260118-8F3A1C."""
    return f"PCL-{utcnow():%Y%m%d}-{secrets.token_hex(3).upper()}"


class ParcelLifecycle:
    """Parcel state transitions and their cross-collection side effects."""

    def __init__(self, store: DocumentStore):
        self.store = store

    # Booking and queries

    async def create_parcel(self, data: ParcelCreate) -> Parcel:
        document = data.model_dump(exclude_none=True)
        document.setdefault("tracking_id", generate_tracking_id())
        document.update(
            payment_status=PaymentStatus.UNPAID,
            delivery_status=DeliveryStatus.PENDING,
            cashout_status=CashoutStatus.NOT_CASHED_OUT,
        )
        parcel = await self.store.parcels.insert_one(document)
        logger.info("Parcel %s booked by %s (tracking %s)", parcel.id, parcel.created_by, parcel.tracking_id)
        return parcel

    async def list_parcels(
        self,
        created_by: Optional[str] = None,
        payment_status: Optional[PaymentStatus] = None,
        delivery_status: Optional[DeliveryStatus] = None
    ) -> List[Parcel]:
        filters: Dict[str, Any] = {}
        if created_by:
            filters["created_by"] = created_by
        if payment_status:
            filters["payment_status"] = payment_status
        if delivery_status:
            filters["delivery_status"] = delivery_status
        return await self.store.parcels.find(filters, order_by=["-creation_date", "-id"])

    async def get_parcel(self, parcel_id: int) -> Parcel:
        parcel = await self.store.parcels.find_one({"id": parcel_id})
        if not parcel:
            raise NotFound("Parcel", parcel_id)
        return parcel

    async def delete_parcel(self, parcel_id: int) -> int:
        # No delivery_status guard: an in-flight parcel can be deleted too
        deleted = await self.store.parcels.delete_one({"id": parcel_id})
        if deleted:
            logger.info("Parcel %s deleted", parcel_id)
        return deleted

    async def status_histogram(self) -> List[Dict[str, Any]]:
        buckets = await self.store.parcels.aggregate_counts("delivery_status")
        return [{"status": bucket["delivery_status"], "count": bucket["count"]} for bucket in buckets]

    async def rider_active_parcels(self, rider_email: str) -> List[Parcel]:
        return await self.store.parcels.find(
            {
                "assigned_rider_email": rider_email,
                "delivery_status__in": ACTIVE_DELIVERY_STATUSES,
            },
            order_by=["-creation_date", "-id"],
        )

    async def rider_completed_parcels(self, rider_email: str) -> List[Parcel]:
        return await self.store.parcels.find(
            {
                "assigned_rider_email": rider_email,
                "delivery_status__in": COMPLETED_DELIVERY_STATUSES,
            },
            order_by=["-delivered_at", "-id"],
        )

    # Transitions

    async def assign_rider(self, parcel_id: int, assignment: RiderAssignment) -> Parcel:
        """
        Assign a rider to a parcel.

        Writes the parcel first, then the rider. If the rider write fails
        the parcel stays assigned. Reassigning an in-flight parcel releases
        the rider it is taken from.
        """
        parcel = await self.get_parcel(parcel_id)
        rider = await self.store.riders.find_one({"id": assignment.rider_id})
        if not rider:
            raise NotFound("Rider", assignment.rider_id)
        if rider.status != RiderStatus.ACTIVE or rider.work_status != WorkStatus.AVAILABLE:
            # Not enforced; the admin picks from GET /riders/available
            logger.warning(
                "Assigning parcel %s to rider %s who is %s / %s",
                parcel_id, rider.id, rider.status.value, rider.work_status.value
            )

        previous_rider_id = parcel.assigned_rider_id
        previous_status = parcel.delivery_status

        await self.store.parcels.update_one(
            {"id": parcel_id},
            {
                "delivery_status": DeliveryStatus.RIDER_ASSIGNED,
                "assigned_rider_id": assignment.rider_id,
                "assigned_rider_name": assignment.rider_name,
                "assigned_rider_email": assignment.rider_email,
            },
        )
        await self.store.riders.update_one(
            {"id": assignment.rider_id},
            {"work_status": WorkStatus.IN_DELIVERY},
        )
        logger.info("Parcel %s assigned to rider %s", parcel_id, assignment.rider_id)

        if (
            previous_rider_id is not None
            and previous_rider_id != assignment.rider_id
            and previous_status in ACTIVE_DELIVERY_STATUSES
        ):
            await self._release_rider(previous_rider_id, parcel_id)

        return await self.get_parcel(parcel_id)

    async def update_delivery_status(self, parcel_id: int, status: DeliveryStatus) -> Parcel:
        """
        Set a parcel's delivery status.

        Any status may follow any other; only the side effects below are
        tied to the target status.
        """
        parcel = await self.get_parcel(parcel_id)

        patch: Dict[str, Any] = {"delivery_status": status}
        if status == DeliveryStatus.IN_TRANSIT:
            patch["picked_at"] = utcnow()
        elif status == DeliveryStatus.DELIVERED:
            patch["delivered_at"] = utcnow()

        await self.store.parcels.update_one({"id": parcel_id}, patch)
        logger.info("Parcel %s: %s → %s", parcel_id, parcel.delivery_status.value, status.value)

        if status == DeliveryStatus.DELIVERED:
            await self._release_rider(parcel.assigned_rider_id, parcel_id)

        return await self.get_parcel(parcel_id)

    async def _release_rider(self, rider_id: Optional[int], parcel_id: int):
        if rider_id is None:
            logger.info("Parcel %s delivered without an assigned rider", parcel_id)
            return
        await self.store.riders.update_one({"id": rider_id}, {"work_status": WorkStatus.AVAILABLE})
        logger.info("Rider %s available again after parcel %s", rider_id, parcel_id)

    async def cash_out(self, parcel_id: int) -> Parcel:
        await self.get_parcel(parcel_id)
        await self.store.parcels.update_one(
            {"id": parcel_id},
            {"cashout_status": CashoutStatus.CASHED_OUT, "cashed_out_at": utcnow()},
        )
        logger.info("Parcel %s cashed out", parcel_id)
        return await self.get_parcel(parcel_id)

    # Payments

    async def record_payment(self, data: PaymentCreate) -> Payment:
        """
        Mark the parcel paid, then insert the Payment.

        The parcel write is a check-then-set: it only counts as modified
        while payment_status is not already paid. Zero modified documents
        (parcel missing or already paid) raises Conflict before any
        payment row is written.
        """
        modified = await self.store.parcels.update_one(
            {"id": data.parcel_id},
            {"payment_status": PaymentStatus.PAID},
        )
        if not modified:
            logger.warning("Payment for parcel %s rejected: parcel missing or already paid", data.parcel_id)
            raise Conflict(
                "Parcel not found or already paid",
                details={"parcel_id": data.parcel_id}
            )

        payment = await self.store.payments.insert_one(
            {
                "parcel_id": data.parcel_id,
                "email": data.email,
                "amount": data.amount,
                "payment_method": data.payment_method,
                "transaction_id": data.transaction_id,
                "paid_at": utcnow(),
            }
        )
        logger.info("Payment %s recorded for parcel %s", payment.id, data.parcel_id)
        return payment

    async def list_payments(self, email: Optional[str] = None) -> List[Payment]:
        filters = {"email": email} if email else {}
        return await self.store.payments.find(filters, order_by=["-paid_at", "-id"])
