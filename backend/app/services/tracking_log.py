"""
Tracking log.

Append-only shipment history. Events are never updated or deleted; reading
a tracking id returns its full chronology, oldest first.
"""

import logging
from typing import List

from backend.app.core.exceptions import InvalidArgument
from backend.app.db.gateway import DocumentStore
from backend.app.db.session import utcnow
from backend.app.models.tracking_event import TrackingEvent
from backend.app.schemas.tracking import TrackingCreate

logger = logging.getLogger("parcel_delivery.tracking")


class TrackingLog:

    def __init__(self, store: DocumentStore):
        self.store = store

    async def append(self, data: TrackingCreate) -> TrackingEvent:
        """
        Append one event stamped with the server's current time.

        Raises:
            InvalidArgument: if tracking_id or status is missing or blank
        """
        tracking_id = (data.tracking_id or "").strip()
        status = (data.status or "").strip()
        if not tracking_id or not status:
            raise InvalidArgument(
                "tracking_id and status are required",
                details={"missing": [name for name, value in (("tracking_id", tracking_id), ("status", status)) if not value]}
            )

        event = await self.store.trackings.insert_one(
            {
                "tracking_id": tracking_id,
                "parcel_id": data.parcel_id,
                "status": status,
                "message": data.message,
                "updated_by": data.updated_by,
                "timestamp": utcnow(),
            }
        )
        logger.info("Tracking %s: %s", tracking_id, status)
        return event

    async def history(self, tracking_id: str) -> List[TrackingEvent]:
        return await self.store.trackings.find(
            {"tracking_id": tracking_id},
            order_by=["timestamp", "id"],
        )
