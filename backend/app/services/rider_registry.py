"""
Rider registry: applications, approval and availability lookups.
"""

import logging
from typing import List, Optional

from backend.app.core.exceptions import NotFound
from backend.app.db.gateway import DocumentStore
from backend.app.models.enums import RiderStatus, UserRole, WorkStatus
from backend.app.models.rider import Rider
from backend.app.schemas.rider import RiderApplication

logger = logging.getLogger("parcel_delivery.riders")


class RiderRegistry:

    def __init__(self, store: DocumentStore):
        self.store = store

    async def apply(self, application: RiderApplication) -> Rider:
        rider = await self.store.riders.insert_one(
            {
                **application.model_dump(),
                "status": RiderStatus.PENDING,
                "work_status": WorkStatus.NOT_AVAILABLE,
            }
        )
        logger.info("Rider application %s from %s", rider.id, rider.email)
        return rider

    async def list_by_status(self, status: RiderStatus) -> List[Rider]:
        return await self.store.riders.find({"status": status}, order_by=["-created_at", "-id"])

    async def available_in_district(self, district: str) -> List[Rider]:
        return await self.store.riders.find(
            {
                "district": district,
                "status": RiderStatus.ACTIVE,
                "work_status": WorkStatus.AVAILABLE,
            },
            order_by=["name"],
        )

    async def set_status(self, rider_id: int, status: RiderStatus, email: Optional[str] = None) -> Rider:
        """
        Change a rider's application status.

        Activation makes the rider available and promotes the matching user
        account to role RIDER; this is the only path to that role.
        Deactivation takes the rider off the available pool.
        """
        rider = await self.store.riders.find_one({"id": rider_id})
        if not rider:
            raise NotFound("Rider", rider_id)

        patch = {"status": status}
        if status == RiderStatus.ACTIVE and rider.status != RiderStatus.ACTIVE:
            patch["work_status"] = WorkStatus.AVAILABLE
        elif status == RiderStatus.DEACTIVATED:
            patch["work_status"] = WorkStatus.NOT_AVAILABLE

        await self.store.riders.update_one({"id": rider_id}, patch)
        logger.info("Rider %s status %s → %s", rider_id, rider.status.value, status.value)

        if status == RiderStatus.ACTIVE and rider.status != RiderStatus.ACTIVE:
            await self._promote_user(email or rider.email)

        return await self.store.riders.find_one({"id": rider_id})

    async def _promote_user(self, email: str):
        modified = await self.store.users.update_one({"email": email}, {"role": UserRole.RIDER})
        if modified:
            logger.info("User %s promoted to rider", email)
        else:
            logger.warning("No user account %s to promote to rider", email)
