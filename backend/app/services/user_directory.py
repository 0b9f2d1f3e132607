"""
User directory: login upserts, role lookups and admin role changes.
"""

import logging
from typing import List, Optional, Tuple

from backend.app.core.exceptions import DuplicateKey, NotFound
from backend.app.db.gateway import DocumentStore
from backend.app.db.session import utcnow
from backend.app.models.enums import UserRole
from backend.app.models.user import User

logger = logging.getLogger("parcel_delivery.users")

SEARCH_LIMIT = 10

# Riders are left out of the admin user search
SEARCHABLE_ROLES = (UserRole.ADMIN, UserRole.USER)


class UserDirectory:

    def __init__(self, store: DocumentStore):
        self.store = store

    async def record_login(self, email: str, name: Optional[str] = None, photo_url: Optional[str] = None) -> Tuple[User, bool]:
        """
        Upsert a user on sign-in.

        Unknown emails are inserted with role USER. Known users only get
        last_log_in refreshed; their role is left alone.

        Returns:
            (user, created)
        """
        now = utcnow()
        existing = await self.store.users.find_one({"email": email})
        if existing:
            return await self._refresh_login(existing, now), False

        try:
            user = await self.store.users.insert_one(
                {
                    "email": email,
                    "name": name,
                    "photo_url": photo_url,
                    "role": UserRole.USER,
                    "last_log_in": now,
                }
            )
        except DuplicateKey:
            # A concurrent first sign-in for the same email inserted it first
            existing = await self.store.users.find_one({"email": email})
            if not existing:
                raise
            return await self._refresh_login(existing, now), False

        logger.info("New user %s", email)
        return user, True

    async def _refresh_login(self, user: User, now) -> User:
        await self.store.users.update_one({"id": user.id}, {"last_log_in": now})
        return await self.store.users.find_one({"id": user.id})

    async def search(self, term: str) -> List[User]:
        """Case-insensitive partial email match over admins and users."""
        return await self.store.users.find(
            {"email__icontains": term, "role__in": SEARCHABLE_ROLES},
            order_by=["email"],
            limit=SEARCH_LIMIT,
        )

    async def get_role(self, email: str) -> UserRole:
        user = await self.store.users.find_one({"email": email})
        if not user:
            raise NotFound("User", email)
        return user.role

    async def set_role(self, user_id: int, role: UserRole) -> int:
        user = await self.store.users.find_one({"id": user_id})
        if not user:
            raise NotFound("User", user_id)
        modified = await self.store.users.update_one({"id": user_id}, {"role": role})
        if modified:
            logger.info("User %s role changed %s → %s", user.email, user.role.value, role.value)
        return modified
