"""
Bootstrap the first admin account.

Admins can only be made by other admins through PATCH /users/{id}/role, so
the very first one is created (or promoted) here.

Usage:
    python backend/seed_users.py admin@example.com
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.app.db.gateway import DocumentStore
from backend.app.db.session import AsyncSessionLocal, init_models, utcnow
from backend.app.models.enums import UserRole


async def seed_admin(email: str):
    """Create the user as admin, or promote the existing user."""
    await init_models()

    async with AsyncSessionLocal() as db:
        store = DocumentStore(db)
        existing = await store.users.find_one({"email": email})

        if existing and existing.role == UserRole.ADMIN:
            print(f"ℹ️  {email} is already an admin, skipping seeding")
            return

        if existing:
            await store.users.update_one({"id": existing.id}, {"role": UserRole.ADMIN})
            print(f"✅ Promoted {email} to admin")
            return

        await store.users.insert_one({"email": email, "role": UserRole.ADMIN, "last_log_in": utcnow()})
        print(f"✅ Created admin user {email}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python backend/seed_users.py <admin-email>")
        sys.exit(1)
    asyncio.run(seed_admin(sys.argv[1]))
