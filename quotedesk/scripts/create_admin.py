"""
Create a staff user.

    ADMIN_EMAIL=owner@example.com ADMIN_PASSWORD=... python -m quotedesk.scripts.create_admin

ADMIN_ROLE defaults to admin; editor is the moderation-only role.
"""
import asyncio
import os

from sqlalchemy import select

from quotedesk.core.db import AsyncSessionLocal
from quotedesk.core.security import hash_password
from quotedesk.models.users.user_models import User
from quotedesk.utils.check_roles import VALID_ROLES


async def create_admin():
    email = os.getenv("ADMIN_EMAIL", "admin@example.com").strip().lower()
    role = os.getenv("ADMIN_ROLE", "admin").strip().lower()
    if role not in VALID_ROLES:
        raise SystemExit(f"ADMIN_ROLE must be one of {sorted(VALID_ROLES)}")

    async with AsyncSessionLocal() as session:
        exists = await session.scalar(select(User.id).where(User.username == email))
        if exists:
            print(f"User {email} already exists")
            return

        session.add(
            User(
                username=email,
                password_hash=hash_password(os.getenv("ADMIN_PASSWORD", "admin123")),
                role=role,
                is_active=True,
            )
        )
        await session.commit()
        print(f"{role.capitalize()} user {email} created!")


if __name__ == "__main__":
    asyncio.run(create_admin())
