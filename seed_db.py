"""
Seed the database: create tables, default categories and, optionally, an admin.

    python seed_db.py [admin@example.com ["Admin Name"]]

An existing account with that email is promoted to app_admin.
"""

import asyncio
import sys

from featureboard import models  # noqa: F401
from featureboard.database import Base, async_session, engine
from featureboard.models.user import GlobalRole
from featureboard.repositories.categories import ensure_default_categories
from featureboard.repositories.users import create_user, find_user_by_email


async def async_main(admin_email=None, admin_name=None):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        added = await ensure_default_categories(session)
        print(f"Added {added} categories")

        if admin_email:
            user = await find_user_by_email(session, admin_email)
            if user:
                user.role = GlobalRole.APP_ADMIN
                print(f"Promoted {user.email} to app_admin")
            else:
                user = await create_user(
                    session,
                    email=admin_email,
                    name=admin_name or admin_email.split("@")[0],
                    role=GlobalRole.APP_ADMIN,
                )
                print(f"Created app_admin {user.email}")

        await session.commit()

    await engine.dispose()


if __name__ == "__main__":
    args = sys.argv[1:]
    asyncio.run(async_main(*args[:2]))
