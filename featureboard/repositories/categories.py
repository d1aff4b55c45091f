"""Category persistence."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.models.category import Category

DEFAULT_CATEGORIES = ("Feature", "Improvement", "Bug", "Integration")


async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(select(Category).order_by(Category.id))
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.id == category_id))
    return result.scalar_one_or_none()


async def ensure_default_categories(db: AsyncSession) -> int:
    """Insert any missing default categories; returns how many were added."""
    result = await db.execute(select(Category.name))
    existing = set(result.scalars().all())
    missing = [name for name in DEFAULT_CATEGORIES if name not in existing]
    db.add_all([Category(name=name) for name in missing])
    await db.flush()
    return len(missing)
