"""Categories router."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.database import get_db
from featureboard.repositories.categories import list_categories
from featureboard.schemas.feedback import CategoryOut
from featureboard.services.guard import AuthContext, require
from featureboard.services.roles import ANY_MEMBER

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
async def get_categories(
    ctx: AuthContext = Depends(require(ANY_MEMBER)),
    db: AsyncSession = Depends(get_db),
):
    return await list_categories(db)
