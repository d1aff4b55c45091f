"""Admin router — global role management (app_admin only)."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.database import get_db
from featureboard.errors import NotFound
from featureboard.models.user import GlobalRole
from featureboard.repositories.users import get_user
from featureboard.schemas.user import RoleUpdate, UserOut
from featureboard.services.guard import AuthContext, require
from featureboard.services.roles import ADMIN_ONLY
from featureboard.utils.validation import parse_choice

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.put("/users/{user_id}/role", response_model=UserOut)
async def update_global_role(
    user_id: int,
    body: RoleUpdate,
    ctx: AuthContext = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
):
    """Change a user's global role. Takes effect on their next sign-in."""
    role = parse_choice(GlobalRole, body.role, "role")
    user = await get_user(db, user_id)
    if user is None:
        raise NotFound("User not found")

    user.role = role
    await db.commit()
    logger.info("User %s set global role of user %s to %s", ctx.identity.subject_id, user_id, role.value)
    return user
