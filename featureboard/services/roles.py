"""
Role resolution: global role + per-board membership → permission level.
"""

from __future__ import annotations

import enum
from typing import FrozenSet, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.models.board_membership import BoardMembership, BoardRole
from featureboard.models.user import GlobalRole
from featureboard.services.credentials import Identity


class PermissionLevel(str, enum.Enum):
    DENIED = "denied"
    MEMBER = "member"
    MANAGER = "manager"
    ADMIN = "admin"


ANY_MEMBER: FrozenSet[PermissionLevel] = frozenset(
    {PermissionLevel.ADMIN, PermissionLevel.MANAGER, PermissionLevel.MEMBER}
)
MANAGERS: FrozenSet[PermissionLevel] = frozenset({PermissionLevel.ADMIN, PermissionLevel.MANAGER})
ADMIN_ONLY: FrozenSet[PermissionLevel] = frozenset({PermissionLevel.ADMIN})

_BOARD_ROLE_LEVELS = {
    BoardRole.STAKEHOLDER: PermissionLevel.MANAGER,
    BoardRole.USER: PermissionLevel.MEMBER,
}

_GLOBAL_ROLE_LEVELS = {
    GlobalRole.APP_ADMIN: PermissionLevel.ADMIN,
    GlobalRole.STAKEHOLDER: PermissionLevel.MANAGER,
    GlobalRole.USER: PermissionLevel.MEMBER,
}


async def get_board_role(db: AsyncSession, user_id: int, board_id: int) -> Optional[BoardRole]:
    result = await db.execute(
        select(BoardMembership.role).where(
            BoardMembership.user_id == user_id,
            BoardMembership.board_id == board_id,
        )
    )
    role = result.scalar_one_or_none()
    return BoardRole(role) if role is not None else None


async def resolve(db: AsyncSession, identity: Identity, board_id: Optional[int] = None) -> PermissionLevel:
    """
    Effective permission level of ``identity``.

    app_admin is ``ADMIN`` everywhere without a membership lookup. For a
    board-scoped request anyone else needs a membership row; without one
    the answer is ``DENIED``. Without a board the global role decides.
    """
    if identity.global_role is GlobalRole.APP_ADMIN:
        return PermissionLevel.ADMIN

    if board_id is None:
        return _GLOBAL_ROLE_LEVELS[identity.global_role]

    board_role = await get_board_role(db, identity.subject_id, board_id)
    if board_role is None:
        return PermissionLevel.DENIED
    return _BOARD_ROLE_LEVELS[board_role]
