"""
Authorization guard — FastAPI dependencies that gate every board operation.

``require(levels, locate_board)`` verifies the bearer credential, finds the
board the request targets, resolves the caller's permission level and hands
the handler an immutable ``AuthContext``:

    @router.put("/boards/{board_id}")
    async def update_board(..., ctx: AuthContext = Depends(require(MANAGERS, board_from_path))):

Dependencies are solved in declaration order, so a bad credential is always
reported first. A missing board is only reported to callers the board would
admit; everyone else gets 403 whether or not it exists.
"""

import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.database import get_db
from featureboard.errors import Forbidden, NotFound
from featureboard.repositories.boards import get_board
from featureboard.repositories.comments import board_id_for_comment, board_id_for_reply
from featureboard.repositories.feedback import board_id_for_feedback
from featureboard.services import roles
from featureboard.services.credentials import CredentialVerifier, Identity
from featureboard.services.roles import PermissionLevel

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    identity: Identity
    level: PermissionLevel
    board_id: Optional[int] = None


def get_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.verifier


async def authenticate(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    verifier: CredentialVerifier = Depends(get_verifier),
) -> Identity:
    """Verified identity of the caller; 401 when the credential is missing or bad."""
    return verifier.verify(credentials.credentials if credentials else None)


# ═══════════════════════════════════════════════════════════════
#  Board locators
# ═══════════════════════════════════════════════════════════════

async def board_from_path(board_id: int) -> int:
    """Board ID straight from the path; the guard checks it exists once the caller is admitted."""
    return board_id


async def board_from_feedback(feedback_id: int, db: AsyncSession = Depends(get_db)) -> int:
    board_id = await board_id_for_feedback(db, feedback_id)
    if board_id is None:
        raise NotFound("Feedback not found")
    return board_id


async def board_from_comment(comment_id: int, db: AsyncSession = Depends(get_db)) -> int:
    board_id = await board_id_for_comment(db, comment_id)
    if board_id is None:
        raise NotFound("Comment not found")
    return board_id


async def board_from_reply(reply_id: int, db: AsyncSession = Depends(get_db)) -> int:
    board_id = await board_id_for_reply(db, reply_id)
    if board_id is None:
        raise NotFound("Reply not found")
    return board_id


async def _no_board() -> Optional[int]:
    return None


# ═══════════════════════════════════════════════════════════════
#  Guard factory
# ═══════════════════════════════════════════════════════════════

def require(
    levels: FrozenSet[PermissionLevel],
    locate_board: Optional[Callable] = None,
) -> Callable:
    """Build a dependency admitting callers whose level is in ``levels``."""
    locator = locate_board or _no_board

    async def guard(
        identity: Identity = Depends(authenticate),
        board_id: Optional[int] = Depends(locator),
        db: AsyncSession = Depends(get_db),
    ) -> AuthContext:
        level = await roles.resolve(db, identity, board_id)
        if level not in levels:
            logger.info(
                "Denied user %s (%s) on board %s: level %s",
                identity.subject_id, identity.global_role.value, board_id, level.value,
            )
            raise Forbidden()
        # only admitted callers learn whether the board exists
        if board_id is not None and await get_board(db, board_id) is None:
            raise NotFound("Board not found")
        return AuthContext(identity=identity, level=level, board_id=board_id)

    return guard
