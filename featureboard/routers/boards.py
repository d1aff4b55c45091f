"""
Boards router — boards, their members and the feedback they collect.

Endpoints:
    GET    /boards                              → boards visible to the caller
    POST   /boards                              → create a board (app_admin)
    GET    /boards/{board_id}                   → board details
    PUT    /boards/{board_id}                   → rename (stakeholder+)
    GET    /boards/{board_id}/members           → members with roles (stakeholder+)
    POST   /boards/{board_id}/members           → add or re-role a member (stakeholder+)
    DELETE /boards/{board_id}/members/{user_id} → remove a member (stakeholder+)
    GET    /boards/{board_id}/feedback          → feedback on the board
    POST   /boards/{board_id}/feedback          → submit feedback
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.database import get_db
from featureboard.errors import NotFound
from featureboard.models.board_membership import BoardRole
from featureboard.repositories import boards as board_repo
from featureboard.repositories import feedback as feedback_repo
from featureboard.repositories.categories import get_category
from featureboard.repositories.users import (
    add_board_member,
    find_user_by_email,
    list_board_members,
    remove_board_member,
)
from featureboard.schemas.board import BoardCreate, BoardOut, BoardUpdate, MemberAdd, MemberOut
from featureboard.schemas.feedback import FeedbackCreate, FeedbackOut
from featureboard.services.guard import AuthContext, board_from_path, require
from featureboard.services.roles import ADMIN_ONLY, ANY_MEMBER, MANAGERS
from featureboard.utils.validation import parse_choice, validate_board_name, validate_feedback

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/boards", tags=["boards"])


# ═══════════════════════════════════════════════════════════════
#  Boards
# ═══════════════════════════════════════════════════════════════

@router.get("", response_model=List[BoardOut])
async def list_boards(
    ctx: AuthContext = Depends(require(ANY_MEMBER)),
    db: AsyncSession = Depends(get_db),
):
    """app_admin sees every board; everyone else the boards they belong to."""
    if ctx.identity.is_admin:
        return await board_repo.list_all_boards(db)
    return await board_repo.list_user_boards(db, ctx.identity.subject_id)


@router.post("", response_model=BoardOut, status_code=status.HTTP_201_CREATED)
async def create_board(
    body: BoardCreate,
    ctx: AuthContext = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
):
    name = validate_board_name(body.name)
    board = await board_repo.create_board(db, name, ctx.identity.subject_id)
    await db.commit()
    logger.info("User %s created board %s", ctx.identity.subject_id, board.id)
    return board


@router.get("/{board_id}", response_model=BoardOut)
async def get_board(
    board_id: int,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_path)),
    db: AsyncSession = Depends(get_db),
):
    return await board_repo.get_board(db, board_id)


@router.put("/{board_id}", response_model=BoardOut)
async def update_board(
    board_id: int,
    body: BoardUpdate,
    ctx: AuthContext = Depends(require(MANAGERS, board_from_path)),
    db: AsyncSession = Depends(get_db),
):
    name = validate_board_name(body.name)
    board = await board_repo.rename_board(db, board_id, name)
    if board is None:
        raise NotFound("Board not found")
    await db.commit()
    logger.info("User %s renamed board %s", ctx.identity.subject_id, board_id)
    return board


# ═══════════════════════════════════════════════════════════════
#  Members
# ═══════════════════════════════════════════════════════════════

@router.get("/{board_id}/members", response_model=List[MemberOut])
async def list_members(
    board_id: int,
    ctx: AuthContext = Depends(require(MANAGERS, board_from_path)),
    db: AsyncSession = Depends(get_db),
):
    members = await list_board_members(db, board_id)
    return [
        MemberOut(user_id=user.id, email=user.email, name=user.name, picture=user.picture, role=role.value)
        for user, role in members
    ]


@router.post("/{board_id}/members", response_model=MemberOut)
async def add_member(
    board_id: int,
    body: MemberAdd,
    ctx: AuthContext = Depends(require(MANAGERS, board_from_path)),
    db: AsyncSession = Depends(get_db),
):
    """Add a user by email; re-adding an existing member overwrites their role."""
    role = parse_choice(BoardRole, body.role, "board role")
    user = await find_user_by_email(db, body.email)
    if user is None:
        raise NotFound("User not found")

    await add_board_member(db, user.id, board_id, role)
    await db.commit()
    logger.info(
        "User %s set user %s as %s on board %s", ctx.identity.subject_id, user.id, role.value, board_id
    )
    return MemberOut(user_id=user.id, email=user.email, name=user.name, picture=user.picture, role=role.value)


@router.delete("/{board_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    board_id: int,
    user_id: int,
    ctx: AuthContext = Depends(require(MANAGERS, board_from_path)),
    db: AsyncSession = Depends(get_db),
):
    if not await remove_board_member(db, user_id, board_id):
        raise NotFound("Membership not found")
    await db.commit()
    logger.info("User %s removed user %s from board %s", ctx.identity.subject_id, user_id, board_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ═══════════════════════════════════════════════════════════════
#  Feedback
# ═══════════════════════════════════════════════════════════════

@router.get("/{board_id}/feedback", response_model=List[FeedbackOut])
async def list_feedback(
    board_id: int,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_path)),
    db: AsyncSession = Depends(get_db),
):
    return await feedback_repo.list_board_feedback(db, board_id)


@router.post("/{board_id}/feedback", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
async def create_feedback(
    board_id: int,
    body: FeedbackCreate,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_path)),
    db: AsyncSession = Depends(get_db),
):
    title, description, category_id = validate_feedback(body.title, body.description, body.category_id)
    if await get_category(db, category_id) is None:
        raise NotFound("Category not found")

    feedback = await feedback_repo.create_feedback(db, board_id, title, description, category_id)
    await db.commit()
    return feedback
