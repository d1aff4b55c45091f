"""Board persistence."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.models.board import Board
from featureboard.models.board_membership import BoardMembership, BoardRole
from featureboard.repositories.users import add_board_member


async def list_all_boards(db: AsyncSession) -> List[Board]:
    result = await db.execute(select(Board).order_by(Board.id))
    return list(result.scalars().all())


async def list_user_boards(db: AsyncSession, user_id: int) -> List[Board]:
    result = await db.execute(
        select(Board)
        .join(BoardMembership, BoardMembership.board_id == Board.id)
        .where(BoardMembership.user_id == user_id)
        .order_by(Board.id)
    )
    return list(result.scalars().all())


async def get_board(db: AsyncSession, board_id: int) -> Optional[Board]:
    result = await db.execute(select(Board).where(Board.id == board_id))
    return result.scalar_one_or_none()


async def create_board(db: AsyncSession, name: str, creator_id: int) -> Board:
    """Create a board and make its creator a stakeholder of it."""
    board = Board(name=name)
    db.add(board)
    await db.flush()  # to get board.id

    await add_board_member(db, creator_id, board.id, BoardRole.STAKEHOLDER)
    await db.refresh(board)
    return board


async def rename_board(db: AsyncSession, board_id: int, name: str) -> Optional[Board]:
    board = await get_board(db, board_id)
    if board is None:
        return None
    board.name = name
    await db.flush()
    return board
