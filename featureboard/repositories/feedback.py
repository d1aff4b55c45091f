"""Feedback persistence."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.models.feedback import Feedback, FeedbackStatus


async def list_board_feedback(db: AsyncSession, board_id: int) -> List[Feedback]:
    result = await db.execute(
        select(Feedback).where(Feedback.board_id == board_id).order_by(Feedback.id)
    )
    return list(result.scalars().all())


async def get_feedback(db: AsyncSession, feedback_id: int) -> Optional[Feedback]:
    result = await db.execute(select(Feedback).where(Feedback.id == feedback_id))
    return result.scalar_one_or_none()


async def board_id_for_feedback(db: AsyncSession, feedback_id: int) -> Optional[int]:
    result = await db.execute(select(Feedback.board_id).where(Feedback.id == feedback_id))
    return result.scalar_one_or_none()


async def create_feedback(
    db: AsyncSession,
    board_id: int,
    title: str,
    description: str,
    category_id: int,
) -> Feedback:
    """New feedback always starts pending with zero votes."""
    feedback = Feedback(
        board_id=board_id,
        title=title,
        description=description,
        category_id=category_id,
        upvotes=0,
        downvotes=0,
        status=FeedbackStatus.PENDING,
    )
    db.add(feedback)
    await db.flush()
    await db.refresh(feedback)
    return feedback


async def set_status(db: AsyncSession, feedback: Feedback, status: FeedbackStatus) -> Feedback:
    feedback.status = status
    await db.flush()
    return feedback
