"""
Feedback router — single feedback items, votes, status and comments.

Endpoints:
    GET  /feedback/{feedback_id}          → feedback details
    POST /feedback/{feedback_id}/vote     → toggle an upvote / downvote
    PUT  /feedback/{feedback_id}/status   → change status (stakeholder+)
    GET  /feedback/{feedback_id}/comments → comments with replies
    POST /feedback/{feedback_id}/comments → add a comment
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.database import get_db
from featureboard.errors import NotFound
from featureboard.models.feedback import FeedbackStatus
from featureboard.models.vote import VoteType
from featureboard.repositories import comments as comment_repo
from featureboard.repositories import feedback as feedback_repo
from featureboard.schemas.comment import CommentCreate, CommentOut
from featureboard.schemas.feedback import FeedbackOut, StatusUpdate, VoteOut, VoteRequest
from featureboard.services.guard import AuthContext, board_from_feedback, require
from featureboard.services.reactions import FEEDBACK_VOTES, ReactionEngine, engine_for
from featureboard.services.roles import ANY_MEMBER, MANAGERS
from featureboard.utils.validation import parse_choice, validate_comment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.get("/{feedback_id}", response_model=FeedbackOut)
async def get_feedback(
    feedback_id: int,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_feedback)),
    db: AsyncSession = Depends(get_db),
):
    return await feedback_repo.get_feedback(db, feedback_id)


@router.post("/{feedback_id}/vote", response_model=VoteOut)
async def vote(
    feedback_id: int,
    body: VoteRequest,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_feedback)),
    engine: ReactionEngine = Depends(engine_for(FEEDBACK_VOTES)),
):
    """Voting the same way twice removes the vote; the other way switches it."""
    vote_type = parse_choice(VoteType, body.vote_type, "vote type")
    outcome = await engine.toggle(feedback_id, ctx.identity.subject_id, vote_type is VoteType.UPVOTE)

    current = None
    if outcome.reaction is not None:
        current = (VoteType.UPVOTE if outcome.reaction else VoteType.DOWNVOTE).value
    return VoteOut(
        feedback_id=feedback_id,
        vote=current,
        upvotes=outcome.positive_count,
        downvotes=outcome.negative_count,
    )


@router.put("/{feedback_id}/status", response_model=FeedbackOut)
async def update_status(
    feedback_id: int,
    body: StatusUpdate,
    ctx: AuthContext = Depends(require(MANAGERS, board_from_feedback)),
    db: AsyncSession = Depends(get_db),
):
    new_status = parse_choice(FeedbackStatus, body.status, "status")
    feedback = await feedback_repo.get_feedback(db, feedback_id)
    if feedback is None:
        raise NotFound("Feedback not found")

    await feedback_repo.set_status(db, feedback, new_status)
    await db.commit()
    logger.info("User %s set feedback %s to %s", ctx.identity.subject_id, feedback_id, new_status.value)
    return feedback


@router.get("/{feedback_id}/comments", response_model=List[CommentOut])
async def list_comments(
    feedback_id: int,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_feedback)),
    db: AsyncSession = Depends(get_db),
):
    return await comment_repo.list_feedback_comments(db, feedback_id, ctx.identity.subject_id)


@router.post("/{feedback_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def add_comment(
    feedback_id: int,
    body: CommentCreate,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_feedback)),
    db: AsyncSession = Depends(get_db),
):
    content = validate_comment(body.content)
    comment = await comment_repo.create_comment(db, feedback_id, ctx.identity.subject_id, content)
    await db.commit()
    return comment
