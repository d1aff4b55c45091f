"""
Comments router — replies and like/dislike reactions.

Endpoints:
    POST /comments/{comment_id}/replies  → reply to a comment
    POST /comments/{comment_id}/reaction → toggle like / dislike on a comment
    POST /replies/{reply_id}/reaction    → toggle like / dislike on a reply
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.database import get_db
from featureboard.repositories import comments as comment_repo
from featureboard.schemas.comment import CommentCreate, ReactionOut, ReactionRequest, ReplyOut
from featureboard.services.guard import AuthContext, board_from_comment, board_from_reply, require
from featureboard.services.reactions import (
    COMMENT_LIKES,
    REPLY_LIKES,
    ReactionEngine,
    ToggleOutcome,
    engine_for,
)
from featureboard.services.roles import ANY_MEMBER
from featureboard.utils.validation import validate_comment

router = APIRouter(tags=["comments"])


def _reaction_out(outcome: ToggleOutcome) -> ReactionOut:
    reaction = None
    if outcome.reaction is not None:
        reaction = "like" if outcome.reaction else "dislike"
    return ReactionOut(
        target_id=outcome.target_id,
        reaction=reaction,
        likes=outcome.positive_count,
        dislikes=outcome.negative_count,
    )


@router.post("/comments/{comment_id}/replies", response_model=ReplyOut, status_code=status.HTTP_201_CREATED)
async def add_reply(
    comment_id: int,
    body: CommentCreate,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_comment)),
    db: AsyncSession = Depends(get_db),
):
    content = validate_comment(body.content)
    reply = await comment_repo.create_reply(db, comment_id, ctx.identity.subject_id, content)
    await db.commit()
    return reply


@router.post("/comments/{comment_id}/reaction", response_model=ReactionOut)
async def react_to_comment(
    comment_id: int,
    body: ReactionRequest,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_comment)),
    engine: ReactionEngine = Depends(engine_for(COMMENT_LIKES)),
):
    outcome = await engine.toggle(comment_id, ctx.identity.subject_id, body.is_like)
    return _reaction_out(outcome)


@router.post("/replies/{reply_id}/reaction", response_model=ReactionOut)
async def react_to_reply(
    reply_id: int,
    body: ReactionRequest,
    ctx: AuthContext = Depends(require(ANY_MEMBER, board_from_reply)),
    engine: ReactionEngine = Depends(engine_for(REPLY_LIKES)),
):
    outcome = await engine.toggle(reply_id, ctx.identity.subject_id, body.is_like)
    return _reaction_out(outcome)
