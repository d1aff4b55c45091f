"""Comment and reply persistence."""

from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.models.comment import Comment, CommentReply
from featureboard.models.feedback import Feedback
from featureboard.models.reaction import CommentReaction


async def create_comment(db: AsyncSession, feedback_id: int, user_id: int, content: str) -> Comment:
    comment = Comment(feedback_id=feedback_id, user_id=user_id, content=content, likes=0, dislikes=0)
    db.add(comment)
    await db.flush()
    await db.refresh(comment)
    return comment


async def create_reply(db: AsyncSession, comment_id: int, user_id: int, content: str) -> CommentReply:
    reply = CommentReply(comment_id=comment_id, user_id=user_id, content=content, likes=0, dislikes=0)
    db.add(reply)
    await db.flush()
    await db.refresh(reply)
    return reply


async def board_id_for_comment(db: AsyncSession, comment_id: int) -> Optional[int]:
    result = await db.execute(
        select(Feedback.board_id)
        .join(Comment, Comment.feedback_id == Feedback.id)
        .where(Comment.id == comment_id)
    )
    return result.scalar_one_or_none()


async def board_id_for_reply(db: AsyncSession, reply_id: int) -> Optional[int]:
    result = await db.execute(
        select(Feedback.board_id)
        .join(Comment, Comment.feedback_id == Feedback.id)
        .join(CommentReply, CommentReply.comment_id == Comment.id)
        .where(CommentReply.id == reply_id)
    )
    return result.scalar_one_or_none()


async def list_feedback_comments(db: AsyncSession, feedback_id: int, viewer_id: int) -> List[dict]:
    """
    Comments on a feedback item, newest first, each with its replies oldest
    first. Every comment and reply is annotated with the viewer's own
    reaction (``is_liked`` / ``is_disliked``).
    """
    res_comments = await db.execute(
        select(Comment)
        .where(Comment.feedback_id == feedback_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    comments = res_comments.scalars().all()
    if not comments:
        return []

    comment_ids = [c.id for c in comments]
    res_replies = await db.execute(
        select(CommentReply)
        .where(CommentReply.comment_id.in_(comment_ids))
        .order_by(CommentReply.created_at, CommentReply.id)
    )
    replies = res_replies.scalars().all()

    # Viewer's reactions, keyed by target
    reply_ids = [r.id for r in replies]
    res_reactions = await db.execute(
        select(CommentReaction).where(
            CommentReaction.user_id == viewer_id,
            (CommentReaction.comment_id.in_(comment_ids)) | (CommentReaction.reply_id.in_(reply_ids or [-1])),
        )
    )
    on_comment: Dict[int, bool] = {}
    on_reply: Dict[int, bool] = {}
    for reaction in res_reactions.scalars().all():
        if reaction.comment_id is not None:
            on_comment[reaction.comment_id] = reaction.is_like
        else:
            on_reply[reaction.reply_id] = reaction.is_like

    replies_by_comment: Dict[int, List[dict]] = {cid: [] for cid in comment_ids}
    for r in replies:
        replies_by_comment[r.comment_id].append(_with_reaction(_reply_fields(r), on_reply.get(r.id)))

    return [
        {
            **_with_reaction(_comment_fields(c), on_comment.get(c.id)),
            "replies": replies_by_comment[c.id],
        }
        for c in comments
    ]


def _comment_fields(c: Comment) -> dict:
    return {
        "id": c.id,
        "feedback_id": c.feedback_id,
        "user_id": c.user_id,
        "content": c.content,
        "likes": c.likes,
        "dislikes": c.dislikes,
        "created_at": c.created_at,
    }


def _reply_fields(r: CommentReply) -> dict:
    return {
        "id": r.id,
        "comment_id": r.comment_id,
        "user_id": r.user_id,
        "content": r.content,
        "likes": r.likes,
        "dislikes": r.dislikes,
        "created_at": r.created_at,
    }


def _with_reaction(fields: dict, is_like: Optional[bool]) -> dict:
    fields["is_liked"] = is_like is True
    fields["is_disliked"] = is_like is False
    return fields
