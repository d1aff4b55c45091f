"""Like/dislike reactions on comments and replies."""

from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from featureboard.database import Base


class CommentReaction(Base):
    __tablename__ = "comment_reactions"
    __table_args__ = (
        # exactly one target per row
        CheckConstraint(
            "(comment_id IS NULL) <> (reply_id IS NULL)",
            name="ck_comment_reactions_single_target",
        ),
        UniqueConstraint("comment_id", "user_id", name="uq_comment_reactions_comment_user"),
        UniqueConstraint("reply_id", "user_id", name="uq_comment_reactions_reply_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    comment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), index=True
    )
    reply_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comment_replies.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    is_like: Mapped[bool] = mapped_column(Boolean, nullable=False)
