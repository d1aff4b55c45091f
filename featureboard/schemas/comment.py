"""Comment, reply and reaction Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CommentCreate(BaseModel):
    content: str


class ReplyOut(BaseModel):
    id: int
    comment_id: int
    user_id: int
    content: str
    likes: int = 0
    dislikes: int = 0
    is_liked: bool = False
    is_disliked: bool = False
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CommentOut(BaseModel):
    id: int
    feedback_id: int
    user_id: int
    content: str
    likes: int = 0
    dislikes: int = 0
    is_liked: bool = False
    is_disliked: bool = False
    created_at: Optional[datetime] = None
    replies: List[ReplyOut] = []

    model_config = {"from_attributes": True}


class ReactionRequest(BaseModel):
    is_like: bool


class ReactionOut(BaseModel):
    target_id: int
    reaction: Optional[str] = None
    likes: int
    dislikes: int
