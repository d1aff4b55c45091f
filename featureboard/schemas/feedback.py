"""Feedback Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from featureboard.models.feedback import FeedbackStatus


class FeedbackCreate(BaseModel):
    title: str
    description: str
    category_id: int


class FeedbackOut(BaseModel):
    id: int
    board_id: int
    category_id: int
    title: str
    description: str
    upvotes: int
    downvotes: int
    status: FeedbackStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StatusUpdate(BaseModel):
    status: str


class VoteRequest(BaseModel):
    vote_type: str


class VoteOut(BaseModel):
    feedback_id: int
    vote: Optional[str] = None
    upvotes: int
    downvotes: int


class CategoryOut(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}
