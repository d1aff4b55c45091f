"""Board Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr


class BoardCreate(BaseModel):
    name: str


class BoardUpdate(BaseModel):
    name: str


class BoardOut(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MemberAdd(BaseModel):
    email: EmailStr
    role: str = "user"


class MemberOut(BaseModel):
    user_id: int
    email: str
    name: str
    picture: Optional[str] = None
    role: str
