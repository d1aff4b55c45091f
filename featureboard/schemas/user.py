"""User / auth Pydantic schemas."""

from typing import Dict, Optional

from pydantic import BaseModel

from featureboard.models.user import GlobalRole


class TokenOut(BaseModel):
    token: str
    token_type: str = "bearer"
    name: str
    email: str


class ProfileOut(BaseModel):
    id: int
    email: str
    name: str
    picture: Optional[str] = None
    role: str
    board_roles: Dict[int, str] = {}


class RoleUpdate(BaseModel):
    role: str


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    role: GlobalRole

    model_config = {"from_attributes": True}
