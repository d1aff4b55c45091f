"""Board Membership model."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from featureboard.database import Base


class BoardRole(str, enum.Enum):
    STAKEHOLDER = "stakeholder"
    USER = "user"


class BoardMembership(Base):
    __tablename__ = "board_members"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    board_id: Mapped[int] = mapped_column(ForeignKey("boards.id", ondelete="CASCADE"), primary_key=True)

    role: Mapped[BoardRole] = mapped_column(
        Enum(BoardRole, values_callable=lambda e: [m.value for m in e]),
        default=BoardRole.USER,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
