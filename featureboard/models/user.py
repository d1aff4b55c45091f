"""User model — identities created on first OAuth sign-in."""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.orm import Mapped, mapped_column

from featureboard.database import Base


class GlobalRole(str, enum.Enum):
    APP_ADMIN = "app_admin"
    STAKEHOLDER = "stakeholder"
    USER = "user"


class User(Base):
    __tablename__ = "users"

    # ── Identity ──
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    role: Mapped[GlobalRole] = mapped_column(
        Enum(GlobalRole, values_callable=lambda e: [m.value for m in e]),
        default=GlobalRole.USER,
        nullable=False,
    )

    # ── OAuth ──
    oauth_provider: Mapped[Optional[str]] = mapped_column(String(20))
    oauth_id: Mapped[Optional[str]] = mapped_column(String(255))
    picture: Mapped[Optional[str]] = mapped_column(String(500))

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
