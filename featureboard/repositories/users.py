"""User and board-membership persistence."""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.models.board_membership import BoardMembership, BoardRole
from featureboard.models.user import GlobalRole, User


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def find_user_by_oauth(db: AsyncSession, provider: str, oauth_id: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.oauth_provider == provider, User.oauth_id == oauth_id)
    )
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    name: str,
    role: GlobalRole = GlobalRole.USER,
    oauth_provider: Optional[str] = None,
    oauth_id: Optional[str] = None,
    picture: Optional[str] = None,
) -> User:
    user = User(
        email=email.strip().lower(),
        name=name,
        role=role,
        oauth_provider=oauth_provider,
        oauth_id=oauth_id,
        picture=picture,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def get_board_roles(db: AsyncSession, user_id: int) -> Dict[int, BoardRole]:
    """Map of board ID → the user's role on that board."""
    result = await db.execute(
        select(BoardMembership.board_id, BoardMembership.role).where(
            BoardMembership.user_id == user_id
        )
    )
    return {board_id: BoardRole(role) for board_id, role in result.all()}


async def add_board_member(db: AsyncSession, user_id: int, board_id: int, role: BoardRole) -> None:
    """Insert the membership or overwrite the role of an existing one."""
    dialect = db.get_bind().dialect.name
    insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
    stmt = insert(BoardMembership).values(user_id=user_id, board_id=board_id, role=role)
    stmt = stmt.on_conflict_do_update(
        index_elements=[BoardMembership.user_id, BoardMembership.board_id],
        set_={"role": stmt.excluded.role},
    )
    await db.execute(stmt)


async def remove_board_member(db: AsyncSession, user_id: int, board_id: int) -> bool:
    result = await db.execute(
        delete(BoardMembership).where(
            BoardMembership.user_id == user_id,
            BoardMembership.board_id == board_id,
        )
    )
    return result.rowcount > 0


async def list_board_members(db: AsyncSession, board_id: int) -> List[Tuple[User, BoardRole]]:
    result = await db.execute(
        select(User, BoardMembership.role)
        .join(BoardMembership, BoardMembership.user_id == User.id)
        .where(BoardMembership.board_id == board_id)
        .order_by(User.id)
    )
    return [(user, BoardRole(role)) for user, role in result.all()]
