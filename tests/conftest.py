"""Shared pytest fixtures.

Each test gets its own file-backed SQLite database under ``tmp_path`` so the
reaction engine can open independent connections against it.
"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from featureboard.database import Base, get_db, get_session_factory
from featureboard.main import app
from featureboard.models.board_membership import BoardRole
from featureboard.models.user import GlobalRole, User
from featureboard.repositories.boards import create_board
from featureboard.repositories.categories import ensure_default_categories
from featureboard.repositories.users import add_board_member, create_user


# ===========================================
# DATABASE FIXTURES
# ===========================================


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'featureboard-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting state directly."""
    async with session_factory() as session:
        await ensure_default_categories(session)
        await session.commit()
        yield session


# ===========================================
# HTTP CLIENT
# ===========================================


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ===========================================
# FACTORIES
# ===========================================


def auth_headers(user: User) -> dict:
    """Bearer header carrying a freshly issued credential for ``user``."""
    return {"Authorization": f"Bearer {app.state.verifier.issue(user)}"}


@pytest_asyncio.fixture
async def make_user(db):
    counter = {"n": 0}

    async def _make(role: GlobalRole = GlobalRole.USER, email: str = None, name: str = None) -> User:
        counter["n"] += 1
        user = await create_user(
            db,
            email=email or f"user{counter['n']}@example.com",
            name=name or f"User {counter['n']}",
            role=role,
        )
        await db.commit()
        return user

    return _make


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user(GlobalRole.APP_ADMIN, email="admin@example.com", name="Admin")


@pytest_asyncio.fixture
async def make_board(db, admin):
    async def _make(name: str = "Roadmap", members: dict = None):
        """Board created by ``admin``; ``members`` maps User → BoardRole."""
        board = await create_board(db, name, admin.id)
        for user, role in (members or {}).items():
            await add_board_member(db, user.id, board.id, role)
        await db.commit()
        return board

    return _make


@pytest_asyncio.fixture
async def board_with_members(make_user, make_board):
    """A board with one stakeholder, one user member and one outsider."""
    stakeholder = await make_user(name="Stakeholder")
    member = await make_user(name="Member")
    outsider = await make_user(name="Outsider")
    board = await make_board(
        members={stakeholder: BoardRole.STAKEHOLDER, member: BoardRole.USER},
    )
    return board, stakeholder, member, outsider
