"""Tests for role resolution and permission level sets."""

import pytest

from featureboard.models.board_membership import BoardRole
from featureboard.models.user import GlobalRole
from featureboard.repositories.users import add_board_member, remove_board_member
from featureboard.services import roles
from featureboard.services.credentials import Identity
from featureboard.services.roles import ADMIN_ONLY, ANY_MEMBER, MANAGERS, PermissionLevel


def identity_of(user) -> Identity:
    return Identity(subject_id=user.id, email=user.email, name=user.name, global_role=GlobalRole(user.role))


class TestLevelSets:
    def test_sets_are_nested_by_membership(self):
        assert ADMIN_ONLY < MANAGERS < ANY_MEMBER
        assert PermissionLevel.DENIED not in ANY_MEMBER

    def test_member_is_not_a_manager(self):
        assert PermissionLevel.MEMBER in ANY_MEMBER
        assert PermissionLevel.MEMBER not in MANAGERS


class TestBoardScoped:
    @pytest.mark.asyncio
    async def test_admin_needs_no_membership(self, db, admin):
        # board 7 does not even exist; the lookup is skipped
        assert await roles.resolve(db, identity_of(admin), 7) is PermissionLevel.ADMIN

    @pytest.mark.asyncio
    async def test_membership_roles(self, db, board_with_members):
        board, stakeholder, member, outsider = board_with_members

        assert await roles.resolve(db, identity_of(stakeholder), board.id) is PermissionLevel.MANAGER
        assert await roles.resolve(db, identity_of(member), board.id) is PermissionLevel.MEMBER
        assert await roles.resolve(db, identity_of(outsider), board.id) is PermissionLevel.DENIED

    @pytest.mark.asyncio
    async def test_global_stakeholder_without_membership_is_denied(self, db, make_user, make_board):
        board = await make_board()
        stakeholder = await make_user(GlobalRole.STAKEHOLDER)

        assert await roles.resolve(db, identity_of(stakeholder), board.id) is PermissionLevel.DENIED

    @pytest.mark.asyncio
    async def test_joining_and_leaving_a_board(self, db, make_user, make_board):
        board = await make_board()
        subject = await make_user()
        identity = identity_of(subject)

        assert await roles.resolve(db, identity, board.id) not in ANY_MEMBER

        await add_board_member(db, subject.id, board.id, BoardRole.USER)
        await db.commit()
        level = await roles.resolve(db, identity, board.id)
        assert level in ANY_MEMBER
        assert level not in MANAGERS

        await remove_board_member(db, subject.id, board.id)
        await db.commit()
        assert await roles.resolve(db, identity, board.id) is PermissionLevel.DENIED


class TestNotBoardScoped:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "global_role, expected",
        [
            (GlobalRole.APP_ADMIN, PermissionLevel.ADMIN),
            (GlobalRole.STAKEHOLDER, PermissionLevel.MANAGER),
            (GlobalRole.USER, PermissionLevel.MEMBER),
        ],
    )
    async def test_global_role_decides(self, db, make_user, global_role, expected):
        user = await make_user(global_role)
        assert await roles.resolve(db, identity_of(user)) is expected
