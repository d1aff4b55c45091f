"""HTTP tests for feedback, votes, comments, replies and reactions."""

import pytest
import pytest_asyncio

from featureboard.models.board_membership import BoardRole
from featureboard.repositories.users import add_board_member
from tests.conftest import auth_headers


@pytest_asyncio.fixture
async def feedback(client, board_with_members):
    """A feedback item submitted by the plain member."""
    board, _, member, _ = board_with_members
    resp = await client.post(
        f"/boards/{board.id}/feedback",
        json={"title": " Dark mode ", "description": "Please", "category_id": 1},
        headers=auth_headers(member),
    )
    assert resp.status_code == 201
    return resp.json()


class TestFeedback:
    @pytest.mark.asyncio
    async def test_new_feedback_is_pending_with_no_votes(self, feedback):
        assert feedback["title"] == "Dark mode"
        assert feedback["status"] == "pending"
        assert (feedback["upvotes"], feedback["downvotes"]) == (0, 0)

    @pytest.mark.asyncio
    async def test_listing(self, client, feedback, board_with_members):
        board, _, member, outsider = board_with_members

        resp = await client.get(f"/boards/{board.id}/feedback", headers=auth_headers(member))
        assert [f["id"] for f in resp.json()] == [feedback["id"]]

        denied = await client.get(f"/boards/{board.id}/feedback", headers=auth_headers(outsider))
        assert denied.status_code == 403

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "  ", "description": "d", "category_id": 1},
            {"title": "t" * 256, "description": "d", "category_id": 1},
            {"title": "t", "description": " ", "category_id": 1},
            {"title": "t", "description": "d", "category_id": 0},
        ],
    )
    async def test_invalid_feedback(self, client, board_with_members, payload):
        board, _, member, _ = board_with_members
        resp = await client.post(f"/boards/{board.id}/feedback", json=payload, headers=auth_headers(member))
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_category(self, client, board_with_members):
        board, _, member, _ = board_with_members
        resp = await client.post(
            f"/boards/{board.id}/feedback",
            json={"title": "t", "description": "d", "category_id": 99},
            headers=auth_headers(member),
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_feedback(self, client, admin):
        resp = await client.get("/feedback/999", headers=auth_headers(admin))
        assert resp.status_code == 404


class TestStatus:
    @pytest.mark.asyncio
    async def test_member_joins_then_still_cannot_change_status(self, client, db, feedback, board_with_members):
        board, _, _, outsider = board_with_members
        headers = auth_headers(outsider)

        assert (await client.get(f"/feedback/{feedback['id']}", headers=headers)).status_code == 403

        await add_board_member(db, outsider.id, board.id, BoardRole.USER)
        await db.commit()

        assert (await client.get(f"/feedback/{feedback['id']}", headers=headers)).status_code == 200
        resp = await client.put(f"/feedback/{feedback['id']}/status", json={"status": "approved"}, headers=headers)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_stakeholder_moves_status_freely(self, client, feedback, board_with_members):
        _, stakeholder, _, _ = board_with_members
        headers = auth_headers(stakeholder)

        for new_status in ("declined", "reviewing", "pending", "approved"):
            resp = await client.put(f"/feedback/{feedback['id']}/status", json={"status": new_status}, headers=headers)
            assert resp.status_code == 200
            assert resp.json()["status"] == new_status

    @pytest.mark.asyncio
    async def test_unknown_status(self, client, feedback, board_with_members):
        _, stakeholder, _, _ = board_with_members
        resp = await client.put(
            f"/feedback/{feedback['id']}/status", json={"status": "shipped"}, headers=auth_headers(stakeholder)
        )
        assert resp.status_code == 400


class TestVotes:
    @pytest.mark.asyncio
    async def test_vote_toggle_sequence(self, client, feedback, board_with_members):
        _, _, member, _ = board_with_members
        headers = auth_headers(member)
        url = f"/feedback/{feedback['id']}/vote"

        first = (await client.post(url, json={"vote_type": "upvote"}, headers=headers)).json()
        assert (first["vote"], first["upvotes"], first["downvotes"]) == ("upvote", 1, 0)

        second = (await client.post(url, json={"vote_type": "upvote"}, headers=headers)).json()
        assert (second["vote"], second["upvotes"], second["downvotes"]) == (None, 0, 0)

        third = (await client.post(url, json={"vote_type": "downvote"}, headers=headers)).json()
        assert (third["vote"], third["upvotes"], third["downvotes"]) == ("downvote", 0, 1)

        stored = (await client.get(f"/feedback/{feedback['id']}", headers=headers)).json()
        assert (stored["upvotes"], stored["downvotes"]) == (0, 1)

    @pytest.mark.asyncio
    async def test_outsider_cannot_vote(self, client, feedback, board_with_members):
        _, _, _, outsider = board_with_members
        resp = await client.post(
            f"/feedback/{feedback['id']}/vote", json={"vote_type": "upvote"}, headers=auth_headers(outsider)
        )
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_vote_type(self, client, feedback, board_with_members):
        _, _, member, _ = board_with_members
        resp = await client.post(
            f"/feedback/{feedback['id']}/vote", json={"vote_type": "meh"}, headers=auth_headers(member)
        )
        assert resp.status_code == 400


class TestComments:
    @pytest.mark.asyncio
    async def test_thread_ordering_and_reactions(self, client, feedback, board_with_members):
        _, stakeholder, member, _ = board_with_members
        headers = auth_headers(member)
        comments_url = f"/feedback/{feedback['id']}/comments"

        older = (await client.post(comments_url, json={"content": "first"}, headers=headers)).json()
        newer = (await client.post(comments_url, json={"content": " second "}, headers=headers)).json()
        assert newer["content"] == "second"

        for text in ("reply a", "reply b"):
            resp = await client.post(
                f"/comments/{older['id']}/replies", json={"content": text}, headers=auth_headers(stakeholder)
            )
            assert resp.status_code == 201

        liked = await client.post(f"/comments/{older['id']}/reaction", json={"is_like": True}, headers=headers)
        assert liked.json() == {"target_id": older["id"], "reaction": "like", "likes": 1, "dislikes": 0}

        thread = (await client.get(comments_url, headers=headers)).json()
        assert [c["id"] for c in thread] == [newer["id"], older["id"]]
        assert [r["content"] for r in thread[1]["replies"]] == ["reply a", "reply b"]
        assert thread[1]["is_liked"] is True
        assert thread[1]["is_disliked"] is False
        assert thread[0]["is_liked"] is False

        # another viewer sees the count but not the caller's reaction
        theirs = (await client.get(comments_url, headers=auth_headers(stakeholder))).json()
        assert theirs[1]["likes"] == 1
        assert theirs[1]["is_liked"] is False

    @pytest.mark.asyncio
    async def test_reply_reaction_switch(self, client, feedback, board_with_members):
        _, stakeholder, member, _ = board_with_members
        comment = (
            await client.post(
                f"/feedback/{feedback['id']}/comments", json={"content": "hi"}, headers=auth_headers(member)
            )
        ).json()
        reply = (
            await client.post(
                f"/comments/{comment['id']}/replies", json={"content": "hey"}, headers=auth_headers(member)
            )
        ).json()
        url = f"/replies/{reply['id']}/reaction"
        headers = auth_headers(stakeholder)

        await client.post(url, json={"is_like": True}, headers=headers)
        switched = (await client.post(url, json={"is_like": False}, headers=headers)).json()
        assert (switched["reaction"], switched["likes"], switched["dislikes"]) == ("dislike", 0, 1)

        thread = (await client.get(f"/feedback/{feedback['id']}/comments", headers=headers)).json()
        assert thread[0]["replies"][0]["is_disliked"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", "c" * 1001])
    async def test_invalid_comment(self, client, feedback, board_with_members, content):
        _, _, member, _ = board_with_members
        resp = await client.post(
            f"/feedback/{feedback['id']}/comments", json={"content": content}, headers=auth_headers(member)
        )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_targets(self, client, admin):
        headers = auth_headers(admin)
        assert (await client.post("/comments/999/replies", json={"content": "x"}, headers=headers)).status_code == 404
        assert (
            await client.post("/comments/999/reaction", json={"is_like": True}, headers=headers)
        ).status_code == 404
        assert (
            await client.post("/replies/999/reaction", json={"is_like": True}, headers=headers)
        ).status_code == 404

    @pytest.mark.asyncio
    async def test_outsider_cannot_comment(self, client, feedback, board_with_members):
        _, _, _, outsider = board_with_members
        resp = await client.post(
            f"/feedback/{feedback['id']}/comments", json={"content": "x"}, headers=auth_headers(outsider)
        )
        assert resp.status_code == 403
