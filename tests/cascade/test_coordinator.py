"""Tests for cascading deletes."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from postboard.auth.models import User
from postboard.comments.models import Comment
from postboard.likes.models import Like, TargetKind, TargetRef
from postboard.posts.models import Post


@pytest.fixture
async def graph(stores):
    """Two users with posts, cross comments and likes on everything."""
    alice = User(email="alice@example.com", name="Alice", password_hash="x")
    bob = User(email="bob@example.com", name="Bob", password_hash="x")
    for user in (alice, bob):
        await stores.users.claim_email(user.email, user.id)
        await stores.users.claim_name(user.name, user.id)
        await stores.users.insert(user)

    alice_post = Post(user_id=alice.id, title="A", content="a")
    bob_post = Post(user_id=bob.id, title="B", content="b")
    await stores.posts.insert(alice_post)
    await stores.posts.insert(bob_post)

    bob_on_alice = Comment(post_id=alice_post.id, user_id=bob.id, content="hi")
    alice_on_bob = Comment(post_id=bob_post.id, user_id=alice.id, content="yo")
    bob_on_bob = Comment(post_id=bob_post.id, user_id=bob.id, content="me")
    for comment in (bob_on_alice, alice_on_bob, bob_on_bob):
        await stores.comments.insert(comment)

    likes = [
        Like(bob.id, alice.id, TargetRef(TargetKind.POST, alice_post.id)),
        Like(alice.id, bob.id, TargetRef(TargetKind.POST, bob_post.id)),
        Like(alice.id, bob.id, TargetRef(TargetKind.COMMENT, bob_on_alice.id)),
        Like(alice.id, bob.id, TargetRef(TargetKind.COMMENT, bob_on_bob.id)),
        Like(bob.id, alice.id, TargetRef(TargetKind.COMMENT, alice_on_bob.id)),
    ]
    for like in likes:
        await stores.likes.insert_if_absent(like)

    return {
        "alice": alice,
        "bob": bob,
        "alice_post": alice_post,
        "bob_post": bob_post,
        "bob_on_alice": bob_on_alice,
        "alice_on_bob": alice_on_bob,
        "bob_on_bob": bob_on_bob,
    }


def _no_dangling_references(stores) -> None:
    """Every stored document points at documents that still exist."""
    for post in stores.posts.posts.values():
        assert post.user_id in stores.users.users
    for comment in stores.comments.comments.values():
        assert comment.user_id in stores.users.users
        assert comment.post_id in stores.posts.posts
    for like in stores.likes.likes.values():
        assert like.user_id in stores.users.users
        if like.target.kind is TargetKind.POST:
            assert like.target.id in stores.posts.posts
        else:
            assert like.target.id in stores.comments.comments


class TestDeleteComment:
    @pytest.mark.asyncio
    async def test_removes_its_likes_only(self, cascade, stores, graph):
        result = await cascade.delete_comment(graph["bob_on_alice"])

        assert result.comments == 1
        assert result.likes == 1
        assert graph["bob_on_alice"].id not in stores.comments.comments
        assert len(stores.likes.likes) == 4
        _no_dangling_references(stores)


class TestDeletePost:
    @pytest.mark.asyncio
    async def test_removes_comments_and_likes(self, cascade, stores, graph):
        result = await cascade.delete_post(graph["bob_post"])

        assert result.posts == 1
        assert result.comments == 2
        # like on the post plus likes on both of its comments
        assert result.likes == 3
        assert list(stores.comments.comments) == [graph["bob_on_alice"].id]
        _no_dangling_references(stores)

    @pytest.mark.asyncio
    async def test_delete_posts(self, cascade, stores, graph):
        result = await cascade.delete_posts([graph["alice_post"], graph["bob_post"]])

        assert result.posts == 2
        assert stores.posts.posts == {}
        assert stores.comments.comments == {}
        assert stores.likes.likes == {}


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_removes_everything_the_user_owns(self, cascade, stores, graph):
        result = await cascade.delete_user(graph["alice"])

        assert result.users == 1
        assert graph["alice"].id not in stores.users.users
        assert "alice@example.com" not in stores.users.emails
        assert "Alice" not in stores.users.names
        assert list(stores.posts.posts) == [graph["bob_post"].id]
        assert list(stores.comments.comments) == [graph["bob_on_bob"].id]
        _no_dangling_references(stores)

    @pytest.mark.asyncio
    async def test_delete_all_users_empties_the_store(self, cascade, stores, graph):
        await cascade.delete_users([graph["alice"], graph["bob"]])

        assert stores.users.users == {}
        assert stores.posts.posts == {}
        assert stores.comments.comments == {}
        assert stores.likes.likes == {}

    @pytest.mark.asyncio
    async def test_sweeps_received_likes_missing_from_target_lookup(
        self, cascade, stores, graph
    ):
        stores.likes.list_by_target = AsyncMock(return_value=[])

        await cascade.delete_user(graph["alice"])

        assert not [
            like
            for like in stores.likes.likes.values()
            if like.receiver_id == graph["alice"].id
        ]


class TestDeleteAll:
    @pytest.mark.asyncio
    async def test_empties_every_store(self, cascade, stores, graph):
        result = await cascade.delete_all()

        assert result.users == 2
        assert result.posts == 2
        assert result.comments == 3
        assert result.likes == 5
        assert stores.users.users == {}
        assert stores.posts.posts == {}
        assert stores.comments.comments == {}
        assert stores.likes.likes == {}

    @pytest.mark.asyncio
    async def test_sweeps_content_whose_owner_is_gone(self, cascade, stores):
        ghost = uuid4()
        post = Post(user_id=ghost, title="left", content="behind")
        await stores.posts.insert(post)
        comment = Comment(post_id=uuid4(), user_id=ghost, content="stray")
        await stores.comments.insert(comment)
        await stores.likes.insert_if_absent(
            Like(ghost, ghost, TargetRef(TargetKind.POST, uuid4()))
        )

        result = await cascade.delete_all()

        assert result.users == 0
        assert (result.posts, result.comments, result.likes) == (1, 1, 1)
        assert stores.posts.posts == {}
        assert stores.comments.comments == {}
        assert stores.likes.likes == {}


class TestCascadeFailure:
    """Failures propagate and leave the parent in place."""

    @pytest.mark.asyncio
    async def test_like_delete_failure_propagates(self, cascade, stores, graph):
        stores.likes.delete_many = AsyncMock(side_effect=RuntimeError("store down"))

        with pytest.raises(RuntimeError, match="store down"):
            await cascade.delete_post(graph["alice_post"])

        assert graph["alice_post"].id in stores.posts.posts

    @pytest.mark.asyncio
    async def test_user_cascade_failure_propagates(self, cascade, stores, graph):
        stores.comments.delete = AsyncMock(side_effect=RuntimeError("store down"))

        with pytest.raises(RuntimeError):
            await cascade.delete_user(graph["bob"])

        assert graph["bob"].id in stores.users.users

    @pytest.mark.asyncio
    async def test_retry_after_failure_completes(self, cascade, stores, graph):
        original = stores.likes.delete_many
        stores.likes.delete_many = AsyncMock(side_effect=RuntimeError("store down"))
        with pytest.raises(RuntimeError):
            await cascade.delete_post(graph["bob_post"])

        stores.likes.delete_many = original
        await cascade.delete_post(graph["bob_post"])

        assert graph["bob_post"].id not in stores.posts.posts
        _no_dangling_references(stores)
