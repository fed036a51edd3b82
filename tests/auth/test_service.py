"""Tests for AuthService signup, login and account deletion."""

from uuid import uuid4

import pytest

from postboard.auth.security import InvalidTokenError, verify_token
from postboard.auth.service import (
    AuthError,
    AuthService,
    InvalidCredentialsError,
    UserExistsError,
    UserNotFoundError,
)
from postboard.comments.models import Comment
from postboard.likes.models import Like, TargetKind, TargetRef
from postboard.posts.models import Post
from tests.conftest import PASSWORD


@pytest.fixture
def auth_service(stores, cascade) -> AuthService:
    return AuthService(stores.users, cascade)


async def _signup(auth_service: AuthService, email: str, name: str) -> str:
    return await auth_service.signup(email, name, PASSWORD, PASSWORD)


class TestSignup:
    """Tests for signup validation order and uniqueness."""

    @pytest.mark.asyncio
    async def test_signup_returns_token_for_new_user(self, auth_service, stores):
        token = await _signup(auth_service, "Alice@Example.com", " Alice ")

        user = await stores.users.get_by_email("alice@example.com")
        assert user is not None
        assert user.name == "Alice"
        assert user.password_hash != PASSWORD
        assert verify_token(token) == user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,name,password,confirm,message",
        [
            (
                "a@example.com",
                "Alice",
                "Secret123",
                "Secret124",
                "Invalid request: passwords don't match.",
            ),
            (
                None,
                "Alice",
                "Secret123",
                "Secret123",
                "Invalid request, must supply a name, an email and a password.",
            ),
            (
                "a@example.com",
                "",
                "Secret123",
                "Secret123",
                "Invalid request, must supply a name, an email and a password.",
            ),
            (
                "not-an-email",
                "Alice",
                "Secret123",
                "Secret123",
                "Must submit a valid email address.",
            ),
            (
                "a@example.com",
                "Alice",
                "secret",
                "secret",
                "Passwords must contain at least 6 characters and should contain "
                "an uppercase, lowercase and numeric value.",
            ),
            (
                "a@example.com",
                "A",
                "Secret123",
                "Secret123",
                "Name must be between 2 and 50 characters.",
            ),
        ],
    )
    async def test_rejections(
        self, auth_service, stores, email, name, password, confirm, message
    ):
        with pytest.raises(AuthError) as exc_info:
            await auth_service.signup(email, name, password, confirm)

        assert exc_info.value.message == message
        assert stores.users.users == {}

    @pytest.mark.asyncio
    async def test_mismatch_reported_before_missing_fields(self, auth_service):
        with pytest.raises(AuthError) as exc_info:
            await auth_service.signup(None, None, "Secret123", None)
        assert exc_info.value.message == "Invalid request: passwords don't match."

    @pytest.mark.asyncio
    async def test_duplicate_email(self, auth_service):
        await _signup(auth_service, "alice@example.com", "Alice")

        with pytest.raises(UserExistsError) as exc_info:
            await _signup(auth_service, "ALICE@example.com", "Alicia")

        assert exc_info.value.message == "Email address is already in use."
        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_duplicate_name_releases_email_claim(self, auth_service, stores):
        await _signup(auth_service, "alice@example.com", "Alice")

        with pytest.raises(UserExistsError) as exc_info:
            await _signup(auth_service, "other@example.com", "Alice")

        assert exc_info.value.message == "Name is already in use."
        assert "other@example.com" not in stores.users.emails
        # The email is free again for a later signup
        await _signup(auth_service, "other@example.com", "Other")


class TestLogin:
    """Tests for login."""

    @pytest.mark.asyncio
    async def test_login_returns_token(self, auth_service, stores):
        await _signup(auth_service, "alice@example.com", "Alice")
        user = await stores.users.get_by_email("alice@example.com")

        token = await auth_service.login(" Alice@example.com", PASSWORD)

        assert verify_token(token) == user.id

    @pytest.mark.asyncio
    async def test_missing_fields(self, auth_service):
        with pytest.raises(AuthError) as exc_info:
            await auth_service.login("alice@example.com", None)
        assert exc_info.value.message == "Please provide an email and password."

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_the_same(
        self, auth_service
    ):
        await _signup(auth_service, "alice@example.com", "Alice")

        with pytest.raises(InvalidCredentialsError) as unknown:
            await auth_service.login("nobody@example.com", PASSWORD)
        with pytest.raises(InvalidCredentialsError) as wrong:
            await auth_service.login("alice@example.com", "Wrong1234")

        assert unknown.value.message == wrong.value.message == "Invalid credentials."
        assert unknown.value.code == wrong.value.code


class TestAuthenticateToken:
    @pytest.mark.asyncio
    async def test_resolves_user_without_credentials(self, auth_service):
        token = await _signup(auth_service, "alice@example.com", "Alice")

        user = await auth_service.authenticate_token(token)

        assert user.name == "Alice"
        assert "password_hash" not in user.model_dump()

    @pytest.mark.asyncio
    async def test_token_for_deleted_user_is_invalid(self, auth_service, stores):
        token = await _signup(auth_service, "alice@example.com", "Alice")
        await auth_service.delete_user(verify_token(token))

        with pytest.raises(InvalidTokenError):
            await auth_service.authenticate_token(token)


class TestDeleteUser:
    """Account deletion runs the full cascade."""

    @pytest.mark.asyncio
    async def test_delete_user_removes_everything_owned(self, auth_service, stores):
        alice_id = verify_token(
            await _signup(auth_service, "alice@example.com", "Alice")
        )
        bob_id = verify_token(await _signup(auth_service, "bob@example.com", "Bob"))

        alice_post = Post(user_id=alice_id, title="Hello", content="World")
        bob_post = Post(user_id=bob_id, title="Bob", content="Post")
        await stores.posts.insert(alice_post)
        await stores.posts.insert(bob_post)
        bob_comment = Comment(post_id=alice_post.id, user_id=bob_id, content="Hi")
        alice_comment = Comment(post_id=bob_post.id, user_id=alice_id, content="Yo")
        await stores.comments.insert(bob_comment)
        await stores.comments.insert(alice_comment)
        await stores.likes.insert_if_absent(
            Like(bob_id, alice_id, TargetRef(TargetKind.POST, alice_post.id))
        )
        await stores.likes.insert_if_absent(
            Like(alice_id, bob_id, TargetRef(TargetKind.POST, bob_post.id))
        )

        result = await auth_service.delete_user(alice_id)

        assert result.users == 1
        assert result.posts == 1
        assert result.comments == 2
        assert result.likes == 2
        assert await stores.users.get_by_id(alice_id) is None
        assert await stores.users.get_by_email("alice@example.com") is None
        assert list(stores.posts.posts) == [bob_post.id]
        assert stores.comments.comments == {}
        assert stores.likes.likes == {}

    @pytest.mark.asyncio
    async def test_delete_unknown_user(self, auth_service):
        with pytest.raises(UserNotFoundError):
            await auth_service.delete_user(uuid4())

    @pytest.mark.asyncio
    async def test_delete_all_users(self, auth_service, stores):
        await _signup(auth_service, "alice@example.com", "Alice")
        await _signup(auth_service, "bob@example.com", "Bob")

        result = await auth_service.delete_users()

        assert result.users == 2
        assert stores.users.users == {}
        assert stores.users.emails == {}
        assert stores.users.names == {}
