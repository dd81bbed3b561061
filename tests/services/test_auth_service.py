"""
Tests for registration, login and profile lookup.
"""

from uuid import uuid4

import pytest

from taskmanager.core.errors import (
    ConflictError,
    ErrorCode,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from taskmanager.core.security import PasswordHasher
from taskmanager.services.auth_service import AuthService
from taskmanager.services.token_service import TokenService
from taskmanager.storage.users import SqlUserStore

ALICE = {"name": "Alice", "email": "alice@example.com", "password": "secret123"}


class TestRegister:
    """Tests for AuthService.register."""

    @pytest.mark.asyncio
    async def test_register_returns_user_and_token(
        self, auth_service: AuthService, token_service: TokenService
    ) -> None:
        """Test the issued token verifies to the new user."""
        result = await auth_service.register(ALICE)

        assert result.user.name == "Alice"
        assert result.user.email == "alice@example.com"
        identity = token_service.verify(result.token)
        assert identity.user_id == result.user.id
        assert identity.email == result.user.email

    @pytest.mark.asyncio
    async def test_email_is_normalized(self, auth_service: AuthService) -> None:
        """Test emails are stored lowercase and names trimmed."""
        result = await auth_service.register(
            {"name": "  Bob  ", "email": "Bob@Example.COM", "password": "secret123"}
        )
        assert result.user.email == "bob@example.com"
        assert result.user.name == "Bob"

    @pytest.mark.asyncio
    async def test_password_is_hashed(
        self,
        auth_service: AuthService,
        user_store: SqlUserStore,
        password_hasher: PasswordHasher,
    ) -> None:
        """Test the stored value is a bcrypt hash of the password."""
        await auth_service.register(ALICE)

        credentials = await user_store.get_credentials("alice@example.com")
        assert credentials is not None
        assert credentials.password_hash != ALICE["password"]
        assert credentials.password_hash.startswith("$2")
        assert await password_hasher.verify(ALICE["password"], credentials.password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_email_any_casing(self, auth_service: AuthService) -> None:
        """Test a second registration with the same email conflicts."""
        await auth_service.register(ALICE)

        with pytest.raises(ConflictError) as exc_info:
            await auth_service.register({**ALICE, "email": "ALICE@example.com"})
        assert exc_info.value.error_code == ErrorCode.DUPLICATE_RESOURCE
        assert exc_info.value.message == "User with this email already exists"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"name": "A"}, "name"),
            ({"name": "   "}, "name"),
            ({"name": "x" * 101}, "name"),
            ({"email": "not-an-email"}, "email"),
            ({"password": "12345"}, "password"),
            ({"password": "x" * 101}, "password"),
        ],
    )
    async def test_invalid_input(
        self, auth_service: AuthService, overrides: dict, field: str
    ) -> None:
        """Test each constraint is reported against its field."""
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register({**ALICE, **overrides})
        assert exc_info.value.field == field
        assert field in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_field(self, auth_service: AuthService) -> None:
        """Test a missing field is named in the error."""
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register({"email": "alice@example.com", "password": "secret123"})
        assert exc_info.value.field == "name"


class TestLogin:
    """Tests for AuthService.login."""

    @pytest.mark.asyncio
    async def test_login_success(
        self, auth_service: AuthService, token_service: TokenService
    ) -> None:
        """Test correct credentials return the user and a token."""
        registered = await auth_service.register(ALICE)

        result = await auth_service.login(
            {"email": "Alice@Example.com", "password": "secret123"}
        )

        assert result.user.id == registered.user.id
        assert token_service.verify(result.token).user_id == registered.user.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_match(
        self, auth_service: AuthService
    ) -> None:
        """Test both failure modes raise the same error and message."""
        await auth_service.register(ALICE)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await auth_service.login({"email": "alice@example.com", "password": "wrong-pass"})
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await auth_service.login({"email": "nobody@example.com", "password": "secret123"})

        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.error_code == unknown_email.value.error_code
        assert wrong_password.value.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_missing_password(self, auth_service: AuthService) -> None:
        """Test login without a password is a validation error."""
        with pytest.raises(ValidationError):
            await auth_service.login({"email": "alice@example.com"})


class TestGetProfile:
    """Tests for AuthService.get_profile."""

    @pytest.mark.asyncio
    async def test_profile(self, auth_service: AuthService) -> None:
        """Test the profile matches the registered user."""
        registered = await auth_service.register(ALICE)

        user = await auth_service.get_profile(registered.user.id)

        assert user == registered.user

    @pytest.mark.asyncio
    async def test_unknown_user(self, auth_service: AuthService) -> None:
        """Test a deleted or unknown user is not found."""
        with pytest.raises(NotFoundError):
            await auth_service.get_profile(uuid4())
