"""
Registration, login and profile lookup.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from taskmanager.core.errors import ConflictError, InvalidCredentialsError, NotFoundError
from taskmanager.core.security import PasswordHasher
from taskmanager.models.base import utcnow, validate_input
from taskmanager.models.user import AuthResult, LoginRequest, RegisterRequest, User
from taskmanager.services.token_service import TokenService
from taskmanager.storage.base import UserStore

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


class AuthService:
    """
    Service for user registration and authentication.

    Login failures never reveal whether the email is registered: an unknown
    email and a wrong password produce the same error after the same amount
    of hashing work.
    """

    def __init__(
        self,
        user_store: UserStore,
        token_service: TokenService,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = user_store
        self._tokens = token_service
        self._hasher = password_hasher
        self._clock = clock

    async def register(self, data: RegisterRequest | Mapping[str, Any]) -> AuthResult:
        """
        Register a new user and issue a token.

        Raises:
            ValidationError: Naming the first invalid field.
            ConflictError: If the email is already registered.
        """
        request = validate_input(RegisterRequest, data)

        if await self._users.email_exists(request.email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        password_hash = await self._hasher.hash(request.password)
        try:
            user = await self._users.create(
                name=request.name,
                email=request.email,
                password_hash=password_hash,
                now=self._clock(),
            )
        except ConflictError as e:
            # Lost a race with a concurrent registration.
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e

        logger.info(f"Registered user {user.id}")
        return AuthResult(user=user, token=self._tokens.issue(user.id, user.email))

    async def login(self, data: LoginRequest | Mapping[str, Any]) -> AuthResult:
        """
        Authenticate with email and password.

        Raises:
            ValidationError: If email or password is missing or malformed.
            InvalidCredentialsError: If the email is unknown or the password is wrong.
        """
        request = validate_input(LoginRequest, data)

        credentials = await self._users.get_credentials(request.email)
        if credentials is None:
            await self._hasher.verify_dummy(request.password)
            raise InvalidCredentialsError()

        if not await self._hasher.verify(request.password, credentials.password_hash):
            raise InvalidCredentialsError()

        user = credentials.user
        return AuthResult(user=user, token=self._tokens.issue(user.id, user.email))

    async def get_profile(self, user_id: UUID) -> User:
        """
        Look up the user behind a verified token.

        Raises:
            NotFoundError: If the user no longer exists.
        """
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
