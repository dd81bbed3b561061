"""
Signed bearer tokens.

Tokens are stateless JWTs carrying the user ID (``sub``) and email. Their
validity depends only on the signature and expiry, so they cannot be revoked
before they expire.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID

import jwt

from taskmanager.core.config import Settings
from taskmanager.core.errors import InvalidTokenError, TokenExpiredError, UnauthorizedError
from taskmanager.models.base import utcnow
from taskmanager.models.user import Identity

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


class TokenService:
    """Issues and verifies HMAC-signed JWTs."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ValueError("Token signing secret is not configured. Set JWT_SECRET.")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in
        self._clock = clock

    def issue(self, user_id: UUID, email: str) -> str:
        """
        Create a signed token for a user.

        Args:
            user_id: User ID placed in the ``sub`` claim.
            email: User email.

        Returns:
            Encoded JWT.
        """
        issued_at = self._clock()
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """
        Verify a token and return the identity it carries.

        Only the configured algorithm is accepted, so tokens signed with a
        different algorithm or secret are rejected.

        Raises:
            TokenExpiredError: If the token is past its expiry.
            InvalidTokenError: If the signature or structure is invalid.
            UnauthorizedError: For any other verification failure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except (
            jwt.InvalidSignatureError,
            jwt.InvalidAlgorithmError,
            jwt.DecodeError,
        ) as e:
            logger.debug(f"Rejected malformed token: {e}")
            raise InvalidTokenError() from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token verification failed: {e}")
            raise UnauthorizedError("Token verification failed") from e

        try:
            return Identity(user_id=UUID(str(payload["sub"])), email=str(payload["email"]))
        except ValueError as e:
            raise UnauthorizedError("Token verification failed") from e

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        """Create a token service from application settings."""
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.auth.jwt_algorithm,
            expires_in=settings.auth.token_expires_in,
        )
