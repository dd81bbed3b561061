"""
Tests for signed bearer tokens.
"""

from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from taskmanager.core.errors import (
    ErrorCode,
    InvalidTokenError,
    TokenExpiredError,
    UnauthorizedError,
)
from taskmanager.models.base import utcnow
from taskmanager.services.token_service import TokenService

SECRET = "token-tests-secret-with-at-least-32-bytes!"


class TestTokenService:
    """Tests for TokenService issue/verify."""

    def test_issue_and_verify(self) -> None:
        """Test a fresh token verifies to the same identity."""
        service = TokenService(secret=SECRET)
        user_id = uuid4()

        identity = service.verify(service.issue(user_id, "alice@example.com"))

        assert identity.user_id == user_id
        assert identity.email == "alice@example.com"

    def test_claims(self) -> None:
        """Test the token carries sub, email, iat and exp."""
        service = TokenService(secret=SECRET, expires_in=timedelta(minutes=30))
        token = service.issue(uuid4(), "alice@example.com")

        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert {"sub", "email", "iat", "exp"} <= payload.keys()
        assert payload["exp"] - payload["iat"] == 30 * 60

    def test_expired_token(self) -> None:
        """Test a token past its expiry is rejected as expired."""
        issued_at = utcnow() - timedelta(hours=2)
        service = TokenService(
            secret=SECRET,
            expires_in=timedelta(hours=1),
            clock=lambda: issued_at,
        )
        token = service.issue(uuid4(), "alice@example.com")

        with pytest.raises(TokenExpiredError) as exc_info:
            TokenService(secret=SECRET).verify(token)
        assert exc_info.value.error_code == ErrorCode.TOKEN_EXPIRED

    def test_wrong_secret(self) -> None:
        """Test a token signed with another secret is invalid."""
        other = TokenService(secret="another-secret-that-is-also-32-bytes-long")
        token = other.issue(uuid4(), "alice@example.com")

        with pytest.raises(InvalidTokenError):
            TokenService(secret=SECRET).verify(token)

    def test_garbage_token(self) -> None:
        """Test a non-JWT string is invalid."""
        with pytest.raises(InvalidTokenError) as exc_info:
            TokenService(secret=SECRET).verify("not-a-token")
        assert exc_info.value.status_code == 401

    def test_other_algorithm_rejected(self) -> None:
        """Test tokens signed with a different HMAC algorithm are rejected."""
        token = TokenService(secret=SECRET, algorithm="HS512").issue(
            uuid4(), "alice@example.com"
        )
        with pytest.raises(InvalidTokenError):
            TokenService(secret=SECRET, algorithm="HS256").verify(token)

    def test_missing_claim(self) -> None:
        """Test a correctly signed token without the email claim is refused."""
        now = utcnow()
        token = jwt.encode(
            {"sub": str(uuid4()), "iat": now, "exp": now + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError):
            TokenService(secret=SECRET).verify(token)

    def test_non_uuid_subject(self) -> None:
        """Test a subject that is not a user ID is refused."""
        now = utcnow()
        token = jwt.encode(
            {
                "sub": "12345",
                "email": "alice@example.com",
                "iat": now,
                "exp": now + timedelta(hours=1),
            },
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError):
            TokenService(secret=SECRET).verify(token)

    def test_empty_secret_rejected(self) -> None:
        """Test the service refuses to run without a secret."""
        with pytest.raises(ValueError):
            TokenService(secret="")
