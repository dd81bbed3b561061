"""
Authentication dependencies backed by signed bearer tokens.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskmanager.core.container import get_token_service_dep
from taskmanager.core.errors import UnauthorizedError
from taskmanager.models.user import Identity
from taskmanager.services.token_service import TokenService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service_dep),
) -> Identity:
    """
    Verify the bearer token and return the caller's identity.

    Raises:
        UnauthorizedError: If no token is presented.
        TokenExpiredError: If the token is past its expiry.
        InvalidTokenError: If the token is malformed or badly signed.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return token_service.verify(credentials.credentials)


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service_dep),
) -> Optional[Identity]:
    """Return the caller's identity if a valid token is presented, else None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return token_service.verify(credentials.credentials)
    except UnauthorizedError as e:
        logger.debug(f"Ignoring unusable optional token: {e.error_code}")
        return None
