"""
Authentication endpoints: registration, login and profile.
"""

from fastapi import APIRouter, Depends, status

from taskmanager.api.v1.dependencies.auth import get_current_identity
from taskmanager.api.v1.schemas.common import ApiResponse
from taskmanager.core.container import get_auth_service_dep
from taskmanager.models.user import AuthResult, Identity, LoginRequest, RegisterRequest, User
from taskmanager.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[AuthResult],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
)
async def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service_dep),
) -> ApiResponse[AuthResult]:
    """Create an account and return the user with a bearer token."""
    result = await auth_service.register(body)
    return ApiResponse(data=result, message="User registered successfully")


@router.post(
    "/login",
    response_model=ApiResponse[AuthResult],
    response_model_exclude_none=True,
    summary="Login",
)
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service_dep),
) -> ApiResponse[AuthResult]:
    """
    Exchange email and password for a bearer token.

    Unknown emails and wrong passwords produce the same response.
    """
    result = await auth_service.login(body)
    return ApiResponse(data=result, message="Login successful")


@router.get(
    "/profile",
    response_model=ApiResponse[User],
    response_model_exclude_none=True,
    summary="Current user",
)
async def profile(
    identity: Identity = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service_dep),
) -> ApiResponse[User]:
    """Return the authenticated user's profile."""
    user = await auth_service.get_profile(identity.user_id)
    return ApiResponse(data=user)
