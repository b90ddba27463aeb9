from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request, status

from thoughtdump.api.v1.schemas.auth import (
    AuthResponse,
    PasswordResetRequest,
    ProfileUpdateRequest,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
)
from thoughtdump.dependencies import (
    get_auth_service,
    get_bearer_token,
    get_current_user,
)
from thoughtdump.utils.logging import get_logger

if TYPE_CHECKING:
    from thoughtdump.core.schemas.auth import AuthUser
    from thoughtdump.core.services.auth_service import AuthService

logger = get_logger(__name__)

T = TypeVar("T")

router = APIRouter(
    responses={
        400: {"description": "Rejected credentials or input"},
        401: {"description": "Missing or invalid bearer token"},
        429: {"description": "Too many attempts from this address"},
    }
)


async def _guarded(operation: str, call: Awaitable[T]) -> T:
    """Await an auth service call, mapping ValueError to 400 and anything unexpected to 500.

    HTTPExceptions raised by the rate limiter pass through untouched.
    """
    try:
        return await call
    except HTTPException:
        raise
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    except Exception as err:
        logger.error(f"Unexpected error during {operation}", extra={"error_type": type(err).__name__})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from err


@router.post("/signup", response_model=AuthResponse)
async def sign_up(
    request: Request,
    payload: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Create an account; display name is optional."""
    return await _guarded("signup", auth_service.sign_up(request, payload))


@router.post("/signin", response_model=AuthResponse)
async def sign_in(
    request: Request,
    payload: SignInRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    return await _guarded("signin", auth_service.sign_in(request, payload))


@router.post("/signout")
async def sign_out(
    current_user: AuthUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    return await auth_service.sign_out(current_user)


@router.get("/validate")
async def validate_token(current_user: AuthUser = Depends(get_current_user)) -> dict[str, Any]:
    """Who the bearer token belongs to."""
    return current_user.model_dump(mode="json")


@router.post("/reset-password")
async def reset_password(
    request: Request,
    payload: PasswordResetRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    return await _guarded("password reset", auth_service.reset_password(request, payload))


@router.patch("/profile")
async def update_profile(
    payload: ProfileUpdateRequest,
    jwt: str = Depends(get_bearer_token),
    current_user: AuthUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Change email, display name or password of the signed-in account."""
    return await _guarded("profile update", auth_service.update_profile(jwt, current_user, payload))


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(
    payload: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    return await _guarded("token refresh", auth_service.refresh(payload))
