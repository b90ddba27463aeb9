from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from thoughtdump.api.v1.schemas.auth import (
    AuthResponse,
    PasswordResetRequest,
    ProfileUpdateRequest,
    SignInRequest,
    SignUpRequest,
)
from thoughtdump.utils.logging import get_logger
from thoughtdump.utils.validation import validate_password_strength

if TYPE_CHECKING:
    from fastapi import Request

    from thoughtdump.core.schemas.auth import AuthUser
    from thoughtdump.utils.rate_limit import LoginRateLimiter


logger = get_logger(__name__)

USERS_TABLE = "users"


class AuthService:
    """Authentication service wrapping Supabase Auth for sign-in and account settings."""

    def __init__(
        self,
        supabase_client: Any,
        rate_limiter: LoginRateLimiter | None = None,
        *,
        password_reset_redirect_url: str | None = None,
    ):
        self.supabase = supabase_client
        self.rate_limiter = rate_limiter
        self.password_reset_redirect_url = password_reset_redirect_url

    def _check_rate_limit(self, request: Request, operation: str) -> None:
        if self.rate_limiter is not None:
            self.rate_limiter.check(request, operation)

    @staticmethod
    def _to_response(resp: Any) -> AuthResponse:
        user_payload = {
            "id": str(resp.user.id),
            "email": resp.user.email or "",
        }
        return AuthResponse(
            access_token=resp.session.access_token,
            token_type="bearer",
            expires_in=resp.session.expires_in,
            refresh_token=resp.session.refresh_token,
            user=user_payload,
        )

    async def _ensure_user_row(self, user_id: str, email: str | None) -> None:
        """Make sure the public `users` table has a row for this account.

        Thoughts reference `users.id`, so inserts fail with a foreign key error
        for accounts that were never mirrored there. Failures are logged only.
        """
        try:
            await asyncio.to_thread(
                lambda: self.supabase.table(USERS_TABLE)
                .upsert({"id": user_id, "email": email}, on_conflict="id")
                .execute()
            )
        except Exception as err:
            logger.warning(
                "Failed to mirror user into users table",
                extra={"user_id": user_id, "error_type": type(err).__name__},
            )

    async def sign_up(self, request: Request, payload: SignUpRequest) -> AuthResponse:
        """Handle user signup with business logic."""
        self._check_rate_limit(request, "signup")

        is_valid_password, password_error = validate_password_strength(payload.password)
        if not is_valid_password:
            raise ValueError(password_error)

        email = payload.email.lower().strip()
        password = payload.password
        credentials: dict[str, Any] = {"email": email, "password": password}
        if payload.display_name:
            credentials["options"] = {"data": {"display_name": payload.display_name.strip()}}

        try:
            resp = await asyncio.to_thread(lambda: self.supabase.auth.sign_up(credentials))
        except Exception as err:
            error_msg = str(err).lower()

            logger.warning(
                "Sign up failed",
                extra={
                    "email": email,
                    "error_type": type(err).__name__,
                    "error_summary": error_msg[:100] if error_msg else "Unknown error",
                }
            )

            if "already registered" in error_msg or "already exists" in error_msg:
                raise ValueError("An account with this email already exists") from err
            elif "invalid email" in error_msg:
                raise ValueError("Invalid email format") from err
            elif "weak password" in error_msg:
                raise ValueError("Password does not meet security requirements") from err
            else:
                raise ValueError("Failed to create account. Please try again.") from err

        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Account created but session not established. Please confirm your email or sign in.")

        await self._ensure_user_row(str(resp.user.id), resp.user.email)
        logger.info("User signed up successfully", extra={"user_id": str(resp.user.id)})
        return self._to_response(resp)

    async def sign_in(self, request: Request, payload: SignInRequest) -> AuthResponse:
        """Handle user signin with business logic."""
        self._check_rate_limit(request, "signin")

        email = payload.email.lower().strip()
        password = payload.password

        if not email or not password:
            raise ValueError("Email and password are required")

        try:
            resp = await asyncio.to_thread(
                lambda: self.supabase.auth.sign_in_with_password({
                    "email": email,
                    "password": password,
                })
            )
        except Exception as err:
            error_msg = str(err).lower()

            logger.warning(
                "Sign in failed",
                extra={
                    "email": email,
                    "error_type": type(err).__name__,
                    "error_summary": error_msg[:100] if error_msg else "Unknown error",
                }
            )

            if "invalid login credentials" in error_msg or "invalid email or password" in error_msg:
                raise ValueError("Invalid email or password") from err
            elif "email not confirmed" in error_msg:
                raise ValueError("Please confirm your email address before signing in") from err
            elif "too many requests" in error_msg:
                raise ValueError("Too many signin attempts. Please try again later.") from err
            else:
                raise ValueError("Authentication service error. Please try again.") from err

        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Invalid email or password")

        await self._ensure_user_row(str(resp.user.id), resp.user.email)
        logger.info("User signed in successfully", extra={"user_id": str(resp.user.id)})
        return self._to_response(resp)

    async def sign_out(self, current_user: AuthUser) -> dict[str, str]:
        """Handle user signout with business logic."""
        try:
            await asyncio.to_thread(lambda: self.supabase.auth.sign_out())
            logger.info("User signed out successfully", extra={"user_id": str(current_user.id)})
        except Exception as err:
            logger.warning("Sign out failed", extra={"error": str(err), "user_id": str(current_user.id)})
        return {"message": "Signed out successfully"}

    async def reset_password(self, request: Request, payload: PasswordResetRequest) -> dict[str, str]:
        """Send a password reset email.

        The response is identical whether or not the address exists.
        """
        self._check_rate_limit(request, "reset-password")
        email = payload.email.lower().strip()
        options = {"redirect_to": self.password_reset_redirect_url} if self.password_reset_redirect_url else {}
        try:
            await asyncio.to_thread(
                lambda: self.supabase.auth.reset_password_for_email(email, options)
            )
        except Exception as err:
            logger.warning(
                "Password reset request failed",
                extra={"error_type": type(err).__name__, "error_summary": str(err)[:100]},
            )
        return {"message": "If an account exists for this email, a reset link has been sent"}

    async def update_profile(self, jwt: str, current_user: AuthUser, payload: ProfileUpdateRequest) -> dict[str, Any]:
        """Change email, display name and/or password of the signed-in user."""
        attributes: dict[str, Any] = {}
        if payload.email is not None:
            attributes["email"] = payload.email.lower().strip()
        if payload.display_name is not None:
            attributes["data"] = {"display_name": payload.display_name.strip()}
        if payload.password is not None:
            is_valid_password, password_error = validate_password_strength(payload.password)
            if not is_valid_password:
                raise ValueError(password_error)
            attributes["password"] = payload.password

        def _update() -> Any:
            # Bind the user's session so Supabase Auth knows whom to update
            self.supabase.auth.set_session(jwt, "")
            return self.supabase.auth.update_user(attributes)

        try:
            resp = await asyncio.to_thread(_update)
        except Exception as err:
            error_msg = str(err).lower()
            logger.warning(
                "Profile update failed",
                extra={
                    "user_id": str(current_user.id),
                    "error_type": type(err).__name__,
                    "error_summary": error_msg[:100] if error_msg else "Unknown error",
                }
            )
            if "already" in error_msg and "email" in error_msg:
                raise ValueError("An account with this email already exists") from err
            if "same" in error_msg and "password" in error_msg:
                raise ValueError("New password must be different from the old password") from err
            raise ValueError("Failed to update profile. Please try again.") from err

        user = getattr(resp, "user", None)
        metadata = getattr(user, "user_metadata", None) or {}
        logger.info("Profile updated", extra={"user_id": str(current_user.id), "fields": sorted(attributes)})
        return {
            "id": str(current_user.id),
            "email": (getattr(user, "email", None) or current_user.email),
            "display_name": metadata.get("display_name"),
            "email_change_pending": payload.email is not None and getattr(user, "email", None) != attributes.get("email"),
        }

    async def refresh(self, payload: Any) -> AuthResponse:
        """Exchange a refresh token for a new session."""
        refresh_token = getattr(payload, "refresh_token", None)
        if not refresh_token:
            raise ValueError("Refresh token is required")

        try:
            resp = await asyncio.to_thread(
                lambda: self.supabase.auth.refresh_session(refresh_token)
            )
        except Exception as err:
            error_msg = str(err).lower()

            logger.warning("Token refresh failed", extra={"error": error_msg[:100]})

            if "invalid" in error_msg or "expired" in error_msg:
                raise ValueError("Invalid or expired refresh token") from err
            else:
                raise ValueError("Failed to refresh token") from err

        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Invalid refresh token")

        return self._to_response(resp)
