"""
Unit tests for the auth service, rate limiter and password validation.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from thoughtdump.api.v1.schemas.auth import (
    PasswordResetRequest,
    ProfileUpdateRequest,
    SignInRequest,
    SignUpRequest,
)
from thoughtdump.core.services.auth_service import AuthService
from thoughtdump.utils.rate_limit import LoginRateLimiter
from thoughtdump.utils.validation import validate_password_strength


def fake_request(ip="10.0.0.1"):
    return SimpleNamespace(client=SimpleNamespace(host=ip), headers={})


def auth_response(email="someone@example.com"):
    return SimpleNamespace(
        user=SimpleNamespace(id=uuid4(), email=email),
        session=SimpleNamespace(access_token="access", expires_in=3600, refresh_token="refresh"),
    )


@pytest.fixture
def supabase():
    return MagicMock()


class TestPasswordStrength:
    @pytest.mark.parametrize("password", ["short1", "password", "abcdefghij", "1234567890"])
    def test_weak(self, password):
        ok, message = validate_password_strength(password)
        assert not ok
        assert message

    def test_strong(self):
        assert validate_password_strength("correct-horse-42") == (True, None)


class TestLoginRateLimiter:
    def test_blocks_after_max_attempts(self):
        limiter = LoginRateLimiter(max_attempts=2, window_seconds=60)
        assert limiter.hit("signin:1", now=0) is False
        assert limiter.hit("signin:1", now=1) is False
        assert limiter.hit("signin:1", now=2) is True
        assert limiter.hit("signin:2", now=2) is False

    def test_window_expires(self):
        limiter = LoginRateLimiter(max_attempts=1, window_seconds=60)
        limiter.hit("k", now=0)
        assert limiter.hit("k", now=30) is True
        assert limiter.hit("k", now=61) is False

    def test_expired_identifiers_are_forgotten(self):
        limiter = LoginRateLimiter(max_attempts=3, window_seconds=60)
        limiter.hit("signin:10.0.0.1", now=0)
        limiter.hit("signin:10.0.0.2", now=50)

        limiter.seconds_until_reset("signin:10.0.0.1", now=100)

        assert "signin:10.0.0.1" not in limiter._attempts
        assert limiter._attempts["signin:10.0.0.2"] == [50]

    def test_disabled(self):
        limiter = LoginRateLimiter(max_attempts=0, window_seconds=60, enabled=False)
        assert limiter.hit("k") is False

    def test_check_raises_429_with_headers(self):
        limiter = LoginRateLimiter(max_attempts=1, window_seconds=300)
        limiter.check(fake_request(), "signin")
        with pytest.raises(HTTPException) as exc_info:
            limiter.check(fake_request(), "signin")
        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["RateLimit-Limit"] == "1"
        assert int(exc_info.value.headers["Retry-After"]) >= 1


class TestAuthService:
    async def test_sign_in_success(self, supabase):
        supabase.auth.sign_in_with_password.return_value = auth_response()
        service = AuthService(supabase)

        resp = await service.sign_in(fake_request(), SignInRequest(email="Someone@Example.com", password="secret-123"))

        assert resp.access_token == "access"
        assert resp.user["email"] == "someone@example.com"
        supabase.auth.sign_in_with_password.assert_called_once_with(
            {"email": "someone@example.com", "password": "secret-123"}
        )
        supabase.table.assert_called_with("users")

    async def test_sign_in_invalid_credentials(self, supabase):
        supabase.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
        service = AuthService(supabase)

        with pytest.raises(ValueError, match="Invalid email or password"):
            await service.sign_in(fake_request(), SignInRequest(email="a@example.com", password="secret-123"))

    async def test_sign_in_is_rate_limited(self, supabase):
        supabase.auth.sign_in_with_password.return_value = auth_response()
        service = AuthService(supabase, LoginRateLimiter(max_attempts=1, window_seconds=300))
        payload = SignInRequest(email="a@example.com", password="secret-123")

        await service.sign_in(fake_request(), payload)
        with pytest.raises(HTTPException):
            await service.sign_in(fake_request(), payload)

    async def test_sign_up_weak_password(self, supabase):
        service = AuthService(supabase)
        with pytest.raises(ValueError):
            await service.sign_up(fake_request(), SignUpRequest(email="a@example.com", password="password"))
        supabase.auth.sign_up.assert_not_called()

    async def test_sign_up_passes_display_name(self, supabase):
        supabase.auth.sign_up.return_value = auth_response()
        service = AuthService(supabase)

        await service.sign_up(
            fake_request(),
            SignUpRequest(email="a@example.com", password="secret-123", display_name=" Sam "),
        )

        credentials = supabase.auth.sign_up.call_args.args[0]
        assert credentials["options"] == {"data": {"display_name": "Sam"}}

    async def test_sign_up_existing_account(self, supabase):
        supabase.auth.sign_up.side_effect = Exception("User already registered")
        service = AuthService(supabase)
        with pytest.raises(ValueError, match="already exists"):
            await service.sign_up(fake_request(), SignUpRequest(email="a@example.com", password="secret-123"))

    async def test_reset_password_never_leaks(self, supabase):
        supabase.auth.reset_password_for_email.side_effect = Exception("User not found")
        service = AuthService(supabase, password_reset_redirect_url="https://app.example.com/reset")

        result = await service.reset_password(fake_request(), PasswordResetRequest(email="a@example.com"))

        assert "reset link" in result["message"]
        supabase.auth.reset_password_for_email.assert_called_once_with(
            "a@example.com", {"redirect_to": "https://app.example.com/reset"}
        )

    async def test_update_profile(self, supabase, user):
        supabase.auth.update_user.return_value = SimpleNamespace(
            user=SimpleNamespace(email=user.email, user_metadata={"display_name": "Sam"})
        )
        service = AuthService(supabase)

        result = await service.update_profile("a.b.c", user, ProfileUpdateRequest(display_name="Sam"))

        supabase.auth.set_session.assert_called_once_with("a.b.c", "")
        supabase.auth.update_user.assert_called_once_with({"data": {"display_name": "Sam"}})
        assert result["display_name"] == "Sam"
        assert result["email_change_pending"] is False

    def test_profile_update_requires_a_field(self):
        with pytest.raises(ValueError):
            ProfileUpdateRequest()

    async def test_refresh_requires_token(self, supabase):
        service = AuthService(supabase)
        with pytest.raises(ValueError):
            await service.refresh(SimpleNamespace(refresh_token=""))
