from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, model_validator


class SignInRequest(BaseModel):
    """Request to sign in with email and password."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="User's password")


class SignUpRequest(BaseModel):
    """Request to sign up with email and password."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="User's password")
    display_name: str | None = Field(default=None, max_length=100, description="Name shown in the app")


class PasswordResetRequest(BaseModel):
    email: EmailStr = Field(..., description="Address to send the reset link to")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Account settings change; at least one field must be set."""

    email: EmailStr | None = None
    display_name: str | None = Field(default=None, max_length=100)
    password: str | None = Field(default=None, min_length=8)

    @model_validator(mode="after")
    def require_one_field(self) -> ProfileUpdateRequest:
        if self.email is None and self.display_name is None and self.password is None:
            raise ValueError("Nothing to update")
        return self


class AuthResponse(BaseModel):
    """Response containing user session and access token."""

    access_token: str = Field(..., description="JWT access token for API calls")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    refresh_token: str | None = Field(default=None, description="Refresh token for token renewal")
    user: dict = Field(..., description="User information (id, email)")
