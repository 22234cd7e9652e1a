"""Request/response schemas for auth endpoints."""

from typing import Literal

from pydantic import Field

from app.schemas.envelope import CamelModel

TokenType = Literal["access", "refresh"]


class LoginRequest(CamelModel):
    """
    Credentials for login.

    expected_result asks the mock service for a specific HTTP outcome (see auth_service).
    """

    user_name: str = Field(..., min_length=3, max_length=50, description="Username")
    password: str = Field(..., min_length=1, max_length=100, description="Password")
    expected_result: int = Field(
        ..., ge=200, le=599, description="HTTP status the caller expects (test scaffold)."
    )


class RefreshRequest(CamelModel):
    refresh_token: str | None = None


class AuthUserInfo(CamelModel):
    """Public view of a mock auth user."""

    id: str
    user_name: str
    role: str


class AuthTokens(CamelModel):
    access_token: str
    refresh_token: str


class LoginResponse(AuthTokens):
    """Token pair plus the authenticated user."""

    user: AuthUserInfo


class ValidateResponse(CamelModel):
    valid: bool
    user: AuthUserInfo


class TokenPayload(CamelModel):
    """Decoded JWT claims."""

    user_id: str
    user_name: str
    role: str
    type: TokenType
    iat: int
    exp: int
