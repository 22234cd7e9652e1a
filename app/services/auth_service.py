"""
Mock authentication: three hardcoded accounts, bcrypt check, JWT access/refresh pairs.

Login takes an expectedResult status code. Known codes other than 200 short-circuit
to a canned failure with that status so clients can exercise every outcome; 200 and
unlisted codes run the real credential check. Settings.AUTH_ALLOW_FORCED_RESULTS=False
turns the short-circuit off.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jwt
from fastapi import status

from app.core.config import Settings, get_settings
from app.core.errors import ApiError
from app.core.security import create_token_pair, decode_token, verify_password
from app.models.user import AuthUser, find_by_id, find_by_user_name
from app.schemas.auth import (
    AuthTokens,
    AuthUserInfo,
    LoginRequest,
    LoginResponse,
    TokenPayload,
)
from app.services.event_bus import EventType, event_bus

if TYPE_CHECKING:
    from app.core.context import RequestContext

logger = logging.getLogger(__name__)

BAD_REQUEST = "Invalid request"
INVALID_CREDENTIALS = "Invalid username or password"
ACCOUNT_LOCKED = "Account is locked"
USER_NOT_FOUND = "User not found"
SERVER_ERROR = "Authentication service error"
SERVICE_UNAVAILABLE = "Service temporarily unavailable"

# expectedResult -> canned failure message.
FORCED_RESULTS: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: INVALID_CREDENTIALS,
    status.HTTP_403_FORBIDDEN: ACCOUNT_LOCKED,
    status.HTTP_404_NOT_FOUND: USER_NOT_FOUND,
    status.HTTP_500_INTERNAL_SERVER_ERROR: SERVER_ERROR,
    status.HTTP_503_SERVICE_UNAVAILABLE: SERVICE_UNAVAILABLE,
}


class AuthError(ApiError):
    """Login, refresh or validation failure carrying the HTTP status to return."""


def _user_info(user: AuthUser) -> AuthUserInfo:
    return AuthUserInfo(id=user.id, user_name=user.user_name, role=user.role)


def _issue_tokens(user: AuthUser, settings: Settings) -> AuthTokens:
    return create_token_pair(user.id, user.user_name, user.role, settings)


def _check_credentials(
    user_name: str,
    password: str,
    context: RequestContext | None,
    settings: Settings,
) -> LoginResponse:
    user = find_by_user_name(user_name)
    if user is None:
        raise AuthError(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)
    if not user.is_active:
        raise AuthError(status.HTTP_403_FORBIDDEN, ACCOUNT_LOCKED)
    if not verify_password(password, user.password_hash):
        raise AuthError(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS)

    tokens = _issue_tokens(user, settings)
    event_bus.emit(
        EventType.AUTH_LOGIN,
        {"userId": user.id, "userName": user.user_name, "role": user.role},
        context,
    )
    logger.info(
        "User logged in: %s",
        user.user_name,
        extra={"operation": "login_success", "user_id": user.id},
    )
    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=_user_info(user),
    )


def authenticate(
    body: LoginRequest,
    context: RequestContext | None = None,
    settings: Settings | None = None,
) -> LoginResponse:
    """
    Run the login flow for body.

    Returns the token pair on success; raises AuthError with the status to send otherwise.
    """
    settings = settings or get_settings()
    forced = FORCED_RESULTS.get(body.expected_result)
    if forced is not None and settings.AUTH_ALLOW_FORCED_RESULTS:
        logger.info(
            "Login forced to %d for %s",
            body.expected_result,
            body.user_name,
            extra={"operation": "login_forced"},
        )
        raise AuthError(body.expected_result, forced)
    return _check_credentials(body.user_name, body.password, context, settings)


def refresh_tokens(refresh_token: str, settings: Settings | None = None) -> AuthTokens:
    """Issue a new pair from a valid refresh token whose account still exists and is active."""
    settings = settings or get_settings()
    try:
        payload = decode_token(refresh_token, "refresh", settings)
    except jwt.PyJWTError as e:
        logger.info("Refresh rejected: %s", e, extra={"operation": "token_refresh"})
        raise AuthError(status.HTTP_401_UNAUTHORIZED, "Invalid or expired refresh token") from e
    user = find_by_id(str(payload.get("userId", "")))
    if user is None or not user.is_active:
        raise AuthError(status.HTTP_401_UNAUTHORIZED, "Invalid or expired refresh token")
    return _issue_tokens(user, settings)


def verify_access_token(token: str, settings: Settings | None = None) -> TokenPayload:
    """Decode an access token; refresh tokens and bad signatures raise AuthError(401)."""
    try:
        claims = decode_token(token, "access", settings)
        return TokenPayload.model_validate(claims)
    except (jwt.PyJWTError, ValueError) as e:
        raise AuthError(status.HTTP_401_UNAUTHORIZED, "Invalid or expired token") from e
