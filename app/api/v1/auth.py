"""Mock JWT login, refresh, logout and token validation."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.deps import ok
from app.core.context import RequestContextDep
from app.schemas.auth import (
    AuthTokens,
    AuthUserInfo,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    ValidateResponse,
)
from app.schemas.envelope import ApiResponse
from app.services.auth_service import AuthError, authenticate, refresh_tokens, verify_access_token
from app.services.event_bus import EventType, event_bus

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/login", response_model=ApiResponse[LoginResponse], response_model_exclude_none=True)
def login(body: LoginRequest, context: RequestContextDep) -> Any:
    """
    Authenticate against the mock accounts; returns an access and a refresh token.

    expectedResult other than 200 may force a failure status (see auth_service).
    Send the access token as: Authorization: Bearer <accessToken>
    """
    attempt = {"userName": body.user_name, "expectedResult": body.expected_result}
    try:
        result = authenticate(body, context)
    except AuthError:
        event_bus.emit(EventType.AUTH_ATTEMPT, {**attempt, "success": False}, context)
        raise
    event_bus.emit(EventType.AUTH_ATTEMPT, {**attempt, "success": True}, context)
    return ok(context, result, "Login successful")


@router.post("/refresh", response_model=ApiResponse[AuthTokens], response_model_exclude_none=True)
def refresh(
    context: RequestContextDep,
    body: Annotated[RefreshRequest | None, Body()] = None,
) -> Any:
    """Exchange a refresh token for a new token pair."""
    if body is None or not body.refresh_token:
        raise AuthError(status.HTTP_400_BAD_REQUEST, "Refresh token is required")
    tokens = refresh_tokens(body.refresh_token)
    return ok(context, tokens, "Tokens refreshed successfully")


@router.post("/logout", response_model=ApiResponse[None], response_model_exclude_none=True)
def logout(context: RequestContextDep) -> Any:
    """Tokens stay valid until they expire; this only records the event."""
    event_bus.emit(EventType.AUTH_LOGOUT, {"userId": context.user_id}, context)
    return ok(context, message="Logout successful")


@router.get("/validate", response_model=ApiResponse[ValidateResponse], response_model_exclude_none=True)
def validate(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    context: RequestContextDep,
) -> Any:
    """Check a Bearer access token and return the user it was issued to."""
    if credentials is None:
        raise AuthError(status.HTTP_401_UNAUTHORIZED, "Authorization header is required")
    payload = verify_access_token(credentials.credentials)
    user = AuthUserInfo(id=payload.user_id, user_name=payload.user_name, role=payload.role)
    return ok(context, ValidateResponse(valid=True, user=user))
