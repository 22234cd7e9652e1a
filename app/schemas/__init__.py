"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthTokens,
    AuthUserInfo,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    TokenPayload,
    ValidateResponse,
)
from app.schemas.book import Book, LocalizedText
from app.schemas.envelope import ApiResponse, FieldError, PaginatedResponse, Pagination
from app.schemas.health import HealthResponse
from app.schemas.profile import UpdateProfileRequest, UpdateProfileResponse
from app.schemas.user import (
    GenerateUsersRequest,
    User,
    UserCreate,
    UserRole,
    UserStats,
    UserUpdate,
)

__all__ = [
    "ApiResponse",
    "AuthTokens",
    "AuthUserInfo",
    "Book",
    "FieldError",
    "GenerateUsersRequest",
    "HealthResponse",
    "LocalizedText",
    "LoginRequest",
    "LoginResponse",
    "PaginatedResponse",
    "Pagination",
    "RefreshRequest",
    "TokenPayload",
    "UpdateProfileRequest",
    "UpdateProfileResponse",
    "User",
    "UserCreate",
    "UserRole",
    "UserStats",
    "UserUpdate",
    "ValidateResponse",
]
