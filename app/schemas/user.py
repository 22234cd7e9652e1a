"""Pydantic schemas for users: stored record, create/update bodies, list query, stats."""

from typing import Literal

from pydantic import EmailStr, Field, field_validator, model_validator

from app.schemas.envelope import CamelModel

UserRole = Literal["admin", "user", "moderator"]

USER_ROLES: tuple[str, ...] = ("admin", "user", "moderator")

UserSortField = Literal["name", "email", "role", "createdAt"]
SortOrder = Literal["asc", "desc"]

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
GENERATE_MAX_COUNT = 50


class User(CamelModel):
    """User record held in the in-memory store."""

    id: str = Field(..., description="Sequential id, e.g. user_1.")
    name: str
    email: str
    role: UserRole
    created_at: str = Field(..., description="ISO-8601 UTC timestamp.")
    updated_at: str = Field(..., description="ISO-8601 UTC timestamp.")


class UserCreate(CamelModel):
    """Body for POST /users."""

    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    role: UserRole = "user"


class UserUpdate(CamelModel):
    """Body for PUT /users/{id}; at least one field is required."""

    name: str | None = Field(default=None, min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr | None = None
    role: UserRole | None = None

    @field_validator("name", "email", "role", mode="before")
    @classmethod
    def reject_null(cls, v: object) -> object:
        """Omit a field to leave it unchanged; an explicit null is invalid."""
        if v is None:
            raise ValueError("must not be null")
        return v

    @model_validator(mode="after")
    def require_one_field(self) -> "UserUpdate":
        if not self.model_fields_set:
            raise ValueError("at least one of name, email or role must be provided")
        return self


class GenerateUsersRequest(CamelModel):
    """Body for POST /users/generate."""

    count: int = Field(..., ge=1, le=GENERATE_MAX_COUNT)


class RoleCounts(CamelModel):
    admin: int
    user: int
    moderator: int


class UserStats(CamelModel):
    """Payload of GET /users/stats."""

    total: int
    by_role: RoleCounts
