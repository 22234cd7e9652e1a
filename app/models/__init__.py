"""In-memory account records."""

from app.models.user import MOCK_AUTH_USERS, AuthUser

__all__ = ["AuthUser", "MOCK_AUTH_USERS"]
