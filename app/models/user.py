"""Hardcoded login accounts for the mock authentication flow."""

from dataclasses import dataclass

# bcrypt hash of the string "password" (cost 10, $2a$ prefix).
_PASSWORD_HASH = "$2a$10$92IXUNpkjO0rOQ5byMi.Ye4oKoEa3Ro9llC/.og/at2.uheWG/igi"


@dataclass(frozen=True)
class AuthUser:
    """
    Login account, unrelated to the users served by /users.

    role: 'admin' or 'user'. Inactive accounts are refused with 403.
    """

    id: str
    user_name: str
    password_hash: str
    role: str
    is_active: bool = True


MOCK_AUTH_USERS: tuple[AuthUser, ...] = (
    AuthUser(id="1", user_name="admin", password_hash=_PASSWORD_HASH, role="admin"),
    AuthUser(id="2", user_name="user", password_hash=_PASSWORD_HASH, role="user"),
    AuthUser(id="3", user_name="locked", password_hash=_PASSWORD_HASH, role="user", is_active=False),
)


def find_by_user_name(user_name: str) -> AuthUser | None:
    return next((u for u in MOCK_AUTH_USERS if u.user_name == user_name), None)


def find_by_id(user_id: str) -> AuthUser | None:
    return next((u for u in MOCK_AUTH_USERS if u.id == user_id), None)
