"""Password hashing and JWT creation/verification for the mock login flow."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import Settings, get_settings
from app.schemas.auth import AuthTokens, TokenType

# Bcrypt cost (rounds) for newly hashed passwords.
BCRYPT_ROUNDS = 10


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password. bcrypt only reads the first 72 bytes."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash ($2a$ and $2b$ both accepted)."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _secret_for(token_type: TokenType, settings: Settings) -> str:
    if token_type == "access":
        return settings.JWT_ACCESS_SECRET.get_secret_value()
    return settings.JWT_REFRESH_SECRET.get_secret_value()


def create_token(
    user_id: str,
    user_name: str,
    role: str,
    token_type: TokenType,
    settings: Settings | None = None,
) -> str:
    """Sign one token; access and refresh tokens use different secrets and lifetimes."""
    settings = settings or get_settings()
    now = datetime.now(UTC)
    if token_type == "access":
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    else:
        expire = now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    payload: dict[str, Any] = {
        "userId": user_id,
        "userName": user_name,
        "role": role,
        "type": token_type,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(
        payload,
        _secret_for(token_type, settings),
        algorithm=settings.JWT_ALGORITHM,
    )


def create_token_pair(
    user_id: str, user_name: str, role: str, settings: Settings | None = None
) -> AuthTokens:
    return AuthTokens(
        access_token=create_token(user_id, user_name, role, "access", settings),
        refresh_token=create_token(user_id, user_name, role, "refresh", settings),
    )


def decode_token(
    token: str, token_type: TokenType, settings: Settings | None = None
) -> dict[str, Any]:
    """
    Decode and validate a JWT of the given type; return its claims.
    Raises jwt.PyJWTError on a bad signature, expiry, or a type mismatch.
    """
    settings = settings or get_settings()
    payload = jwt.decode(
        token,
        _secret_for(token_type, settings),
        algorithms=[settings.JWT_ALGORITHM],
    )
    if payload.get("type") != token_type:
        raise jwt.InvalidTokenError(f"expected a {token_type} token")
    return payload
