from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(
    user_id: UUID,
    email: str,
    platform_role: str = "USER",
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Generate JWT access token

    Args:
        user_id: User UUID
        email: User email
        platform_role: USER or SUPER_ADMIN
        expires_delta: Token lifetime, JWT_EXPIRE_MINUTES by default

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=ApplicationConfig.JWT_EXPIRE_MINUTES)
    payload = {
        "user_id": str(user_id),
        "email": email,
        "platform_role": platform_role,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
        return payload
    except JWTError:
        return None
