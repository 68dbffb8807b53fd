# venue_admin/core/security.py
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

import bcrypt
from jose import jwt, ExpiredSignatureError, JWTError

from venue_admin.core.config import settings

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt"""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    # accounts seeded without a real hash never match
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        return False


def _encode(subject: Union[int, str], token_type: str, lifetime: timedelta, **claims: Any) -> str:
    payload = {
        "sub": str(subject),
        "type": token_type,
        "exp": datetime.now(timezone.utc) + lifetime,
        **claims,
    }
    return jwt.encode(
        payload,
        settings.security.JWT_SECRET_KEY.get_secret_value(),
        algorithm=settings.security.JWT_ALGORITHM
    )


def create_access_token(subject: Union[int, str], expires_delta: Optional[timedelta] = None) -> str:
    """Short lived token sent as `Authorization: Bearer` on every admin request"""
    lifetime = expires_delta or timedelta(minutes=settings.security.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(subject, ACCESS_TOKEN, lifetime)


def create_refresh_token(subject: Union[int, str]) -> str:
    """Long lived token only accepted by /auth/refresh; `jti` keeps every issued token distinct"""
    lifetime = timedelta(days=settings.security.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(subject, REFRESH_TOKEN, lifetime, jti=secrets.token_urlsafe(32))


def decode_token(token: str, expected_type: Optional[str] = None) -> Dict[str, Any]:
    """Decode and validate a JWT, optionally pinning its `type` claim"""
    try:
        payload = jwt.decode(
            token,
            settings.security.JWT_SECRET_KEY.get_secret_value(),
            algorithms=[settings.security.JWT_ALGORITHM]
        )
    except ExpiredSignatureError:
        raise ValueError("Token expired")
    except JWTError:
        raise ValueError("Invalid token")

    if expected_type and payload.get("type") != expected_type:
        raise ValueError(f"Wrong token type, expected {expected_type}")
    return payload


def token_subject(payload: Dict[str, Any]) -> int:
    """User id carried in `sub`"""
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise ValueError("Invalid token payload")
