# venue_admin/services/auth_service.py
import asyncio
import time
from typing import Tuple, Dict, Optional
from datetime import datetime, timedelta, timezone
from venue_admin.core.security import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_token,
    token_subject,
)
from venue_admin.repositories.user_repository import UserRepository
from venue_admin.core.schemas.auth import Token
from venue_admin.core.config import settings
from venue_admin.core.exceptions import (
    AuthenticationError,
    ValidationError,
    RateLimitError
)
from venue_admin.models.user import User, UserRole


class RateLimiter:
    """In-memory brute force guard keyed by email or IP"""
    def __init__(self, max_attempts: int = 5, window: timedelta = timedelta(minutes=5), block_duration: timedelta = timedelta(minutes=15)):
        self.attempts: Dict[str, list] = {}
        self.max_attempts = max_attempts
        self.block_duration = block_duration
        self.window = window

    async def check_rate_limit(self, identifier: str) -> None:
        now = datetime.now(timezone.utc)

        if identifier in self.attempts:
            self.attempts[identifier] = [
                ts for ts in self.attempts[identifier]
                if ts > now - self.window
            ]

        attempts = self.attempts.get(identifier, [])
        if len(attempts) >= self.max_attempts:
            first_attempt = min(attempts)
            if now - first_attempt < self.block_duration:
                remaining = (first_attempt + self.block_duration - now).seconds
                raise RateLimitError(
                    f"Too many attempts. Try again in {remaining} seconds"
                )

        self.attempts.setdefault(identifier, []).append(now)

    async def clear_attempts(self, identifier: str) -> None:
        self.attempts.pop(identifier, None)


login_rate_limiter = RateLimiter()


class AuthService:
    def __init__(self, user_repository: UserRepository, rate_limiter: Optional[RateLimiter] = None):
        self.user_repository = user_repository
        self.rate_limiter = rate_limiter or login_rate_limiter

    async def create_user(self, email: str, password: str, role: UserRole = UserRole.USER, full_name: Optional[str] = None) -> User:
        existing_user = await self.user_repository.get_by_email(email)
        if existing_user:
            raise ValidationError("User with this email already exists")
        return await self.user_repository.create(email, get_password_hash(password), role=role, full_name=full_name)

    async def authenticate_user(self, email: str, password: str, client_ip: str) -> Tuple[User, Token]:
        """Check credentials with per-email and per-IP attempt limits"""
        email = email.lower()

        await self.rate_limiter.check_rate_limit(f"login_email_{email}")
        await self.rate_limiter.check_rate_limit(f"login_ip_{client_ip}")

        user = await self.user_repository.get_by_email(email)
        if not user:
            await asyncio.sleep(1)
            raise AuthenticationError("Invalid email or password")

        start_time = time.monotonic()
        is_valid = verify_password(password, user.password_hash)
        elapsed = time.monotonic() - start_time

        # constant-ish response time
        min_delay = 0.5
        if elapsed < min_delay:
            await asyncio.sleep(min_delay - elapsed)

        if not is_valid:
            raise AuthenticationError("Invalid email or password")

        token = self._generate_tokens(user.id)

        await self.rate_limiter.clear_attempts(f"login_email_{email}")
        await self.rate_limiter.clear_attempts(f"login_ip_{client_ip}")
        await self.user_repository.update_last_login(user.id)

        return user, token

    async def _user_from_token(self, token: str, token_type: str) -> User:
        try:
            user_id = token_subject(decode_token(token, expected_type=token_type))
        except ValueError as e:
            raise AuthenticationError(str(e))

        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise AuthenticationError("User not found")
        return user

    async def refresh_tokens(self, refresh_token: str) -> Token:
        user = await self._user_from_token(refresh_token, REFRESH_TOKEN)
        return self._generate_tokens(user.id)

    def _generate_tokens(self, user_id: int) -> Token:
        access_token_expires = timedelta(
            minutes=settings.security.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )
        return Token(
            access_token=create_access_token(user_id, expires_delta=access_token_expires),
            refresh_token=create_refresh_token(user_id),
            expires_in=int(access_token_expires.total_seconds())
        )

    async def get_current_user(self, token: str) -> User:
        return await self._user_from_token(token, ACCESS_TOKEN)
