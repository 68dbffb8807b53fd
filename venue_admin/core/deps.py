# venue_admin/core/deps.py
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from venue_admin.core.config import settings
from venue_admin.core.database import db_helper
from venue_admin.core.exceptions import AuthenticationError, AuthorizationError, AuthRequired
from venue_admin.models.user import User
from venue_admin.repositories.user_repository import UserRepository
from venue_admin.services.auth_service import AuthService
from venue_admin.services.list_cache import ListCache
from venue_admin.services.media_service import MediaService
from venue_admin.storage import MinIOStorage, StorageBackend
import logging

logger = logging.getLogger(__name__)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    session: AsyncSession = Depends(db_helper.session_getter)
) -> User:
    """Session accessor: Bearer token -> User"""
    if not token:
        raise AuthRequired()
    try:
        return await AuthService(UserRepository(session)).get_current_user(token)
    except AuthenticationError as e:
        logger.warning(f"Authentication failed: {e.detail}")
        raise AuthRequired("Could not validate credentials")


def require_roles(*roles: str) -> Callable:
    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise AuthorizationError(f"Requires role: {', '.join(roles)}")
        return user
    return checker


@lru_cache()
def get_storage() -> StorageBackend:
    return MinIOStorage.from_config(settings.minio, cache_control=settings.uploads.UPLOAD_CACHE_CONTROL)


@lru_cache()
def get_media_service() -> MediaService:
    return MediaService(get_storage())


@lru_cache()
def get_list_cache() -> ListCache:
    return ListCache(ttl=settings.list_cache_ttl, max_entries=settings.list_cache_max_entries)
