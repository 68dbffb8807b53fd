# venue_admin/api/v1/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address
from venue_admin.core.database import db_helper
from venue_admin.core.deps import get_current_user
from venue_admin.core.exceptions import AuthenticationError, RateLimitError
from venue_admin.core.schemas.auth import Token, RefreshTokenRequest, UserResponse
from venue_admin.models.user import User
from venue_admin.repositories.user_repository import UserRepository
from venue_admin.services.auth_service import AuthService
import logging

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=Token)
@limiter.limit("10/minute")
async def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Exchange email/password for an access and refresh token"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Login attempt from IP: {client_ip} for email: {form_data.username}")

    try:
        auth_service = AuthService(UserRepository(session))
        _, token = await auth_service.authenticate_user(
            form_data.username,
            form_data.password,
            client_ip
        )
        logger.info(f"Successful login for email: {form_data.username}")
        return token
    except RateLimitError as e:
        logger.warning(f"Rate limit exceeded for login from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=e.detail
        )
    except AuthenticationError as e:
        logger.warning(f"Authentication failed for email: {form_data.username} from IP: {client_ip}")
        raise HTTPException(
            status_code=e.status_code,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post("/refresh", response_model=Token)
@limiter.limit("20/hour")
async def refresh_access_token(
    request: Request,
    refresh_request: RefreshTokenRequest,
    session: AsyncSession = Depends(db_helper.session_getter)
):
    try:
        auth_service = AuthService(UserRepository(session))
        return await auth_service.refresh_tokens(refresh_request.refresh_token)
    except AuthenticationError as e:
        logger.warning(f"Token refresh failed: {e.detail}")
        raise HTTPException(
            status_code=e.status_code,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
