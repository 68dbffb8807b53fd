# venue_admin/core/exceptions.py
from typing import Dict, Optional

from fastapi import status


class AppException(Exception):
    """Base application exception"""
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail

class AuthenticationError(AppException):
    """Authentication failed"""
    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)

class AuthRequired(AuthenticationError):
    """No usable session for a protected operation"""
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail)

class AuthorizationError(AppException):
    """Authenticated but not allowed"""
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail)

class ValidationError(AppException):
    """Invalid input data. `errors` maps field names to messages."""
    def __init__(self, detail: str = "Validation error", errors: Optional[Dict[str, str]] = None):
        super().__init__(status.HTTP_422_UNPROCESSABLE_ENTITY, detail)
        self.errors = errors or {}

class NotFoundError(AppException):
    """Resource not found"""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)

class DatabaseError(AppException):
    """Database failure"""
    def __init__(self, detail: str = "Database error"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)

class RateLimitError(AppException):
    """Too many requests"""
    def __init__(self, detail: str = "Too many requests"):
        super().__init__(status.HTTP_429_TOO_MANY_REQUESTS, detail)


# Media errors

class MediaError(AppException):
    """Base for upload/attachment failures"""

class SizeExceeded(MediaError):
    def __init__(self, max_size_in_mb: float):
        super().__init__(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            f"File size must be less than {max_size_in_mb:g}MB",
        )
        self.max_size_in_mb = max_size_in_mb

class UnsupportedType(MediaError):
    def __init__(self, content_type: str):
        super().__init__(
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            f"File type {content_type or 'unknown'} is not supported",
        )
        self.content_type = content_type

class UploadInProgress(MediaError):
    def __init__(self, detail: str = "An upload is already in progress"):
        super().__init__(status.HTTP_409_CONFLICT, detail)

class StorageWriteFailed(MediaError):
    def __init__(self, detail: str = "Failed to upload image"):
        super().__init__(status.HTTP_502_BAD_GATEWAY, detail)

class StorageDeleteFailed(MediaError):
    """Never reaches the client: cleanup failures are logged and dropped"""
    def __init__(self, detail: str = "Failed to delete stored object"):
        super().__init__(status.HTTP_502_BAD_GATEWAY, detail)
