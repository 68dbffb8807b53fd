# venue_admin/storage/__init__.py
from .base import StorageBackend, StorageError, StoredObject
from .minio_storage import MinIOStorage

__all__ = [
    "StorageBackend", "StorageError", "StoredObject",
    "MinIOStorage",
]
