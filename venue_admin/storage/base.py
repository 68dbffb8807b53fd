# venue_admin/storage/base.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class StorageError(Exception):
    """Raised by storage backends on any store/delete failure"""


@dataclass(frozen=True)
class StoredObject:
    bucket: str
    path: str


class StorageBackend(ABC):
    """Object-storage collaborator consumed by the media service.

    Implementations raise StorageError instead of leaking SDK exceptions,
    so callers only have to handle one failure type.
    """

    @abstractmethod
    async def store(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        overwrite: bool = False,
    ) -> None:
        """Write `data` to bucket/path. Fails if the object exists and overwrite is False."""

    @abstractmethod
    def public_url(self, bucket: str, path: str) -> str:
        """Public URL of a stored object"""

    @abstractmethod
    async def delete(self, bucket: str, path: str) -> None:
        """Remove bucket/path"""

    @abstractmethod
    def parse_public_url(self, url: str) -> Optional[StoredObject]:
        """Inverse of public_url. None for URLs this backend does not serve."""
