# venue_admin/services/media_service.py
import asyncio
import logging
import os
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Set

from venue_admin.core.exceptions import (
    MediaError,
    SizeExceeded,
    StorageDeleteFailed,
    StorageWriteFailed,
    UnsupportedType,
)
from venue_admin.storage import StorageBackend, StorageError, StoredObject

logger = logging.getLogger(__name__)

MIB = 1024 * 1024
DEFAULT_BUCKET = "images"
DEFAULT_ALLOWED_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")

# BackgroundTasks.add_task compatible: schedule(func, *args)
Scheduler = Callable[..., Any]


@dataclass(frozen=True)
class UploadConstraints:
    bucket: str = DEFAULT_BUCKET
    folder: str = ""
    max_size_in_mb: float = 5
    allowed_types: Sequence[str] = DEFAULT_ALLOWED_TYPES

    @property
    def max_size_bytes(self) -> int:
        return int(self.max_size_in_mb * MIB)


@dataclass
class UploadSource:
    """A local file handed in by a file picker, a drop or a multipart form"""
    filename: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class UploadResult:
    url: str = ""
    path: str = ""
    error: Optional[MediaError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def generate_object_name(filename: str) -> str:
    """<unix millis>-<random token><ext>, unique without coordination"""
    ext = os.path.splitext(filename or "")[1].lower()
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}{ext}"


def object_path(folder: str, name: str) -> str:
    folder = (folder or "").strip("/")
    return f"{folder}/{name}" if folder else name


class MediaService:
    def __init__(self, storage: StorageBackend):
        self.storage = storage
        self._pending: Set[asyncio.Task] = set()

    def validate(self, file: UploadSource, constraints: UploadConstraints) -> None:
        if file.size > constraints.max_size_bytes:
            raise SizeExceeded(constraints.max_size_in_mb)
        if file.content_type not in constraints.allowed_types:
            raise UnsupportedType(file.content_type)

    async def upload(self, file: UploadSource, constraints: UploadConstraints) -> UploadResult:
        """Validate, store under folder/<generated name> and return the public URL.

        Never raises: every failure comes back as UploadResult.error.
        """
        try:
            self.validate(file, constraints)
        except MediaError as e:
            logger.info(f"Rejected upload {file.filename!r}: {e.detail}")
            return UploadResult(error=e)

        path = object_path(constraints.folder, generate_object_name(file.filename))
        try:
            await self.storage.store(
                constraints.bucket, path, file.data, file.content_type, overwrite=False
            )
        except StorageError as e:
            logger.error(f"Upload to {constraints.bucket}/{path} failed: {e}")
            return UploadResult(error=StorageWriteFailed())

        return UploadResult(url=self.storage.public_url(constraints.bucket, path), path=path)

    def replace_on_save(
        self,
        previous_url: Optional[str],
        new_url: Optional[str],
        schedule: Optional[Scheduler] = None,
    ) -> Optional[StoredObject]:
        """Schedule removal of the object behind previous_url when the saved value moved on.

        Returns the object queued for deletion, or None. The caller's save
        never waits on the delete.
        """
        previous_url = previous_url or ""
        if not previous_url or previous_url == (new_url or ""):
            return None

        target = self.storage.parse_public_url(previous_url)
        if target is None:
            logger.debug(f"Not a stored object, leaving as is: {previous_url}")
            return None

        (schedule or self._spawn)(self.delete_quietly, target)
        return target

    async def delete_quietly(self, target: StoredObject) -> bool:
        try:
            await self.storage.delete(target.bucket, target.path)
        except StorageError as e:
            failure = StorageDeleteFailed(str(e))
            logger.warning(f"{failure.detail} ({target.bucket}/{target.path}), leaving orphan")
            return False
        return True

    def _spawn(self, func: Callable[..., Any], *args: Any) -> None:
        task = asyncio.get_running_loop().create_task(func(*args))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for spawned cleanups, used on shutdown and in tests"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
