# venue_admin/services/attachment_manager.py
import enum
import logging
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

from venue_admin.core.exceptions import UnsupportedType, UploadInProgress
from venue_admin.services.media_service import (
    DEFAULT_ALLOWED_TYPES,
    DEFAULT_BUCKET,
    MediaService,
    UploadConstraints,
    UploadResult,
    UploadSource,
)

logger = logging.getLogger(__name__)


class AttachmentState(str, enum.Enum):
    EMPTY = "empty"
    UPLOADING = "uploading"
    ATTACHED = "attached"


class Notifier(Protocol):
    def success(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class LoggingNotifier:
    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.warning(message)


class NotificationCollector:
    """Keeps user-facing messages so a request can return them"""
    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))


class MediaAttachmentManager:
    """Image field of one form: upload a file or paste a URL, preview, replace, remove.

    Mirrors the parent-form contract: `on_change(url)` fires on a successful
    upload or URL entry, `on_change("")` then `on_remove()` on removal.
    Remote deletion of superseded objects is not done here; the form calls
    MediaService.replace_on_save when it saves.
    """

    def __init__(
        self,
        media: MediaService,
        *,
        value: Optional[str] = "",
        on_change: Optional[Callable[[str], None]] = None,
        on_remove: Optional[Callable[[], None]] = None,
        bucket: str = DEFAULT_BUCKET,
        folder: str = "events",
        max_size_in_mb: float = 5,
        accepted_file_types: Sequence[str] = DEFAULT_ALLOWED_TYPES,
        placeholder: str = "Upload an image or enter URL",
        notifier: Optional[Notifier] = None,
    ):
        self.media = media
        self.value = value or ""
        self.on_change = on_change
        self.on_remove = on_remove
        self.constraints = UploadConstraints(
            bucket=bucket,
            folder=folder,
            max_size_in_mb=max_size_in_mb,
            allowed_types=tuple(accepted_file_types),
        )
        self.placeholder = placeholder
        self.notifier = notifier or LoggingNotifier()
        self._uploading = False

    @classmethod
    def for_constraints(cls, media: MediaService, constraints: UploadConstraints, **kwargs) -> "MediaAttachmentManager":
        return cls(
            media,
            bucket=constraints.bucket,
            folder=constraints.folder,
            max_size_in_mb=constraints.max_size_in_mb,
            accepted_file_types=constraints.allowed_types,
            **kwargs,
        )

    @property
    def state(self) -> AttachmentState:
        if self._uploading:
            return AttachmentState.UPLOADING
        return AttachmentState.ATTACHED if self.value else AttachmentState.EMPTY

    @property
    def accepted_file_types(self) -> Tuple[str, ...]:
        return tuple(self.constraints.allowed_types)

    @property
    def hint(self) -> str:
        kinds = ", ".join(t.split("/")[-1] for t in self.accepted_file_types)
        return f"Supports: {kinds} (max {self.constraints.max_size_in_mb:g}MB)"

    def _set_value(self, url: str) -> None:
        self.value = url
        if self.on_change:
            self.on_change(url)

    async def upload(self, file: UploadSource) -> UploadResult:
        if self._uploading:
            error = UploadInProgress()
            self.notifier.error(error.detail)
            return UploadResult(error=error)

        self._uploading = True
        try:
            result = await self.media.upload(file, self.constraints)
        finally:
            self._uploading = False

        if result.ok:
            self._set_value(result.url)
            self.notifier.success("Image uploaded successfully!")
        else:
            self.notifier.error(result.error.detail or "Failed to upload image")
        return result

    async def select_file(self, files: Iterable[UploadSource]) -> Optional[UploadResult]:
        """File picker: first selected file, nothing selected is a no-op"""
        file = next(iter(files), None)
        if file is None:
            return None
        return await self.upload(file)

    async def drop(self, files: Iterable[UploadSource]) -> Optional[UploadResult]:
        """Drag and drop: first file with an accepted type, otherwise reject"""
        files = list(files)
        image = next((f for f in files if f.content_type in self.accepted_file_types), None)
        if image is None:
            self.notifier.error("Please drop a valid image file")
            rejected = files[0].content_type if files else ""
            return UploadResult(error=UnsupportedType(rejected))
        return await self.upload(image)

    def set_by_url(self, url: Optional[str]) -> bool:
        url = (url or "").strip()
        if not url:
            return False
        self._set_value(url)
        self.notifier.success("Image URL added successfully!")
        return True

    def remove(self) -> None:
        self._set_value("")
        if self.on_remove:
            self.on_remove()
        self.notifier.success("Image removed")
