# venue_admin/services/entity_service.py
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from venue_admin.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from venue_admin.editor import EntityEditor
from venue_admin.editor.registry import EntityDefinition
from venue_admin.models import User
from venue_admin.repositories.entity_repository import EntityRepository
from venue_admin.services.attachment_manager import Notifier
from venue_admin.services.list_cache import ListCache
from venue_admin.services.media_service import MediaService, Scheduler, UploadResult, UploadSource

logger = logging.getLogger(__name__)

STATUS_FILTERS = {
    "active": ("is_active", True),
    "inactive": ("is_active", False),
    "featured": ("is_featured", True),
}


@dataclass
class Page:
    items: List[Dict[str, Any]]
    total: int
    page: int
    page_size: int


class EntityService:
    """Generic editor service: one entity definition, one repository.

    `invalidate` is called with the definition's cache key after every write;
    superseded images are handed to MediaService.replace_on_save once the row
    is saved.
    """

    def __init__(
        self,
        definition: EntityDefinition,
        repository: EntityRepository,
        media: MediaService,
        *,
        invalidate: Callable[[str], Any],
        cache: Optional[ListCache] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.definition = definition
        self.repository = repository
        self.media = media
        self.invalidate = invalidate
        self.cache = cache
        self.notifier = notifier

    def serialize(self, record: Any) -> Dict[str, Any]:
        data = {"id": record.id}
        for spec in self.definition.schema:
            data[spec.name] = getattr(record, spec.name, None)
        for extra in (self.definition.owner_field, self.definition.creator_field, *self.definition.read_only):
            if extra:
                data[extra] = getattr(record, extra, None)
        data["created_at"] = getattr(record, "created_at", None)
        data["updated_at"] = getattr(record, "updated_at", None)
        return data

    def editor(self, record: Any = None) -> EntityEditor:
        return EntityEditor(self.definition.schema, record, media=self.media, notifier=self.notifier)

    def _scope(self, user: User) -> Dict[str, Any]:
        owner = self.definition.owner_field
        if owner and not user.is_admin:
            return {owner: user.id}
        return {}

    async def list(
        self,
        user: User,
        *,
        search: Optional[str] = None,
        status: str = "all",
        page: int = 1,
        page_size: int = 10,
    ) -> Page:
        filters = self._scope(user)
        if status != "all":
            flag, value = STATUS_FILTERS.get(status, (None, None))
            if flag not in self.definition.flags:
                raise ValidationError(f"Unsupported status filter: {status}")
            filters[flag] = value

        search = (search or "").strip() or None
        params = (tuple(sorted(filters.items())), search, page, page_size)
        if self.cache is not None:
            cached = self.cache.get(self.definition.cache_key, params)
            if cached is not None:
                return cached

        items, total = await self.repository.list(
            search=search,
            search_fields=self.definition.search_fields,
            filters=filters,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        result = Page(items=[self.serialize(r) for r in items], total=total, page=page, page_size=page_size)
        if self.cache is not None:
            self.cache.set(self.definition.cache_key, params, result)
        return result

    async def _load(self, entity_id: int, user: User) -> Any:
        record = await self.repository.get_by_id(entity_id)
        if record is None:
            raise NotFoundError(f"{self.definition.title} #{entity_id} not found")
        owner = self.definition.owner_field
        if owner and not user.is_admin and getattr(record, owner) != user.id:
            raise AuthorizationError(f"You can only manage your own {self.definition.name}")
        return record

    async def get(self, entity_id: int, user: User) -> Any:
        return await self._load(entity_id, user)

    def _written(self) -> None:
        self.invalidate(self.definition.cache_key)

    async def create(self, payload: Dict[str, Any], user: User) -> Any:
        editor = self.editor()
        editor.update(payload)
        values = editor.changes()
        for stamp in (self.definition.owner_field, self.definition.creator_field):
            if stamp:
                values[stamp] = user.id
        record = await self.repository.create(values)
        logger.info(f"{user.email} created {self.definition.name}#{record.id}")
        self._written()
        return record

    async def _save(self, record: Any, editor: EntityEditor, schedule: Optional[Scheduler]) -> Any:
        changes = editor.changes()
        updated = await self.repository.update(record.id, changes)
        if updated is None:
            raise NotFoundError(f"{self.definition.title} #{record.id} not found")
        for field, previous, current in editor.image_replacements():
            target = self.media.replace_on_save(previous, current, schedule)
            if target:
                logger.info(f"Queued cleanup of {target.bucket}/{target.path} replaced on {self.definition.name}.{field}")
        self._written()
        return updated

    async def update(
        self,
        entity_id: int,
        payload: Dict[str, Any],
        user: User,
        schedule: Optional[Scheduler] = None,
    ) -> Any:
        record = await self._load(entity_id, user)
        editor = self.editor(record)
        editor.update(payload)
        return await self._save(record, editor, schedule)

    async def attach_upload(
        self,
        entity_id: int,
        field: str,
        file: UploadSource,
        user: User,
        schedule: Optional[Scheduler] = None,
    ) -> tuple[Any, UploadResult]:
        record = await self._load(entity_id, user)
        editor = self.editor(record)
        result = await editor.attachment(field).upload(file)
        if not result.ok:
            raise result.error
        return await self._save(record, editor, schedule), result

    async def set_image_url(
        self,
        entity_id: int,
        field: str,
        url: str,
        user: User,
        schedule: Optional[Scheduler] = None,
    ) -> Any:
        record = await self._load(entity_id, user)
        editor = self.editor(record)
        if not editor.attachment(field).set_by_url(url):
            raise ValidationError("Image URL cannot be empty", errors={field: "Image URL cannot be empty"})
        return await self._save(record, editor, schedule)

    async def detach(
        self,
        entity_id: int,
        field: str,
        user: User,
        schedule: Optional[Scheduler] = None,
    ) -> Any:
        record = await self._load(entity_id, user)
        editor = self.editor(record)
        editor.attachment(field).remove()
        return await self._save(record, editor, schedule)

    async def toggle(self, entity_id: int, flag: str, user: User) -> Any:
        if flag not in self.definition.flags:
            raise ValidationError(f"{self.definition.title} has no {flag} flag")
        record = await self._load(entity_id, user)
        updated = await self.repository.update(record.id, {flag: not getattr(record, flag)})
        self._written()
        return updated

    async def delete(self, entity_id: int, user: User) -> None:
        record = await self._load(entity_id, user)
        await self.repository.delete(record.id)
        logger.info(f"{user.email} deleted {self.definition.name}#{record.id}")
        self._written()
