# venue_admin/api/v1/routes/entities.py
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, BackgroundTasks, Body, Depends, File, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from venue_admin.api.v1.routes.media import read_upload
from venue_admin.core.config import settings
from venue_admin.core.database import db_helper
from venue_admin.core.deps import get_list_cache, get_media_service, require_roles
from venue_admin.core.exceptions import ValidationError
from venue_admin.core.schemas.entities import EntityEnvelope, EntityPage
from venue_admin.core.schemas.media import ImageUrlRequest, Notification
from venue_admin.editor import FieldType
from venue_admin.editor.registry import EntityDefinition, REGISTRY
from venue_admin.models.user import User
from venue_admin.repositories.entity_repository import EntityRepository
from venue_admin.services.attachment_manager import NotificationCollector
from venue_admin.services.entity_service import EntityService
from venue_admin.services.list_cache import ListCache
from venue_admin.services.media_service import MediaService


def _messages(service: EntityService) -> List[Notification]:
    return [Notification(level=level, message=message) for level, message in service.notifier.messages]


def build_entity_router(definition: EntityDefinition) -> APIRouter:
    """CRUD + image endpoints for one registered entity"""
    router = APIRouter(prefix=f"/{definition.name.replace('_', '-')}", tags=[definition.name])
    current_user = require_roles(*definition.roles)

    def get_service(
        session: AsyncSession = Depends(db_helper.session_getter),
        media: MediaService = Depends(get_media_service),
        cache: ListCache = Depends(get_list_cache),
    ) -> EntityService:
        return EntityService(
            definition,
            EntityRepository(session, definition.model),
            media,
            invalidate=cache.invalidate,
            cache=cache,
            notifier=NotificationCollector(),
        )

    def image_field(field: str) -> str:
        if field not in definition.schema or definition.schema[field].type != FieldType.IMAGE:
            raise ValidationError(f"{definition.name}.{field} is not an image field", errors={field: "Not an image field"})
        return field

    @router.get("", response_model=EntityPage)
    async def list_entities(
        search: Optional[str] = Query(None, description="Case-insensitive match on the entity's text columns"),
        status_filter: str = Query("all", alias="status", pattern="^(all|active|inactive|featured)$"),
        page: int = Query(1, ge=1),
        page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
        user: User = Depends(current_user),
        service: EntityService = Depends(get_service),
    ):
        result = await service.list(user, search=search, status=status_filter, page=page, page_size=page_size)
        return EntityPage(items=result.items, total=result.total, page=result.page, page_size=result.page_size)

    @router.get("/{entity_id}", response_model=EntityEnvelope)
    async def get_entity(
        entity_id: int,
        user: User = Depends(current_user),
        service: EntityService = Depends(get_service),
    ):
        record = await service.get(entity_id, user)
        return EntityEnvelope(item=service.serialize(record))

    @router.post("", response_model=EntityEnvelope, status_code=status.HTTP_201_CREATED)
    async def create_entity(
        payload: Dict[str, Any] = Body(...),
        user: User = Depends(current_user),
        service: EntityService = Depends(get_service),
    ):
        record = await service.create(payload, user)
        return EntityEnvelope(
            item=service.serialize(record),
            messages=_messages(service) + [Notification(level="success", message=f"{definition.title} created successfully!")],
        )

    @router.patch("/{entity_id}", response_model=EntityEnvelope)
    async def update_entity(
        entity_id: int,
        background_tasks: BackgroundTasks,
        payload: Dict[str, Any] = Body(...),
        user: User = Depends(current_user),
        service: EntityService = Depends(get_service),
    ):
        record = await service.update(entity_id, payload, user, schedule=background_tasks.add_task)
        return EntityEnvelope(
            item=service.serialize(record),
            messages=_messages(service) + [Notification(level="success", message=f"{definition.title} updated successfully!")],
        )

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entity(
        entity_id: int,
        user: User = Depends(current_user),
        service: EntityService = Depends(get_service),
    ):
        await service.delete(entity_id, user)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if definition.flags:
        @router.post("/{entity_id}/toggle/{flag}", response_model=EntityEnvelope)
        async def toggle_flag(
            entity_id: int,
            flag: str,
            user: User = Depends(current_user),
            service: EntityService = Depends(get_service),
        ):
            record = await service.toggle(entity_id, flag, user)
            return EntityEnvelope(item=service.serialize(record))

    if definition.schema.image_fields:
        @router.post("/{entity_id}/images/{field}", response_model=EntityEnvelope)
        async def upload_entity_image(
            entity_id: int,
            field: str,
            background_tasks: BackgroundTasks,
            file: UploadFile = File(...),
            user: User = Depends(current_user),
            service: EntityService = Depends(get_service),
        ):
            spec = definition.schema[image_field(field)]
            source = await read_upload(file, spec.upload.max_size_bytes)
            record, _ = await service.attach_upload(entity_id, field, source, user, schedule=background_tasks.add_task)
            return EntityEnvelope(item=service.serialize(record), messages=_messages(service))

        @router.put("/{entity_id}/images/{field}", response_model=EntityEnvelope)
        async def set_entity_image_url(
            entity_id: int,
            field: str,
            body: ImageUrlRequest,
            background_tasks: BackgroundTasks,
            user: User = Depends(current_user),
            service: EntityService = Depends(get_service),
        ):
            record = await service.set_image_url(entity_id, image_field(field), body.url, user, schedule=background_tasks.add_task)
            return EntityEnvelope(item=service.serialize(record), messages=_messages(service))

        @router.delete("/{entity_id}/images/{field}", response_model=EntityEnvelope)
        async def remove_entity_image(
            entity_id: int,
            field: str,
            background_tasks: BackgroundTasks,
            user: User = Depends(current_user),
            service: EntityService = Depends(get_service),
        ):
            record = await service.detach(entity_id, image_field(field), user, schedule=background_tasks.add_task)
            return EntityEnvelope(item=service.serialize(record), messages=_messages(service))

    return router


entity_routers = [build_entity_router(d) for d in REGISTRY.values()]
