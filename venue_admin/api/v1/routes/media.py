# venue_admin/api/v1/routes/media.py
from fastapi import APIRouter, Depends, File, Query, UploadFile
from venue_admin.core.deps import get_current_user, get_media_service
from venue_admin.core.exceptions import AuthorizationError, ValidationError
from venue_admin.core.schemas.media import UploadConstraintsResponse, UploadResponse
from venue_admin.editor import FieldSpec, FieldType
from venue_admin.editor.registry import get_definition
from venue_admin.models.user import User
from venue_admin.services.attachment_manager import MediaAttachmentManager
from venue_admin.services.media_service import MediaService, UploadSource
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])


def resolve_image_field(entity: str, field: str, user: User) -> FieldSpec:
    definition = get_definition(entity)
    if user.role not in definition.roles:
        raise AuthorizationError(f"Requires role: {', '.join(definition.roles)}")
    if field not in definition.schema or definition.schema[field].type != FieldType.IMAGE:
        raise ValidationError(f"{entity}.{field} is not an image field", errors={field: "Not an image field"})
    return definition.schema[field]


async def read_upload(file: UploadFile, max_bytes: int) -> UploadSource:
    # one byte past the limit is enough to reject oversized files
    data = await file.read(max_bytes + 1)
    return UploadSource(
        filename=file.filename or "",
        content_type=file.content_type or "",
        data=data,
    )


@router.get("/constraints", response_model=UploadConstraintsResponse)
async def get_upload_constraints(
    entity: str = Query(..., description="Entity name, e.g. clubs"),
    field: str = Query(..., description="Image field, e.g. logo_url"),
    user: User = Depends(get_current_user),
    media: MediaService = Depends(get_media_service),
):
    """Upload settings a form needs to render its image picker"""
    spec = resolve_image_field(entity, field, user)
    manager = MediaAttachmentManager.for_constraints(media, spec.upload, placeholder=spec.placeholder)
    return UploadConstraintsResponse(
        bucket=spec.upload.bucket,
        folder=spec.upload.folder,
        max_size_in_mb=spec.upload.max_size_in_mb,
        accepted_file_types=list(manager.accepted_file_types),
        placeholder=manager.placeholder,
        hint=manager.hint,
    )


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    entity: str = Query(..., description="Entity name, e.g. clubs"),
    field: str = Query(..., description="Image field, e.g. logo_url"),
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    media: MediaService = Depends(get_media_service),
):
    """Store an image for a form field without touching the record.

    The returned URL is saved with the entity later; abandoning the form
    leaves the object orphaned.
    """
    spec = resolve_image_field(entity, field, user)
    source = await read_upload(file, spec.upload.max_size_bytes)
    result = await media.upload(source, spec.upload)
    if not result.ok:
        raise result.error
    logger.info(f"{user.email} uploaded {result.path} for {entity}.{field}")
    return UploadResponse(url=result.url, path=result.path)
