# venue_admin/core/schemas/entities.py
from pydantic import BaseModel
from typing import Any, Dict, List

from venue_admin.core.schemas.media import Notification


class EntityPage(BaseModel):
    items: List[Dict[str, Any]]
    total: int
    page: int
    page_size: int


class EntityEnvelope(BaseModel):
    item: Dict[str, Any]
    messages: List[Notification] = []
