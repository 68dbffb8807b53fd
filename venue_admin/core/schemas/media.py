# venue_admin/core/schemas/media.py
from pydantic import BaseModel, Field
from typing import List


class UploadResponse(BaseModel):
    url: str
    path: str


class ImageUrlRequest(BaseModel):
    url: str = Field(..., description="Direct image URL, stored as is")


class Notification(BaseModel):
    level: str
    message: str


class UploadConstraintsResponse(BaseModel):
    bucket: str
    folder: str
    max_size_in_mb: float
    accepted_file_types: List[str]
    placeholder: str
    hint: str
