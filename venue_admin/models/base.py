# venue_admin/models/base.py
from sqlalchemy import MetaData, Column, DateTime, func
from sqlalchemy.orm import declarative_base

from venue_admin.core.config import settings

Base = declarative_base(metadata=MetaData(naming_convention=settings.db.naming_convention))


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
