# venue_admin/repositories/entity_repository.py
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type
from datetime import datetime, timezone
from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from venue_admin.core.exceptions import DatabaseError
from venue_admin.models import Base
import logging

logger = logging.getLogger(__name__)


class EntityRepository:
    """CRUD over one table, shared by every entity editor"""

    def __init__(self, session: AsyncSession, model: Type[Base]):
        self.session = session
        self.model = model

    def _filtered(self, stmt, search: Optional[str], search_fields: Sequence[str], filters: Dict[str, Any]):
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(*[getattr(self.model, f).ilike(pattern) for f in search_fields]))
        for name, value in filters.items():
            stmt = stmt.where(getattr(self.model, name) == value)
        return stmt

    async def list(
        self,
        *,
        search: Optional[str] = None,
        search_fields: Sequence[str] = (),
        filters: Optional[Dict[str, Any]] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Any], int]:
        """Newest first page plus the exact total for the same filters"""
        filters = filters or {}
        stmt = self._filtered(select(self.model), search, search_fields, filters)
        stmt = stmt.order_by(self.model.created_at.desc(), self.model.id.desc()).offset(offset).limit(limit)
        count_stmt = self._filtered(select(func.count()).select_from(self.model), search, search_fields, filters)

        result = await self.session.execute(stmt)
        items = list(result.scalars().all())
        total = (await self.session.execute(count_stmt)).scalar() or 0
        return items, total

    async def get_by_id(self, entity_id: int) -> Optional[Any]:
        stmt = select(self.model).where(self.model.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, values: Dict[str, Any]) -> Any:
        obj = self.model(**values)
        self.session.add(obj)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Insert into {self.model.__tablename__} failed: {e}")
            raise DatabaseError(f"Could not create {self.model.__tablename__} record")
        await self.session.refresh(obj)
        return obj

    async def update(self, entity_id: int, values: Dict[str, Any]) -> Optional[Any]:
        if not values:
            return await self.get_by_id(entity_id)
        stmt = update(self.model).where(self.model.id == entity_id).values(
            **values,
            updated_at=datetime.now(timezone.utc)
        ).returning(self.model).execution_options(synchronize_session=False)
        try:
            result = await self.session.execute(stmt)
            obj = result.scalar_one_or_none()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Update of {self.model.__tablename__}#{entity_id} failed: {e}")
            raise DatabaseError(f"Could not update {self.model.__tablename__} record")
        return obj

    async def delete(self, entity_id: int) -> bool:
        stmt = delete(self.model).where(self.model.id == entity_id)
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Delete of {self.model.__tablename__}#{entity_id} failed: {e}")
            raise DatabaseError(f"Could not delete {self.model.__tablename__} record")
        return result.rowcount > 0
