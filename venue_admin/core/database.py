# venue_admin/core/database.py
from typing import Any, AsyncGenerator
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from venue_admin.core.config import DataBaseConfig, settings


class DatabaseHelper:
    """Engine and session factory shared by routes, the back office and scripts"""

    def __init__(self, config: DataBaseConfig):
        self.engine: AsyncEngine = create_async_engine(
            url=config.DATABASE_URL,
            echo=config.DB_ECHO,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
        # rows are serialized after commit, so attributes must survive it
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    async def ping(self) -> Any:
        async with self.session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            return result.scalar()

    async def dispose(self):
        await self.engine.dispose()

    async def session_getter(self) -> AsyncGenerator[AsyncSession, None]:
        """Session dependency for FastAPI routes"""
        async with self.session_factory() as session:
            yield session


db_helper = DatabaseHelper(settings.db)
