# venue_admin/repositories/user_repository.py
from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from venue_admin.models.user import User, UserRole

class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, email: str, password_hash: str, role: UserRole = UserRole.USER, full_name: Optional[str] = None) -> User:
        db_user = User(
            email=email.lower(),
            password_hash=password_hash,
            full_name=full_name,
            role=role.value,
        )
        self.session.add(db_user)
        await self.session.commit()
        await self.session.refresh(db_user)
        return db_user

    async def update_last_login(self, user_id: int) -> None:
        stmt = update(User).where(User.id == user_id).values(
            last_login_at=datetime.now(timezone.utc)
        )
        await self.session.execute(stmt)
        await self.session.commit()
