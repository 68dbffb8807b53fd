# venue_admin/models/user.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
import enum
from .base import Base, TimestampMixin

class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
    BLOGGER = "blogger"

class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(String, default=UserRole.USER.value, nullable=False)
    avatar_url = Column(String, nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    posts = relationship("Post", back_populates="author")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __str__(self):
        return self.email

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
