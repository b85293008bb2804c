# backend/app/users/models.py
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime
from ..database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(100), index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), default=UserRole.USER.value, nullable=False)
    last_login = Column(DateTime(timezone=True))
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r}, email={self.email!r}, role={self.role!r})"

    def __str__(self) -> str:
        return f"{self.name} ({self.email})"
