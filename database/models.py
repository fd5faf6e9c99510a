"""
SQLAlchemy ORM models for the student account store.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, deferred


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class Base(DeclarativeBase):
    pass


class UserAccount(Base):
    __tablename__ = "users"

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String(100), nullable=False)
    # Always stored lower-cased so the UNIQUE index is case-insensitive.
    email = Column(String(255), unique=True, nullable=False, index=True)
    institution_name = Column(String(200), nullable=False)
    student_id = Column(String(50), unique=True, nullable=False, index=True)
    department = Column(String(100), nullable=False)
    course = Column(String(100), nullable=False)
    # Loaded only on explicit request (see CredentialStore.find_by_email).
    password_hash = deferred(Column(Text, nullable=False), raiseload=True)
    role = Column(String(16), nullable=False, default=Role.STUDENT.value)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<UserAccount {self.user_id} {self.email} role={self.role}>"
