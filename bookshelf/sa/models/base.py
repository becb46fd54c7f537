# bookshelf/sa/models/base.py
from datetime import datetime, UTC
from uuid import uuid4
from sqlalchemy.orm import DeclarativeBase, mapped_column, Mapped
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())

def utcnow() -> datetime:
    return datetime.now(UTC)

class SafeDateTime(TypeDecorator):
    """Custom DateTime type that handles empty strings as None"""
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value == '':
            return None
        return value

    def process_result_value(self, value, dialect):
        if value == '':
            return None
        return value

class Base(DeclarativeBase):
    """Base class for all models"""
    pass

class TimestampMixin:
    """Mixin to add created_at and updated_at columns"""
    created_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=utcnow, onupdate=utcnow)
