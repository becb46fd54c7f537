# bookshelf/sa/models/reading_progress.py
from datetime import datetime
from sqlalchemy import Integer, String, Text, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, SafeDateTime, generate_uuid
from .enums import ReadingStatus

class ReadingProgress(Base, TimestampMixin):
    """Tracks how far a user is through a book. Independent of lending."""
    __tablename__ = 'reading_progress'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey('profile.user_id'), nullable=False)
    book_id: Mapped[str] = mapped_column(String(36), ForeignKey('book.id', ondelete='CASCADE'), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=ReadingStatus.WANT_TO_READ.value)
    pages_read: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_pages: Mapped[int | None] = mapped_column(Integer, nullable=True)
    started_date: Mapped[datetime | None] = mapped_column(SafeDateTime, nullable=True)
    finished_date: Mapped[datetime | None] = mapped_column(SafeDateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    profile = relationship('Profile', back_populates='reading_progress')
    book = relationship('Book', back_populates='reading_progress')

    __table_args__ = (
        UniqueConstraint('user_id', 'book_id', name='uix_reading_progress_user_book'),
        CheckConstraint('pages_read IS NULL OR pages_read >= 0', name='ck_reading_progress_pages_read'),
    )
