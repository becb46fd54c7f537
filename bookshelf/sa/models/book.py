# bookshelf/sa/models/book.py
from sqlalchemy import Integer, String, Text, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, generate_uuid
from .enums import BookCondition, BookStatus

class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    owner_id: Mapped[str] = mapped_column(String(255), ForeignKey('profile.user_id'), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    genre: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    pages: Mapped[int | None] = mapped_column(Integer, nullable=True)
    publication_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    condition: Mapped[str] = mapped_column(String(20), nullable=False, default=BookCondition.GOOD.value)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=BookStatus.AVAILABLE.value)

    # Relationships
    owner = relationship('Profile', back_populates='books')
    borrow_requests = relationship('BorrowRequest', back_populates='book')
    reading_progress = relationship('ReadingProgress', back_populates='book', cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint("pages IS NULL OR pages >= 0", name='ck_book_pages_non_negative'),
        CheckConstraint("publication_year IS NULL OR publication_year >= 0", name='ck_book_year_non_negative'),
        CheckConstraint(
            "condition IN ('excellent', 'good', 'fair', 'poor')",
            name='ck_book_condition'
        ),
        CheckConstraint(
            "status IN ('available', 'borrowed', 'for_sale', 'not_available')",
            name='ck_book_status'
        ),
        Index('idx_book_owner_id', 'owner_id'),
        Index('idx_book_status', 'status'),
        Index('idx_book_created_at', 'created_at'),
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', status={self.status})>"
