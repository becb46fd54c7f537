# bookshelf/sa/models/profile.py
from sqlalchemy import String, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, generate_uuid

class Profile(Base, TimestampMixin):
    """Display attributes of an authenticated user. One per user_id."""
    __tablename__ = 'profile'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    books = relationship('Book', back_populates='owner')
    reading_progress = relationship('ReadingProgress', back_populates='profile')

    def __repr__(self) -> str:
        return f"<Profile(user_id={self.user_id}, full_name='{self.full_name}')>"
