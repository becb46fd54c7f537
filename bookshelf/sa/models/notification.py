# bookshelf/sa/models/notification.py
from datetime import datetime
from sqlalchemy import String, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, SafeDateTime, generate_uuid, utcnow

class Notification(Base):
    """Created only as a side effect of a lending transition."""
    __tablename__ = 'notification'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(255), ForeignKey('profile.user_id'), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    borrow_request_id: Mapped[str | None] = mapped_column(String(36), ForeignKey('borrow_request.id'), nullable=True)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=utcnow)

    # Relationships
    recipient = relationship('Profile')
    borrow_request = relationship('BorrowRequest', back_populates='notifications')

    __table_args__ = (
        Index('idx_notification_user_created', 'user_id', 'created_at'),
    )
