# bookshelf/sa/models/borrow_request.py
from datetime import datetime
from sqlalchemy import String, Text, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, SafeDateTime, generate_uuid, utcnow
from .enums import RequestStatus

ACTIVE_STATUS_CLAUSE = "status IN ('pending', 'approved')"

class BorrowRequest(Base, TimestampMixin):
    """A request to borrow a book. Never deleted: it is the lending audit trail."""
    __tablename__ = 'borrow_request'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    # Nulled when a book with only finished requests is deleted
    book_id: Mapped[str | None] = mapped_column(String(36), ForeignKey('book.id', ondelete='SET NULL'), nullable=True)
    borrower_id: Mapped[str] = mapped_column(String(255), ForeignKey('profile.user_id'), nullable=False)
    lender_id: Mapped[str] = mapped_column(String(255), ForeignKey('profile.user_id'), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RequestStatus.PENDING.value)
    requested_date: Mapped[datetime] = mapped_column(SafeDateTime, nullable=False, default=utcnow)
    approved_date: Mapped[datetime | None] = mapped_column(SafeDateTime, nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(SafeDateTime, nullable=True)
    returned_date: Mapped[datetime | None] = mapped_column(SafeDateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    book = relationship('Book', back_populates='borrow_requests')
    borrower = relationship('Profile', foreign_keys=[borrower_id])
    lender = relationship('Profile', foreign_keys=[lender_id])
    notifications = relationship('Notification', back_populates='borrow_request')

    __table_args__ = (
        CheckConstraint('borrower_id <> lender_id', name='ck_borrow_request_distinct_parties'),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'returned')",
            name='ck_borrow_request_status'
        ),
        # At most one pending or approved request per book
        Index(
            'uix_borrow_request_active_book',
            'book_id',
            unique=True,
            sqlite_where=text(ACTIVE_STATUS_CLAUSE),
            postgresql_where=text(ACTIVE_STATUS_CLAUSE),
        ),
        Index('idx_borrow_request_borrower_id', 'borrower_id'),
        Index('idx_borrow_request_lender_id', 'lender_id'),
        Index('idx_borrow_request_created_at', 'created_at'),
    )

    def __repr__(self) -> str:
        return f"<BorrowRequest(id={self.id}, book_id={self.book_id}, status={self.status})>"
