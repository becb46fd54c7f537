# bookshelf/sa/models/__init__.py
from .base import Base, TimestampMixin, SafeDateTime, generate_uuid, utcnow
from .enums import (
    BookCondition, BookStatus, RequestStatus, NotificationType, ReadingStatus,
    ACTIVE_REQUEST_STATUSES
)
from .profile import Profile
from .book import Book
from .borrow_request import BorrowRequest
from .notification import Notification
from .reading_progress import ReadingProgress

__all__ = [
    'Base',
    'TimestampMixin',
    'SafeDateTime',
    'generate_uuid',
    'utcnow',
    'BookCondition',
    'BookStatus',
    'RequestStatus',
    'NotificationType',
    'ReadingStatus',
    'ACTIVE_REQUEST_STATUSES',
    'Profile',
    'Book',
    'BorrowRequest',
    'Notification',
    'ReadingProgress'
]
