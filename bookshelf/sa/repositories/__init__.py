# bookshelf/sa/repositories/__init__.py
from .profile import ProfileRepository
from .book import BookRepository, validate_book_fields
from .borrow_request import BorrowRequestRepository
from .notification import NotificationRepository
from .reading_progress import ReadingProgressRepository

__all__ = [
    'ProfileRepository',
    'BookRepository',
    'validate_book_fields',
    'BorrowRequestRepository',
    'NotificationRepository',
    'ReadingProgressRepository'
]
