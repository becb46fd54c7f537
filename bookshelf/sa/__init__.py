# bookshelf/sa/__init__.py
from .database import Database
from .models import (
    Base, Profile, Book, BorrowRequest, Notification, ReadingProgress
)

__all__ = [
    'Database',
    'Base',
    'Profile',
    'Book',
    'BorrowRequest',
    'Notification',
    'ReadingProgress'
]
