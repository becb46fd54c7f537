"""
Enumerations shared by the models, the lending rules and the API schemas.

Values are stored as plain strings so the columns stay portable between
SQLite and PostgreSQL.
"""

import enum


class BookCondition(str, enum.Enum):
    """Physical condition of a shared book."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class BookStatus(str, enum.Enum):
    """
    Availability of a book.

    Only the lending rules move a book into or out of BORROWED.
    """
    AVAILABLE = "available"
    BORROWED = "borrowed"
    FOR_SALE = "for_sale"
    NOT_AVAILABLE = "not_available"


class RequestStatus(str, enum.Enum):
    """
    Status of a borrow request.

    Flow:
        PENDING -> APPROVED -> RETURNED
        PENDING -> REJECTED
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    RETURNED = "returned"


ACTIVE_REQUEST_STATUSES = (RequestStatus.PENDING.value, RequestStatus.APPROVED.value)


class NotificationType(str, enum.Enum):
    BORROW_REQUEST = "borrow_request"
    REQUEST_APPROVED = "request_approved"
    REQUEST_REJECTED = "request_rejected"
    BOOK_RETURNED = "book_returned"


class ReadingStatus(str, enum.Enum):
    WANT_TO_READ = "want_to_read"
    READING = "reading"
    COMPLETED = "completed"


def values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]
