"""
Stateless projections of store rows for listings.

These functions take rows (ORM objects or anything with the same
attributes) and never write. What they return is a snapshot for display;
the database stays the source of truth.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from bookshelf.sa.models.enums import BookStatus, RequestStatus

CONDITION_COLORS = {
    'excellent': 'green',
    'good': 'blue',
    'fair': 'yellow',
    'poor': 'red',
}


@dataclass(frozen=True)
class RequestListing:
    id: str
    status: str
    book_title: Optional[str]
    book_author: Optional[str]
    counterparty_role: str
    counterparty_name: Optional[str]
    notes: Optional[str]
    can_respond: bool
    can_return: bool
    requested_date: object = None
    due_date: object = None


@dataclass(frozen=True)
class DashboardStats:
    total_books: int
    available_books: int
    borrowed_books: int
    pending_requests: int


def _matches(value: Optional[str], needle: str) -> bool:
    return value is not None and needle in value.lower()


def search_books(books: Iterable, query: Optional[str]) -> List:
    """Filter books whose title, author or genre contains the query, ignoring case."""
    books = list(books)
    needle = (query or "").strip().lower()
    if not needle:
        return books
    return [
        book for book in books
        if _matches(book.title, needle) or _matches(book.author, needle) or _matches(book.genre, needle)
    ]


def browse_books(books: Iterable, viewer_id: Optional[str], query: Optional[str] = None) -> List:
    """Books another user could ask to borrow: not the viewer's own and currently available."""
    candidates = [
        book for book in books
        if book.owner_id != viewer_id and book.status == BookStatus.AVAILABLE.value
    ]
    return search_books(candidates, query)


def label_request(request, viewer_id: str) -> RequestListing:
    """Describe a request from one party's point of view."""
    viewer_is_borrower = request.borrower_id == viewer_id
    counterparty = request.lender if viewer_is_borrower else request.borrower
    book = request.book
    return RequestListing(
        id=request.id,
        status=request.status,
        book_title=book.title if book is not None else None,
        book_author=book.author if book is not None else None,
        counterparty_role='Lender' if viewer_is_borrower else 'Borrower',
        counterparty_name=counterparty.full_name if counterparty is not None else None,
        notes=request.notes,
        can_respond=request.status == RequestStatus.PENDING.value and request.lender_id == viewer_id,
        can_return=(
            request.status == RequestStatus.APPROVED.value
            and viewer_id in (request.borrower_id, request.lender_id)
        ),
        requested_date=request.requested_date,
        due_date=request.due_date,
    )


def label_requests(requests: Iterable, viewer_id: str) -> List[RequestListing]:
    return [label_request(request, viewer_id) for request in requests]


def dashboard_stats(books: Iterable, requests: Iterable) -> DashboardStats:
    """Counts shown on the home page for one user.

    Args:
        books: The user's own books
        requests: Requests where the user is borrower or lender
    """
    books = list(books)
    return DashboardStats(
        total_books=len(books),
        available_books=sum(1 for b in books if b.status == BookStatus.AVAILABLE.value),
        borrowed_books=sum(1 for b in books if b.status == BookStatus.BORROWED.value),
        pending_requests=sum(1 for r in requests if r.status == RequestStatus.PENDING.value),
    )


def condition_badge(condition: Optional[str]) -> tuple:
    """Label and colour name for a book's condition."""
    if not condition:
        return ('unknown', 'white')
    return (condition, CONDITION_COLORS.get(condition, 'white'))
