import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from bookshelf.sa.models import Book, BookCondition, BookStatus, Profile

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'title', 'author', 'genre', 'description', 'isbn', 'cover_image_url',
    'pages', 'publication_year', 'condition', 'status'
)

def validate_book_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and normalise book attributes.

    Only keys present in ``fields`` are checked, so the same function serves
    creation (all fields) and partial edits.

    Args:
        fields: Mapping of book attribute names to new values

    Returns:
        A new dictionary with stripped strings and enum values as plain strings

    Raises:
        ValueError: If a field is unknown or holds an invalid value
    """
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown book fields: {', '.join(sorted(unknown))}")

    cleaned: Dict[str, Any] = {}
    for name, value in fields.items():
        if name in ('title', 'author'):
            if value is None or not str(value).strip():
                raise ValueError(f"{name} is required")
            value = str(value).strip()
        elif name in ('pages', 'publication_year'):
            if value is not None:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"{name} must be an integer")
                if value < 0:
                    raise ValueError(f"{name} cannot be negative")
        elif name == 'condition':
            try:
                value = BookCondition(value).value
            except ValueError:
                raise ValueError(f"Invalid condition '{value}'")
        elif name == 'status':
            try:
                value = BookStatus(value).value
            except ValueError:
                raise ValueError(f"Invalid status '{value}'")
        elif isinstance(value, str):
            # Optional text fields: empty form input means "not set"
            value = value.strip() or None
        cleaned[name] = value
    return cleaned

class BookRepository:
    """Repository for managing Book entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Get a book by its ID.

        Args:
            book_id: The ID of the book to retrieve

        Returns:
            The Book object if found, None otherwise
        """
        return self.session.query(Book).filter(Book.id == book_id).one_or_none()

    def get_with_owner(self, book_id: str) -> Optional[Book]:
        """Get a book with its owner profile loaded."""
        return (
            self.session.query(Book)
            .options(joinedload(Book.owner))
            .filter(Book.id == book_id)
            .one_or_none()
        )

    def list_by_owner(self, owner_id: str) -> List[Book]:
        """Get all books owned by a user, newest first.

        Args:
            owner_id: The owner's user identifier

        Returns:
            List of Book objects
        """
        return (
            self.session.query(Book)
            .filter(Book.owner_id == owner_id)
            .order_by(desc(Book.created_at))
            .all()
        )

    def list_available(self, exclude_owner_id: Optional[str] = None) -> List[Book]:
        """Get books open for borrowing, joined with their owner profile.

        Args:
            exclude_owner_id: Optional user whose own books are left out

        Returns:
            List of available Book objects, newest first
        """
        query = (
            self.session.query(Book)
            .options(joinedload(Book.owner))
            .filter(Book.status == BookStatus.AVAILABLE.value)
        )
        if exclude_owner_id:
            query = query.filter(Book.owner_id != exclude_owner_id)
        return query.order_by(desc(Book.created_at)).all()

    def create_book(self, owner_id: str, title: str, author: str, **fields) -> Book:
        """Add a book to an owner's library.

        Args:
            owner_id: The owner's user identifier
            title: Book title
            author: Book author
            **fields: Optional genre, description, isbn, cover_image_url,
                pages, publication_year, condition and status

        Returns:
            The created Book object

        Raises:
            ValueError: If a field is invalid, the status is borrowed or the
                owner has no profile
        """
        cleaned = validate_book_fields({'title': title, 'author': author, **fields})
        if cleaned.get('status') == BookStatus.BORROWED.value:
            raise ValueError("A book cannot be created as borrowed")

        if not self.session.query(Profile).filter(Profile.user_id == owner_id).first():
            raise ValueError(f"No profile for user '{owner_id}'")

        book = Book(owner_id=owner_id, **cleaned)
        self.session.add(book)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ValueError(f"Could not create book: {e.orig}")
        logger.info("Book %s added by %s", book.id, owner_id)
        return book

    def compare_and_set(self, book_id: str, expected_status: str, values: Dict[str, Any]) -> bool:
        """Update a book only if its status still matches.

        Does not commit; the caller owns the transaction.

        Args:
            book_id: The ID of the book
            expected_status: Status the book must have for the write to apply
            values: Column values to set; empty to only check the status

        Returns:
            True if exactly one row was updated, or matched when values is empty
        """
        if not values:
            # Guard only: lock the row and confirm its status
            row = (
                self.session.query(Book.id)
                .filter(Book.id == book_id, Book.status == expected_status)
                .with_for_update()
                .one_or_none()
            )
            return row is not None
        updated = (
            self.session.query(Book)
            .filter(Book.id == book_id, Book.status == expected_status)
            .update(values, synchronize_session='fetch')
        )
        return updated == 1

    def delete_book(self, book_id: str) -> bool:
        """Delete a book. Does not commit; the caller owns the transaction.

        Args:
            book_id: The ID of the book to delete

        Returns:
            True if the book was deleted, False if not found
        """
        book = self.get_by_id(book_id)
        if not book:
            return False
        self.session.delete(book)
        self.session.flush()
        return True
