from datetime import datetime, UTC
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload
from bookshelf.sa.models import ReadingProgress, ReadingStatus, Book, Profile

class ReadingProgressRepository:
    """Repository for a user's reading progress on books."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: str, book_id: str) -> Optional[ReadingProgress]:
        return (
            self.session.query(ReadingProgress)
            .filter(ReadingProgress.user_id == user_id, ReadingProgress.book_id == book_id)
            .one_or_none()
        )

    def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[ReadingProgress]:
        """Get a user's progress entries with their books, most recently updated first."""
        query = (
            self.session.query(ReadingProgress)
            .options(joinedload(ReadingProgress.book))
            .filter(ReadingProgress.user_id == user_id)
        )
        if status:
            query = query.filter(ReadingProgress.status == status)
        return query.order_by(desc(ReadingProgress.updated_at)).all()

    def upsert(
        self,
        user_id: str,
        book_id: str,
        status: Optional[str] = None,
        pages_read: Optional[int] = None,
        total_pages: Optional[int] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> ReadingProgress:
        """Create or update the progress a user has made on a book.

        Starting to read stamps started_date once. Completing stamps
        finished_date and fills pages_read from total_pages when known.

        Args:
            user_id: The reader
            book_id: The book being read
            status: Optional new reading status
            pages_read: Optional pages read so far
            total_pages: Optional page count, defaults to the book's pages
            notes: Optional notes
            now: Timestamp to use for date stamps (defaults to current UTC time)

        Returns:
            The created or updated ReadingProgress object

        Raises:
            ValueError: If the user has no profile, the book does not exist, the
                status is unknown or the page counts are inconsistent
        """
        now = now or datetime.now(UTC)
        if not self.session.query(Profile).filter(Profile.user_id == user_id).first():
            raise ValueError(f"No profile for user '{user_id}'")
        book = self.session.query(Book).filter(Book.id == book_id).one_or_none()
        if not book:
            raise ValueError(f"Book '{book_id}' not found")

        if status is not None:
            try:
                status = ReadingStatus(status).value
            except ValueError:
                raise ValueError(f"Invalid reading status '{status}'")

        progress = self.get(user_id, book_id)
        current_total = progress.total_pages if progress else book.pages
        current_read = progress.pages_read if progress else None
        effective_total = total_pages if total_pages is not None else current_total
        effective_read = pages_read if pages_read is not None else current_read

        if effective_read is not None and effective_read < 0:
            raise ValueError("pages_read cannot be negative")
        if effective_total is not None and effective_total < 0:
            raise ValueError("total_pages cannot be negative")
        if effective_read is not None and effective_total is not None and effective_read > effective_total:
            raise ValueError("pages_read cannot exceed total_pages")

        if not progress:
            progress = ReadingProgress(
                user_id=user_id,
                book_id=book_id,
                status=ReadingStatus.WANT_TO_READ.value
            )
            self.session.add(progress)

        progress.total_pages = effective_total
        progress.pages_read = effective_read
        if notes is not None:
            progress.notes = notes
        if status is not None:
            progress.status = status

        if progress.status == ReadingStatus.READING.value and progress.started_date is None:
            progress.started_date = now
        if progress.status == ReadingStatus.COMPLETED.value:
            if progress.started_date is None:
                progress.started_date = now
            if progress.finished_date is None:
                progress.finished_date = now
            if progress.total_pages is not None:
                progress.pages_read = progress.total_pages

        self.session.commit()
        return progress
