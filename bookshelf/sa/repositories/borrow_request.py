from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import desc, or_
from sqlalchemy.orm import Session, joinedload
from bookshelf.sa.models import BorrowRequest, RequestStatus, ACTIVE_REQUEST_STATUSES

class BorrowRequestRepository:
    """Repository for managing BorrowRequest entities.

    Requests are never deleted. Writes made here belong to a lending
    transition, so they flush but leave the commit to the caller.
    """

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, request_id: str) -> Optional[BorrowRequest]:
        """Get a borrow request by its ID.

        Args:
            request_id: The ID of the request to retrieve

        Returns:
            The BorrowRequest object if found, None otherwise
        """
        return self.session.query(BorrowRequest).filter(BorrowRequest.id == request_id).one_or_none()

    def get_with_details(self, request_id: str) -> Optional[BorrowRequest]:
        """Get a request with its book, borrower and lender loaded."""
        return (
            self.session.query(BorrowRequest)
            .options(
                joinedload(BorrowRequest.book),
                joinedload(BorrowRequest.borrower),
                joinedload(BorrowRequest.lender)
            )
            .filter(BorrowRequest.id == request_id)
            .one_or_none()
        )

    def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[BorrowRequest]:
        """Get requests where the user is either borrower or lender.

        Args:
            user_id: The user identifier
            status: Optional status to filter by

        Returns:
            List of BorrowRequest objects with book and both profiles loaded,
            newest first
        """
        query = (
            self.session.query(BorrowRequest)
            .options(
                joinedload(BorrowRequest.book),
                joinedload(BorrowRequest.borrower),
                joinedload(BorrowRequest.lender)
            )
            .filter(or_(
                BorrowRequest.borrower_id == user_id,
                BorrowRequest.lender_id == user_id
            ))
        )
        if status:
            query = query.filter(BorrowRequest.status == status)
        return query.order_by(desc(BorrowRequest.created_at)).all()

    def list_active_for_book(self, book_id: str) -> List[BorrowRequest]:
        """Get the pending or approved requests referencing a book."""
        return (
            self.session.query(BorrowRequest)
            .filter(
                BorrowRequest.book_id == book_id,
                BorrowRequest.status.in_(ACTIVE_REQUEST_STATUSES)
            )
            .all()
        )

    def count_pending_for_user(self, user_id: str) -> int:
        """Count pending requests where the user is borrower or lender."""
        return (
            self.session.query(BorrowRequest)
            .filter(
                or_(BorrowRequest.borrower_id == user_id, BorrowRequest.lender_id == user_id),
                BorrowRequest.status == RequestStatus.PENDING.value
            )
            .count()
        )

    def add_request(
        self,
        book_id: str,
        borrower_id: str,
        lender_id: str,
        requested_date: datetime,
        notes: Optional[str] = None
    ) -> BorrowRequest:
        """Insert a pending request and flush it so constraint violations surface.

        Args:
            book_id: The requested book
            borrower_id: The requesting user
            lender_id: The book's owner
            requested_date: When the request was made
            notes: Optional message to the lender

        Returns:
            The new BorrowRequest object

        Raises:
            sqlalchemy.exc.IntegrityError: If the book already has an active request
        """
        request = BorrowRequest(
            book_id=book_id,
            borrower_id=borrower_id,
            lender_id=lender_id,
            status=RequestStatus.PENDING.value,
            requested_date=requested_date,
            notes=notes
        )
        self.session.add(request)
        self.session.flush()
        return request

    def compare_and_set_status(
        self,
        request_id: str,
        expected_status: str,
        new_status: str,
        values: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Move a request to a new status only if it is still in the expected one.

        Args:
            request_id: The ID of the request
            expected_status: Status the request must currently have
            new_status: Status to set
            values: Additional column values (dates) to set alongside

        Returns:
            True if exactly one row was updated, False if the request was
            missing or had already moved on
        """
        updates = dict(values or {})
        updates['status'] = new_status
        updated = (
            self.session.query(BorrowRequest)
            .filter(BorrowRequest.id == request_id, BorrowRequest.status == expected_status)
            .update(updates, synchronize_session='fetch')
        )
        return updated == 1
