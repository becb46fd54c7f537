"""
Runs lending actions against the database.

Each public method reads the state an action needs, asks the rules for a
plan and applies the plan in a single transaction. Status writes are
compare-and-set, so a request that moved on between the read and the write
is reported as ``invalid_state`` instead of being overwritten.
"""

import logging
import time
from datetime import datetime, timedelta, UTC
from typing import Callable, Optional, Union

from sqlalchemy.exc import DisconnectionError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from bookshelf.config import settings
from bookshelf.sa.repositories import (
    BookRepository, BorrowRequestRepository, NotificationRepository, ProfileRepository,
    validate_book_fields
)
from . import rules
from .outcomes import Applied, ErrorKind, Outcome, Rejection

logger = logging.getLogger(__name__)

STORE_ERRORS = (OperationalError, DisconnectionError, PoolTimeoutError)


class LendingService:
    """Orchestrates borrow requests, book edits and their notifications."""

    def __init__(
        self,
        session: Session,
        clock: Optional[Callable[[], datetime]] = None,
        loan_period_days: Optional[int] = None,
        retry_attempts: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the lending service.

        Args:
            session: SQLAlchemy session; one logical unit of work per call
            clock: Returns the current time (defaults to UTC now)
            loan_period_days: Days until an approved loan is due
            retry_attempts: Extra attempts when reading state hits a store failure
            retry_backoff: Base delay in seconds between read attempts
            sleep: Sleep function, replaceable in tests
        """
        self.session = session
        self.clock = clock or (lambda: datetime.now(UTC))
        self.loan_period = timedelta(
            days=loan_period_days if loan_period_days is not None else settings.loan_period_days
        )
        self.retry_attempts = retry_attempts if retry_attempts is not None else settings.store_retry_attempts
        self.retry_backoff = retry_backoff if retry_backoff is not None else settings.store_retry_backoff
        self.sleep = sleep

        self.books = BookRepository(session)
        self.requests = BorrowRequestRepository(session)
        self.notifications = NotificationRepository(session)
        self.profiles = ProfileRepository(session)

    # Public actions

    def request_borrow(self, book_id: str, borrower_id: str, notes: Optional[str] = None) -> Outcome:
        return self.execute(rules.RequestBorrow(book_id=book_id, borrower_id=borrower_id, notes=notes))

    def approve(self, request_id: str, actor_id: str, due_date: Optional[datetime] = None) -> Outcome:
        if due_date is not None and due_date.tzinfo is None:
            due_date = due_date.replace(tzinfo=UTC)
        return self.execute(rules.Approve(request_id=request_id, actor_id=actor_id, due_date=due_date))

    def reject(self, request_id: str, actor_id: str) -> Outcome:
        return self.execute(rules.Reject(request_id=request_id, actor_id=actor_id))

    def mark_returned(self, request_id: str, actor_id: str) -> Outcome:
        return self.execute(rules.MarkReturned(request_id=request_id, actor_id=actor_id))

    def delete_book(self, book_id: str, actor_id: str) -> Outcome:
        return self.execute(rules.DeleteBook(book_id=book_id, actor_id=actor_id))

    def edit_book(self, book_id: str, actor_id: str, **changes) -> Outcome:
        """Apply an owner's edit to a book.

        Raises:
            ValueError: If a changed field holds an invalid value
        """
        cleaned = validate_book_fields(changes)
        return self.execute(rules.EditBook(book_id=book_id, actor_id=actor_id, changes=cleaned))

    def execute(self, action: rules.Action) -> Outcome:
        """Read state, plan and apply a single lending action."""
        state = self._load_with_retry(action)
        if isinstance(state, Rejection):
            self.session.rollback()
            return state

        decision = rules.plan(action, state, self.clock(), self.loan_period)
        if isinstance(decision, Rejection):
            # Nothing was written; end the read transaction
            self.session.rollback()
            logger.info("%s rejected (%s): %s", type(action).__name__, decision.kind.value, decision.message)
            return decision
        return self.apply(decision)

    def apply(self, plan: rules.TransitionPlan) -> Outcome:
        """Apply every write of a plan in one transaction, or none of them.

        Args:
            plan: A plan produced by the rules

        Returns:
            Applied with the touched entities, or a Rejection if a guard no
            longer holds or the store failed
        """
        try:
            result = self._write(plan)
            if isinstance(result, Rejection):
                self.session.rollback()
                logger.info("%s lost a race (%s): %s", plan.action, result.kind.value, result.message)
                return result
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info("%s violated a constraint: %s", plan.action, e.orig)
            return Rejection(ErrorKind.CONFLICT, "The book already has an active borrow request")
        except STORE_ERRORS as e:
            self.session.rollback()
            logger.error("%s failed while writing, nothing applied: %s", plan.action, e)
            return Rejection(ErrorKind.STORE_UNAVAILABLE, "The database is unavailable, please try again")

        logger.info(
            "%s applied (request=%s, book=%s, notifications=%d)",
            plan.action,
            result.request.id if result.request is not None else None,
            plan.book_id or plan.delete_book_id,
            len(result.notifications)
        )
        return result

    # Internals

    def _load_with_retry(self, action: rules.Action) -> Union[rules.LendingState, Rejection]:
        attempt = 0
        while True:
            try:
                return self._load_state(action)
            except STORE_ERRORS as e:
                self.session.rollback()
                if attempt >= self.retry_attempts:
                    logger.error("Giving up on %s after %d attempts: %s", type(action).__name__, attempt + 1, e)
                    return Rejection(ErrorKind.STORE_UNAVAILABLE, "The database is unavailable, please try again")
                delay = self.retry_backoff * (2 ** attempt)
                logger.warning("Store unavailable reading state for %s, retrying in %.2fs: %s",
                               type(action).__name__, delay, e)
                self.sleep(delay)
                attempt += 1

    def _load_state(self, action: rules.Action) -> Union[rules.LendingState, Rejection]:
        if isinstance(action, rules.RequestBorrow):
            borrower = self.profiles.get_by_user_id(action.borrower_id)
            if borrower is None:
                return Rejection(ErrorKind.NOT_FOUND, f"No profile for user {action.borrower_id}")
            return self._book_state(action.book_id, actor_name=borrower.full_name)

        if isinstance(action, (rules.DeleteBook, rules.EditBook)):
            return self._book_state(action.book_id)

        request = self.requests.get_by_id(action.request_id)
        actor = self.profiles.get_by_user_id(action.actor_id)
        book = self.books.get_by_id(request.book_id) if request is not None and request.book_id else None
        return rules.LendingState(
            book=rules.BookSnapshot.from_model(book) if book is not None else None,
            request=rules.RequestSnapshot.from_model(request) if request is not None else None,
            actor_name=actor.full_name if actor is not None else None,
        )

    def _book_state(self, book_id: str, actor_name: Optional[str] = None) -> rules.LendingState:
        book = self.books.get_by_id(book_id)
        active = self.requests.list_active_for_book(book_id) if book is not None else []
        return rules.LendingState(
            book=rules.BookSnapshot.from_model(book) if book is not None else None,
            active_requests=tuple(rules.RequestSnapshot.from_model(r) for r in active),
            actor_name=actor_name,
        )

    def _write(self, plan: rules.TransitionPlan) -> Outcome:
        request = None
        request_id = None

        if plan.idle_book_id and self.requests.list_active_for_book(plan.idle_book_id):
            return Rejection(ErrorKind.CONFLICT, "The book has an active borrow request")

        if plan.new_request:
            new = plan.new_request
            request = self.requests.add_request(
                book_id=new.book_id,
                borrower_id=new.borrower_id,
                lender_id=new.lender_id,
                requested_date=new.requested_date,
                notes=new.notes
            )
            request_id = request.id

        if plan.request_change:
            change = plan.request_change
            if not self.requests.compare_and_set_status(
                change.request_id, change.expected_status, change.new_status, dict(change.values)
            ):
                return Rejection(ErrorKind.INVALID_STATE, f"Request is no longer {change.expected_status}")
            request_id = change.request_id

        if plan.book_change:
            change = plan.book_change
            if not self.books.compare_and_set(change.book_id, change.expected_status, dict(change.values)):
                return Rejection(ErrorKind.INVALID_STATE, f"Book is no longer {change.expected_status}")

        if plan.delete_book_id:
            if not self.books.delete_book(plan.delete_book_id):
                return Rejection(ErrorKind.NOT_FOUND, "Book not found")

        notifications = [
            self.notifications.add(
                user_id=n.user_id,
                type=n.type,
                title=n.title,
                message=n.message,
                borrow_request_id=request_id
            )
            for n in plan.notifications
        ]

        if request is None and request_id is not None:
            request = self.requests.get_by_id(request_id)
        book = self.books.get_by_id(plan.book_id) if plan.book_id else None
        return Applied(action=plan.action, request=request, book=book, notifications=notifications)
