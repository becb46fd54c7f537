"""
Lifecycle rules for borrowing.

``plan`` is a pure function: given an action, a snapshot of the entities it
touches and the current time, it returns either the writes the action
requires (a TransitionPlan) or a Rejection. Nothing here talks to the
database, so every rule can be tested with plain values.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from bookshelf.sa.models.enums import BookStatus, RequestStatus, NotificationType
from .outcomes import ErrorKind, Rejection

DEFAULT_LOAN_PERIOD = timedelta(days=14)


# Snapshots of store rows

@dataclass(frozen=True)
class BookSnapshot:
    id: str
    owner_id: str
    status: str
    title: str

    @classmethod
    def from_model(cls, book) -> "BookSnapshot":
        return cls(id=book.id, owner_id=book.owner_id, status=book.status, title=book.title)


@dataclass(frozen=True)
class RequestSnapshot:
    id: str
    book_id: Optional[str]
    borrower_id: str
    lender_id: str
    status: str

    @classmethod
    def from_model(cls, request) -> "RequestSnapshot":
        return cls(
            id=request.id,
            book_id=request.book_id,
            borrower_id=request.borrower_id,
            lender_id=request.lender_id,
            status=request.status,
        )


@dataclass(frozen=True)
class LendingState:
    """Everything the rules need to decide one action."""
    book: Optional[BookSnapshot] = None
    request: Optional[RequestSnapshot] = None
    active_requests: Tuple[RequestSnapshot, ...] = ()
    actor_name: Optional[str] = None


# Actions

@dataclass(frozen=True)
class RequestBorrow:
    book_id: str
    borrower_id: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class Approve:
    request_id: str
    actor_id: str
    due_date: Optional[datetime] = None


@dataclass(frozen=True)
class Reject:
    request_id: str
    actor_id: str


@dataclass(frozen=True)
class MarkReturned:
    request_id: str
    actor_id: str


@dataclass(frozen=True)
class DeleteBook:
    book_id: str
    actor_id: str


@dataclass(frozen=True)
class EditBook:
    book_id: str
    actor_id: str
    changes: Mapping[str, Any] = field(default_factory=dict)


Action = Union[RequestBorrow, Approve, Reject, MarkReturned, DeleteBook, EditBook]


# Plan pieces

@dataclass(frozen=True)
class NewRequest:
    book_id: str
    borrower_id: str
    lender_id: str
    requested_date: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class RequestChange:
    request_id: str
    expected_status: str
    new_status: str
    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BookChange:
    book_id: str
    expected_status: str
    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NewNotification:
    user_id: str
    type: str
    title: str
    message: str


@dataclass(frozen=True)
class TransitionPlan:
    action: str
    new_request: Optional[NewRequest] = None
    request_change: Optional[RequestChange] = None
    book_change: Optional[BookChange] = None
    delete_book_id: Optional[str] = None
    # Book that must have no pending or approved request when the plan is written
    idle_book_id: Optional[str] = None
    notifications: Tuple[NewNotification, ...] = ()

    @property
    def book_id(self) -> Optional[str]:
        if self.book_change:
            return self.book_change.book_id
        if self.new_request:
            return self.new_request.book_id
        return None


def _name(state: LendingState) -> str:
    return state.actor_name or "Someone"


def _title(state: LendingState) -> str:
    return state.book.title if state.book else "the book"


def _plan_request_borrow(action: RequestBorrow, state: LendingState, now: datetime, loan_period: timedelta):
    book = state.book
    if book is None:
        return Rejection(ErrorKind.NOT_FOUND, f"Book {action.book_id} not found")
    if action.borrower_id == book.owner_id:
        return Rejection(ErrorKind.INVALID_ACTOR, "You cannot borrow your own book")
    if state.active_requests:
        return Rejection(ErrorKind.CONFLICT, f'"{book.title}" already has an active borrow request')
    if book.status != BookStatus.AVAILABLE.value:
        return Rejection(ErrorKind.INVALID_STATE, f'"{book.title}" is not available for borrowing')

    return TransitionPlan(
        action="request_borrow",
        new_request=NewRequest(
            book_id=book.id,
            borrower_id=action.borrower_id,
            lender_id=book.owner_id,
            requested_date=now,
            notes=action.notes,
        ),
        book_change=BookChange(book_id=book.id, expected_status=BookStatus.AVAILABLE.value),
        notifications=(
            NewNotification(
                user_id=book.owner_id,
                type=NotificationType.BORROW_REQUEST.value,
                title="New borrow request",
                message=f'{_name(state)} wants to borrow "{book.title}".',
            ),
        ),
    )


def _check_lender_can_respond(action, state: LendingState) -> Optional[Rejection]:
    request = state.request
    if request is None:
        return Rejection(ErrorKind.NOT_FOUND, f"Borrow request {action.request_id} not found")
    if action.actor_id != request.lender_id:
        return Rejection(ErrorKind.FORBIDDEN, "Only the lender can respond to this request")
    if request.status != RequestStatus.PENDING.value:
        return Rejection(ErrorKind.INVALID_STATE, f"Request is already {request.status}")
    return None


def _plan_approve(action: Approve, state: LendingState, now: datetime, loan_period: timedelta):
    rejection = _check_lender_can_respond(action, state)
    if rejection:
        return rejection
    request, book = state.request, state.book
    if book is None:
        return Rejection(ErrorKind.NOT_FOUND, "The requested book no longer exists")
    if book.status != BookStatus.AVAILABLE.value:
        return Rejection(ErrorKind.INVALID_STATE, f'"{book.title}" is not available to lend')

    due_date = action.due_date or now + loan_period
    if due_date <= now:
        return Rejection(ErrorKind.INVALID_STATE, "Due date must be in the future")

    return TransitionPlan(
        action="approve",
        request_change=RequestChange(
            request_id=request.id,
            expected_status=RequestStatus.PENDING.value,
            new_status=RequestStatus.APPROVED.value,
            values={"approved_date": now, "due_date": due_date},
        ),
        book_change=BookChange(
            book_id=book.id,
            expected_status=BookStatus.AVAILABLE.value,
            values={"status": BookStatus.BORROWED.value},
        ),
        notifications=(
            NewNotification(
                user_id=request.borrower_id,
                type=NotificationType.REQUEST_APPROVED.value,
                title="Borrow request approved",
                message=(
                    f'{_name(state)} approved your request to borrow "{book.title}". '
                    f"Please return it by {due_date:%Y-%m-%d}."
                ),
            ),
        ),
    )


def _plan_reject(action: Reject, state: LendingState, now: datetime, loan_period: timedelta):
    rejection = _check_lender_can_respond(action, state)
    if rejection:
        return rejection
    request = state.request
    return TransitionPlan(
        action="reject",
        request_change=RequestChange(
            request_id=request.id,
            expected_status=RequestStatus.PENDING.value,
            new_status=RequestStatus.REJECTED.value,
        ),
        notifications=(
            NewNotification(
                user_id=request.borrower_id,
                type=NotificationType.REQUEST_REJECTED.value,
                title="Borrow request declined",
                message=f'{_name(state)} declined your request to borrow "{_title(state)}".',
            ),
        ),
    )


def _plan_mark_returned(action: MarkReturned, state: LendingState, now: datetime, loan_period: timedelta):
    request, book = state.request, state.book
    if request is None:
        return Rejection(ErrorKind.NOT_FOUND, f"Borrow request {action.request_id} not found")
    if action.actor_id not in (request.borrower_id, request.lender_id):
        return Rejection(ErrorKind.FORBIDDEN, "Only the borrower or the lender can mark a book returned")
    if request.status != RequestStatus.APPROVED.value:
        return Rejection(ErrorKind.INVALID_STATE, f"Request is {request.status}, not approved")
    if book is None:
        return Rejection(ErrorKind.NOT_FOUND, "The borrowed book no longer exists")
    if book.status != BookStatus.BORROWED.value:
        return Rejection(ErrorKind.INVALID_STATE, f'"{book.title}" is not marked as borrowed')

    other_party = request.lender_id if action.actor_id == request.borrower_id else request.borrower_id
    return TransitionPlan(
        action="mark_returned",
        request_change=RequestChange(
            request_id=request.id,
            expected_status=RequestStatus.APPROVED.value,
            new_status=RequestStatus.RETURNED.value,
            values={"returned_date": now},
        ),
        book_change=BookChange(
            book_id=book.id,
            expected_status=BookStatus.BORROWED.value,
            values={"status": BookStatus.AVAILABLE.value},
        ),
        notifications=(
            NewNotification(
                user_id=other_party,
                type=NotificationType.BOOK_RETURNED.value,
                title="Book returned",
                message=f'{_name(state)} marked "{book.title}" as returned.',
            ),
        ),
    )


def _check_owner(action, state: LendingState) -> Optional[Rejection]:
    if state.book is None:
        return Rejection(ErrorKind.NOT_FOUND, f"Book {action.book_id} not found")
    if action.actor_id != state.book.owner_id:
        return Rejection(ErrorKind.FORBIDDEN, "Only the owner can change this book")
    return None


def _plan_delete_book(action: DeleteBook, state: LendingState, now: datetime, loan_period: timedelta):
    rejection = _check_owner(action, state)
    if rejection:
        return rejection
    if state.active_requests:
        return Rejection(
            ErrorKind.CONFLICT,
            f'"{state.book.title}" has an active borrow request and cannot be deleted'
        )
    return TransitionPlan(action="delete_book", delete_book_id=state.book.id, idle_book_id=state.book.id)


def _plan_edit_book(action: EditBook, state: LendingState, now: datetime, loan_period: timedelta):
    rejection = _check_owner(action, state)
    if rejection:
        return rejection
    book = state.book
    values: Dict[str, Any] = dict(action.changes)
    values["updated_at"] = now
    new_status = values.get("status")
    status_changes = new_status is not None and new_status != book.status
    if status_changes:
        if new_status == BookStatus.BORROWED.value:
            return Rejection(ErrorKind.INVALID_STATE, "A book only becomes borrowed through an approved request")
        if state.active_requests:
            return Rejection(
                ErrorKind.CONFLICT,
                f'"{book.title}" has an active borrow request; its status cannot change'
            )
    return TransitionPlan(
        action="edit_book",
        book_change=BookChange(book_id=book.id, expected_status=book.status, values=values),
        idle_book_id=book.id if status_changes else None,
    )


_PLANNERS = {
    RequestBorrow: _plan_request_borrow,
    Approve: _plan_approve,
    Reject: _plan_reject,
    MarkReturned: _plan_mark_returned,
    DeleteBook: _plan_delete_book,
    EditBook: _plan_edit_book,
}


def plan(
    action: Action,
    state: LendingState,
    now: datetime,
    loan_period: timedelta = DEFAULT_LOAN_PERIOD
) -> Union[TransitionPlan, Rejection]:
    """Decide whether an action is valid and which writes it requires.

    Args:
        action: The requested lifecycle action; carries the acting user
        state: Snapshot of the book, request and active requests involved
        now: Current time, used for every timestamp the plan sets
        loan_period: Default time until an approved loan is due

    Returns:
        A TransitionPlan describing the writes, or a Rejection explaining why
        the action is not allowed
    """
    planner = _PLANNERS.get(type(action))
    if planner is None:
        raise TypeError(f"Unknown lending action: {action!r}")
    return planner(action, state, now, loan_period)
