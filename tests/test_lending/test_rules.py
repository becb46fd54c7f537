# tests/test_lending/test_rules.py
import pytest
from datetime import datetime, timedelta, UTC
from bookshelf.lending import rules
from bookshelf.lending.outcomes import ErrorKind, Rejection
from bookshelf.lending.rules import (
    Approve, BookSnapshot, DeleteBook, EditBook, LendingState, MarkReturned, Reject,
    RequestBorrow, RequestSnapshot, TransitionPlan
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)

BOOK = BookSnapshot(id="b1", owner_id="alice", status="available", title="The Hobbit")
PENDING = RequestSnapshot(id="r1", book_id="b1", borrower_id="bob", lender_id="alice", status="pending")
APPROVED = RequestSnapshot(id="r1", book_id="b1", borrower_id="bob", lender_id="alice", status="approved")
BORROWED = BookSnapshot(id="b1", owner_id="alice", status="borrowed", title="The Hobbit")

def plan(action, **state):
    return rules.plan(action, LendingState(**state), NOW)

def assert_rejected(outcome, kind):
    assert isinstance(outcome, Rejection)
    assert outcome.kind is kind
    assert outcome.ok is False

# RequestBorrow

def test_request_borrow_plan():
    outcome = plan(RequestBorrow("b1", "bob", notes="Please"), book=BOOK, actor_name="Bob Borrower")
    assert isinstance(outcome, TransitionPlan)
    assert outcome.new_request.lender_id == "alice"
    assert outcome.new_request.requested_date == NOW
    assert outcome.new_request.notes == "Please"
    assert outcome.book_change.expected_status == "available"
    assert outcome.book_change.values == {}
    assert outcome.idle_book_id is None
    (notice,) = outcome.notifications
    assert notice.user_id == "alice"
    assert notice.type == "borrow_request"
    assert notice.title == "New borrow request"
    assert notice.message == 'Bob Borrower wants to borrow "The Hobbit".'

def test_request_borrow_missing_book():
    assert_rejected(plan(RequestBorrow("b1", "bob"), book=None), ErrorKind.NOT_FOUND)

def test_owner_cannot_borrow_own_book():
    assert_rejected(plan(RequestBorrow("b1", "alice"), book=BOOK), ErrorKind.INVALID_ACTOR)

def test_request_borrow_with_active_request():
    outcome = plan(RequestBorrow("b1", "carol"), book=BOOK, active_requests=(PENDING,))
    assert_rejected(outcome, ErrorKind.CONFLICT)

@pytest.mark.parametrize("status", ["borrowed", "for_sale", "not_available"])
def test_request_borrow_unavailable_book(status):
    book = BookSnapshot(id="b1", owner_id="alice", status=status, title="The Hobbit")
    assert_rejected(plan(RequestBorrow("b1", "bob"), book=book), ErrorKind.INVALID_STATE)

def test_unknown_name_falls_back():
    outcome = plan(RequestBorrow("b1", "bob"), book=BOOK)
    assert outcome.notifications[0].message.startswith("Someone wants to borrow")

# Approve / Reject

def test_approve_plan_uses_loan_period():
    outcome = plan(Approve("r1", "alice"), book=BOOK, request=PENDING, actor_name="Alice Lender")
    change = outcome.request_change
    assert (change.expected_status, change.new_status) == ("pending", "approved")
    assert change.values["approved_date"] == NOW
    assert change.values["due_date"] == NOW + timedelta(days=14)
    assert outcome.book_change.expected_status == "available"
    assert outcome.book_change.values == {"status": "borrowed"}
    (notice,) = outcome.notifications
    assert notice.user_id == "bob"
    assert notice.type == "request_approved"
    assert "2025-03-15" in notice.message

def test_approve_with_due_date():
    due = NOW + timedelta(days=3)
    outcome = plan(Approve("r1", "alice", due_date=due), book=BOOK, request=PENDING)
    assert outcome.request_change.values["due_date"] == due

def test_approve_due_date_in_past():
    outcome = plan(Approve("r1", "alice", due_date=NOW - timedelta(days=1)), book=BOOK, request=PENDING)
    assert_rejected(outcome, ErrorKind.INVALID_STATE)

def test_only_lender_can_approve():
    assert_rejected(plan(Approve("r1", "bob"), book=BOOK, request=PENDING), ErrorKind.FORBIDDEN)

def test_approve_missing_request():
    assert_rejected(plan(Approve("r1", "alice"), book=BOOK), ErrorKind.NOT_FOUND)

def test_approve_twice():
    assert_rejected(plan(Approve("r1", "alice"), book=BORROWED, request=APPROVED), ErrorKind.INVALID_STATE)

def test_approve_when_book_not_available():
    book = BookSnapshot(id="b1", owner_id="alice", status="not_available", title="The Hobbit")
    assert_rejected(plan(Approve("r1", "alice"), book=book, request=PENDING), ErrorKind.INVALID_STATE)

def test_reject_plan_leaves_book_alone():
    outcome = plan(Reject("r1", "alice"), book=BOOK, request=PENDING, actor_name="Alice Lender")
    assert outcome.request_change.new_status == "rejected"
    assert outcome.book_change is None
    assert outcome.notifications[0].type == "request_rejected"
    assert outcome.notifications[0].user_id == "bob"

def test_only_lender_can_reject():
    assert_rejected(plan(Reject("r1", "carol"), book=BOOK, request=PENDING), ErrorKind.FORBIDDEN)

def test_reject_finished_request():
    returned = RequestSnapshot(id="r1", book_id="b1", borrower_id="bob", lender_id="alice", status="returned")
    assert_rejected(plan(Reject("r1", "alice"), book=BOOK, request=returned), ErrorKind.INVALID_STATE)

# MarkReturned

@pytest.mark.parametrize("actor,recipient", [("bob", "alice"), ("alice", "bob")])
def test_either_party_can_mark_returned(actor, recipient):
    outcome = plan(MarkReturned("r1", actor), book=BORROWED, request=APPROVED)
    assert outcome.request_change.new_status == "returned"
    assert outcome.request_change.values == {"returned_date": NOW}
    assert outcome.book_change.values == {"status": "available"}
    assert outcome.notifications[0].user_id == recipient
    assert outcome.notifications[0].type == "book_returned"

def test_stranger_cannot_mark_returned():
    assert_rejected(plan(MarkReturned("r1", "carol"), book=BORROWED, request=APPROVED), ErrorKind.FORBIDDEN)

def test_mark_returned_requires_approval():
    assert_rejected(plan(MarkReturned("r1", "bob"), book=BOOK, request=PENDING), ErrorKind.INVALID_STATE)

# DeleteBook / EditBook

def test_delete_plan():
    outcome = plan(DeleteBook("b1", "alice"), book=BOOK)
    assert outcome.delete_book_id == "b1"
    assert outcome.idle_book_id == "b1"
    assert outcome.notifications == ()

def test_delete_needs_owner():
    assert_rejected(plan(DeleteBook("b1", "bob"), book=BOOK), ErrorKind.FORBIDDEN)

def test_delete_with_active_request():
    assert_rejected(plan(DeleteBook("b1", "alice"), book=BOOK, active_requests=(PENDING,)), ErrorKind.CONFLICT)

def test_edit_plan():
    outcome = plan(EditBook("b1", "alice", {"title": "The Hobbit (illustrated)"}), book=BOOK)
    assert outcome.book_change.expected_status == "available"
    assert outcome.book_change.values["title"] == "The Hobbit (illustrated)"
    assert outcome.idle_book_id is None

def test_edit_status_requires_idle_book():
    outcome = plan(EditBook("b1", "alice", {"status": "not_available"}), book=BOOK)
    assert outcome.idle_book_id == "b1"
    assert outcome.book_change.values["status"] == "not_available"

def test_edit_cannot_set_borrowed():
    outcome = plan(EditBook("b1", "alice", {"status": "borrowed"}), book=BOOK)
    assert_rejected(outcome, ErrorKind.INVALID_STATE)

def test_edit_status_with_active_request():
    outcome = plan(EditBook("b1", "alice", {"status": "not_available"}), book=BOOK, active_requests=(PENDING,))
    assert_rejected(outcome, ErrorKind.CONFLICT)

def test_edit_other_fields_with_active_request():
    outcome = plan(EditBook("b1", "alice", {"genre": "Fantasy"}), book=BOOK, active_requests=(PENDING,))
    assert isinstance(outcome, TransitionPlan)

def test_edit_needs_owner():
    assert_rejected(plan(EditBook("b1", "bob", {"genre": "x"}), book=BOOK), ErrorKind.FORBIDDEN)

def test_unknown_action():
    with pytest.raises(TypeError):
        rules.plan(object(), LendingState(), NOW)
