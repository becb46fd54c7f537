# bookshelf/lending/__init__.py
from .outcomes import Applied, ErrorKind, Outcome, Rejection
from .rules import (
    plan, LendingState, BookSnapshot, RequestSnapshot, TransitionPlan,
    RequestBorrow, Approve, Reject, MarkReturned, DeleteBook, EditBook
)
from .service import LendingService

__all__ = [
    'Applied',
    'ErrorKind',
    'Outcome',
    'Rejection',
    'plan',
    'LendingState',
    'BookSnapshot',
    'RequestSnapshot',
    'TransitionPlan',
    'RequestBorrow',
    'Approve',
    'Reject',
    'MarkReturned',
    'DeleteBook',
    'EditBook',
    'LendingService'
]
