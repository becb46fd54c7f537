# api/routes/borrow_requests.py

from typing import Optional
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from bookshelf import views
from bookshelf.lending import LendingService
from bookshelf.sa.database import get_db
from bookshelf.sa.repositories import BorrowRequestRepository
from api.deps import get_actor_id, raise_for_rejection
from api.schemas.lending import ApproveRequest, BorrowRequest, BorrowRequestCreate, RequestList

router = APIRouter(prefix="/requests", tags=["requests"])

@router.get("", response_model=RequestList)
def get_my_requests(
    status_filter: Optional[str] = Query(None, alias="status", description="Only requests in this status"),
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    """
    Get every request where the signed-in user is borrower or lender.

    Each item names the other party and whether the user can respond to it
    or mark it returned.
    """
    requests = BorrowRequestRepository(db).list_for_user(actor_id, status=status_filter)
    items = views.label_requests(requests, actor_id)
    return RequestList(items=items, total=len(items))

@router.post("", response_model=BorrowRequest, status_code=status.HTTP_201_CREATED)
def send_request(
    payload: BorrowRequestCreate,
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    outcome = LendingService(db).request_borrow(payload.book_id, actor_id, notes=payload.notes)
    if not outcome.ok:
        raise_for_rejection(outcome)
    return outcome.request

@router.post("/{request_id}/approve", response_model=BorrowRequest)
def approve_request(
    request_id: str,
    payload: Optional[ApproveRequest] = Body(None),
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    due_date = payload.due_date if payload else None
    outcome = LendingService(db).approve(request_id, actor_id, due_date=due_date)
    if not outcome.ok:
        raise_for_rejection(outcome)
    return outcome.request

@router.post("/{request_id}/reject", response_model=BorrowRequest)
def reject_request(request_id: str, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    outcome = LendingService(db).reject(request_id, actor_id)
    if not outcome.ok:
        raise_for_rejection(outcome)
    return outcome.request

@router.post("/{request_id}/return", response_model=BorrowRequest)
def return_book(request_id: str, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    outcome = LendingService(db).mark_returned(request_id, actor_id)
    if not outcome.ok:
        raise_for_rejection(outcome)
    return outcome.request
