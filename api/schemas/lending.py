# api/schemas/lending.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

class BorrowRequestCreate(BaseModel):
    book_id: str
    notes: Optional[str] = None

class ApproveRequest(BaseModel):
    due_date: Optional[datetime] = None

class BorrowRequest(BaseModel):
    id: str
    book_id: Optional[str] = None
    borrower_id: str
    lender_id: str
    status: str
    notes: Optional[str] = None
    requested_date: datetime
    approved_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    returned_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class RequestListing(BaseModel):
    id: str
    status: str
    book_title: Optional[str] = None
    book_author: Optional[str] = None
    counterparty_role: str
    counterparty_name: Optional[str] = None
    notes: Optional[str] = None
    can_respond: bool
    can_return: bool
    requested_date: Optional[datetime] = None
    due_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class RequestList(BaseModel):
    items: List[RequestListing]
    total: int

class Notification(BaseModel):
    id: str
    user_id: str
    type: str
    title: str
    message: str
    borrow_request_id: Optional[str] = None
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class NotificationList(BaseModel):
    items: List[Notification]
    total: int
    unread: int

class MarkAllReadResult(BaseModel):
    updated: int

class DashboardStats(BaseModel):
    total_books: int
    available_books: int
    borrowed_books: int
    pending_requests: int
    unread_notifications: int = 0

    model_config = ConfigDict(from_attributes=True)
