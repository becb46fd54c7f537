# api/routes/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookshelf import views
from bookshelf.sa.database import get_db
from bookshelf.sa.repositories import BookRepository, BorrowRequestRepository, NotificationRepository
from api.deps import get_actor_id
from api.schemas.lending import DashboardStats

router = APIRouter(tags=["dashboard"])

@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    stats = views.dashboard_stats(
        BookRepository(db).list_by_owner(actor_id),
        BorrowRequestRepository(db).list_for_user(actor_id)
    )
    return DashboardStats(
        total_books=stats.total_books,
        available_books=stats.available_books,
        borrowed_books=stats.borrowed_books,
        pending_requests=stats.pending_requests,
        unread_notifications=NotificationRepository(db).count_unread(actor_id)
    )
