# api/routes/notifications.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bookshelf.sa.database import get_db
from bookshelf.sa.repositories import NotificationRepository
from api.deps import get_actor_id
from api.schemas.lending import MarkAllReadResult, Notification, NotificationList

router = APIRouter(prefix="/notifications", tags=["notifications"])

@router.get("", response_model=NotificationList)
def get_my_notifications(
    unread: bool = Query(False, description="Only unread notifications"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of notifications"),
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    repo = NotificationRepository(db)
    items = repo.list_for_user(actor_id, unread_only=unread, limit=limit)
    return NotificationList(items=items, total=len(items), unread=repo.count_unread(actor_id))

@router.post("/read-all", response_model=MarkAllReadResult)
def mark_all_read(actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    return MarkAllReadResult(updated=NotificationRepository(db).mark_all_read(actor_id))

@router.post("/{notification_id}/read", response_model=Notification)
def mark_read(notification_id: str, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    notification = NotificationRepository(db).mark_read(notification_id, actor_id)
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification
