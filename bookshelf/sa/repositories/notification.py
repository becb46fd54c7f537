from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session
from bookshelf.sa.models import Notification

class NotificationRepository:
    """Repository for managing Notification entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        return self.session.query(Notification).filter(Notification.id == notification_id).one_or_none()

    def list_for_user(self, user_id: str, unread_only: bool = False, limit: Optional[int] = None) -> List[Notification]:
        """Get a user's notifications, newest first.

        Args:
            user_id: The recipient
            unread_only: Only return notifications not yet read
            limit: Optional maximum number of results

        Returns:
            List of Notification objects
        """
        query = self.session.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        query = query.order_by(desc(Notification.created_at))
        if limit:
            query = query.limit(limit)
        return query.all()

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .count()
        )

    def add(
        self,
        user_id: str,
        type: str,
        title: str,
        message: str,
        borrow_request_id: Optional[str] = None
    ) -> Notification:
        """Queue a notification in the current transaction. Does not commit."""
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            borrow_request_id=borrow_request_id,
            read=False
        )
        self.session.add(notification)
        self.session.flush()
        return notification

    def mark_read(self, notification_id: str, user_id: str) -> Optional[Notification]:
        """Mark a notification as read.

        Only the recipient may do this; any other user sees it as missing.

        Args:
            notification_id: The notification to mark
            user_id: The acting user

        Returns:
            The updated Notification, or None if not found for this user
        """
        notification = (
            self.session.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .one_or_none()
        )
        if not notification:
            return None
        if not notification.read:
            notification.read = True
            self.session.commit()
        return notification

    def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of a user as read.

        Returns:
            Number of notifications updated
        """
        updated = (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .update({'read': True}, synchronize_session='fetch')
        )
        self.session.commit()
        return updated
