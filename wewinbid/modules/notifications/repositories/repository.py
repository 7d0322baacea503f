import uuid
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from wewinbid.modules.notifications.db.schema import Notification, NotificationPreference, NotificationSent


class NotificationRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: uuid.UUID, limit: int, offset: int, unread_only: bool = False) -> Tuple[List[Notification], int]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        total = query.count()
        items = query.order_by(Notification.created_at.desc()).offset(offset).limit(limit).all()
        return items, total

    def count_unread(self, user_id: uuid.UUID) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .count()
        )

    def get_for_user(self, user_id: uuid.UUID, notification_id: uuid.UUID) -> Optional[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    def mark_read(self, user_id: uuid.UUID, notification_ids: Optional[List[uuid.UUID]] = None) -> int:
        query = self.db.query(Notification).filter(Notification.user_id == user_id, Notification.read.is_(False))
        if notification_ids is not None:
            query = query.filter(Notification.id.in_(notification_ids))
        return query.update({Notification.read: True}, synchronize_session=False)

    def get_preferences(self, user_id: uuid.UUID) -> Optional[NotificationPreference]:
        return self.db.query(NotificationPreference).filter(NotificationPreference.user_id == user_id).first()

    def was_sent(self, notification_type: str, reference_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return (
            self.db.query(NotificationSent.id)
            .filter(
                NotificationSent.notification_type == notification_type,
                NotificationSent.reference_id == reference_id,
                NotificationSent.user_id == user_id,
            )
            .first()
            is not None
        )

    def record_sent(self, notification_type: str, reference_id: uuid.UUID, user_id: uuid.UUID) -> None:
        self.db.add(NotificationSent(notification_type=notification_type, reference_id=reference_id, user_id=user_id))
