"""
In-app notifications with optional email delivery.

`notify` only adds rows to the session; the caller owns the transaction.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from wewinbid.core.errors import NotFoundError
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.notifications.db.schema import Notification, NotificationPreference, NotificationTypeEnum
from wewinbid.modules.notifications.repositories.repository import NotificationRepository
from wewinbid.modules.notifications.services.email_service import send_notification_email

logger = logging.getLogger(__name__)

PREFERENCE_FIELDS = (
    "email_enabled", "push_enabled", "deadline_7d", "deadline_3d", "deadline_24h",
    "tender_status_change", "team_activity", "marketing",
)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository(db)

    def get_or_create_preferences(self, user_id: uuid.UUID) -> NotificationPreference:
        prefs = self.repo.get_preferences(user_id)
        if prefs is None:
            prefs = NotificationPreference(
                user_id=user_id,
                email_enabled=True,
                push_enabled=True,
                deadline_7d=True,
                deadline_3d=True,
                deadline_24h=True,
                tender_status_change=True,
                team_activity=True,
                marketing=False,
            )
            self.db.add(prefs)
            self.db.flush()
        return prefs

    def update_preferences(self, user_id: uuid.UUID, updates: dict) -> NotificationPreference:
        prefs = self.get_or_create_preferences(user_id)
        for field, value in updates.items():
            if field in PREFERENCE_FIELDS and value is not None:
                setattr(prefs, field, value)
        self.db.commit()
        self.db.refresh(prefs)
        return prefs

    def is_enabled(self, user_id: uuid.UUID, preference_key: Optional[str]) -> bool:
        if not preference_key:
            return True
        prefs = self.repo.get_preferences(user_id)
        if prefs is None:
            return preference_key != "marketing"
        return bool(getattr(prefs, preference_key, True))

    def wants_email(self, user: User) -> bool:
        if not user.email_notifications:
            return False
        prefs = self.repo.get_preferences(user.id)
        return prefs is None or prefs.email_enabled

    def notify(
        self,
        user: User,
        type: NotificationTypeEnum,
        title: str,
        message: str,
        link: Optional[str] = None,
        tender_id: Optional[uuid.UUID] = None,
        metadata: Optional[dict] = None,
        preference_key: Optional[str] = None,
        send_email: bool = True,
        in_app: bool = True,
    ) -> Optional[Notification]:
        """
        Create a notification for `user` unless the matching preference is off.
        Returns the notification, or None when it was suppressed.
        """
        if not self.is_enabled(user.id, preference_key):
            logger.debug(f"Notification {type.value} suppressed for user {user.id} by preference '{preference_key}'")
            return None

        notification = None
        if in_app:
            notification = Notification(
                user_id=user.id,
                type=type,
                title=title,
                message=message,
                link=link,
                tender_id=tender_id,
                extra=metadata,
            )
            self.db.add(notification)

        if send_email and self.wants_email(user):
            send_notification_email(user.email, title, message, link)
        return notification

    def notify_many(self, users: List[User], **kwargs) -> List[Notification]:
        created = []
        for user in users:
            notification = self.notify(user, **kwargs)
            if notification is not None:
                created.append(notification)
        return created

    def delete(self, user_id: uuid.UUID, notification_id: uuid.UUID) -> None:
        notification = self.repo.get_for_user(user_id, notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        self.db.delete(notification)
        self.db.commit()

    def set_read(self, user_id: uuid.UUID, notification_id: uuid.UUID, read: bool) -> Notification:
        notification = self.repo.get_for_user(user_id, notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        notification.read = read
        self.db.commit()
        self.db.refresh(notification)
        return notification
