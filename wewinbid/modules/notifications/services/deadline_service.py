"""
Deadline notifications for open tenders.

Each tender gets at most one notification per threshold (7 days, 3 days,
24 hours) thanks to the `notifications_sent` ledger.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from wewinbid.core.helpers import days_until, utcnow
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.repositories.repository import UserRepository
from wewinbid.modules.notifications.db.schema import NotificationTypeEnum
from wewinbid.modules.notifications.repositories.repository import NotificationRepository
from wewinbid.modules.notifications.services.notification_service import NotificationService
from wewinbid.modules.tenders.db.schema import OPEN_TENDER_STATUSES, Tender

logger = logging.getLogger(__name__)

LOOKAHEAD = timedelta(days=7)

# (max days left, notification type, preference flag)
DEADLINE_THRESHOLDS = (
    (1, NotificationTypeEnum.DEADLINE_24H, "deadline_24h"),
    (3, NotificationTypeEnum.DEADLINE_3D, "deadline_3d"),
    (7, NotificationTypeEnum.DEADLINE_7D, "deadline_7d"),
)


def deadline_threshold(days_left: int):
    for max_days, notification_type, preference in DEADLINE_THRESHOLDS:
        if days_left <= max_days:
            return notification_type, preference
    return None, None


def _message(tender: Tender, days_left: int) -> str:
    if days_left <= 1:
        return f"L'appel d'offres « {tender.title} » arrive à échéance dans moins de 24 heures."
    return f"L'appel d'offres « {tender.title} » arrive à échéance dans {days_left} jours."


def send_deadline_notifications(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    tenders = (
        db.query(Tender)
        .filter(
            Tender.status.in_(OPEN_TENDER_STATUSES),
            Tender.deadline.isnot(None),
            Tender.deadline > now,
            Tender.deadline <= now + LOOKAHEAD,
        )
        .all()
    )
    users = UserRepository(db)
    repo = NotificationRepository(db)
    notifications = NotificationService(db)
    sent = 0

    for tender in tenders:
        days_left = days_until(tender.deadline, now)
        notification_type, preference = deadline_threshold(days_left)
        if notification_type is None:
            continue

        recipient: Optional[User] = users.get_by_id(tender.created_by) if tender.created_by else None
        if recipient is None or recipient.company_id != tender.company_id:
            recipient = users.get_company_owner(tender.company_id)
        if recipient is None or not recipient.is_active:
            continue
        if repo.was_sent(notification_type.value, tender.id, recipient.id):
            continue

        created = notifications.notify(
            recipient,
            type=notification_type,
            title=f"Échéance proche : {tender.title}",
            message=_message(tender, days_left),
            link=f"/tenders/{tender.id}",
            tender_id=tender.id,
            metadata={"days_left": days_left, "deadline": tender.deadline.isoformat()},
            preference_key=preference,
        )
        if created is not None:
            repo.record_sent(notification_type.value, tender.id, recipient.id)
            sent += 1

    db.commit()
    logger.info(f"Deadline notifications: {sent} sent for {len(tenders)} tenders due within 7 days")
    return {"sent": sent, "total": len(tenders)}
