"""
Search alerts: CRUD, matching previews and delivery.

Instant alerts are evaluated when a tender is created (as a background task);
daily and weekly alerts are delivered as one digest per alert by the
scheduled jobs.
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from wewinbid.core.errors import NotFoundError
from wewinbid.core.helpers import utcnow
from wewinbid.db.database import SessionLocal
from wewinbid.modules.alerts.db.schema import AlertFrequencyEnum, SearchAlert
from wewinbid.modules.alerts.models.pydantic_models import AlertCreate, AlertUpdate
from wewinbid.modules.alerts.services.matching import tender_matches
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.notifications.db.schema import NotificationTypeEnum
from wewinbid.modules.notifications.services.notification_service import NotificationService
from wewinbid.modules.tenders.db.schema import Tender

logger = logging.getLogger(__name__)

DIGEST_PERIODS = {
    AlertFrequencyEnum.daily: timedelta(days=1),
    AlertFrequencyEnum.weekly: timedelta(days=7),
}
MAX_PREVIEW_MATCHES = 50


class AlertService:
    def __init__(self, db: Session):
        self.db = db

    def list_alerts(self, user: User, active_only: bool = False) -> List[SearchAlert]:
        query = self.db.query(SearchAlert).filter(SearchAlert.user_id == user.id)
        if active_only:
            query = query.filter(SearchAlert.is_active.is_(True))
        return query.order_by(SearchAlert.created_at.desc()).all()

    def get_alert(self, user: User, alert_id: uuid.UUID) -> SearchAlert:
        alert = (
            self.db.query(SearchAlert)
            .filter(SearchAlert.id == alert_id, SearchAlert.user_id == user.id)
            .first()
        )
        if not alert:
            raise NotFoundError("Alert not found")
        return alert

    def create_alert(self, user: User, request: AlertCreate) -> SearchAlert:
        alert = SearchAlert(
            user_id=user.id,
            company_id=user.company_id,
            name=request.name,
            description=request.description,
            criteria=request.criteria.model_dump(mode="json", exclude_none=True),
            frequency=request.frequency,
            notification_channels=request.notification_channels.model_dump(),
            is_active=request.is_active,
        )
        self.db.add(alert)
        self.db.commit()
        self.db.refresh(alert)
        logger.info(f"Alert {alert.id} created by user {user.id}")
        return alert

    def update_alert(self, user: User, alert_id: uuid.UUID, request: AlertUpdate) -> SearchAlert:
        alert = self.get_alert(user, alert_id)
        updates = request.model_dump(exclude_unset=True, exclude={"criteria", "notification_channels"})
        for field, value in updates.items():
            if value is not None:
                setattr(alert, field, value)
        if request.criteria is not None:
            alert.criteria = request.criteria.model_dump(mode="json", exclude_none=True)
        if request.notification_channels is not None:
            alert.notification_channels = request.notification_channels.model_dump()
        self.db.commit()
        self.db.refresh(alert)
        return alert

    def delete_alert(self, user: User, alert_id: uuid.UUID) -> None:
        alert = self.get_alert(user, alert_id)
        self.db.delete(alert)
        self.db.commit()

    def find_matches(self, alert: SearchAlert, since: Optional[datetime] = None, limit: Optional[int] = None) -> List[Tender]:
        query = self.db.query(Tender).filter(Tender.company_id == alert.company_id)
        if since:
            query = query.filter(Tender.created_at > since)
        matches = [t for t in query.order_by(Tender.created_at.desc()).all() if tender_matches(t, alert.criteria)]
        return matches[:limit] if limit else matches

    def preview_matches(self, user: User, alert_id: uuid.UUID) -> List[Tender]:
        return self.find_matches(self.get_alert(user, alert_id), limit=MAX_PREVIEW_MATCHES)

    def _deliver(self, alert: SearchAlert, title: str, message: str, link: str, tender_id=None, metadata=None) -> bool:
        user = self.db.get(User, alert.user_id)
        if user is None or not user.is_active:
            return False
        channels = alert.notification_channels or {}
        in_app = channels.get("in_app", True)
        email = channels.get("email", True)
        if not in_app and not email:
            return False
        NotificationService(self.db).notify(
            user,
            type=NotificationTypeEnum.NEW_OPPORTUNITY,
            title=title,
            message=message,
            link=link,
            tender_id=tender_id,
            metadata=metadata,
            send_email=email,
            in_app=in_app,
        )
        return True

    def notify_instant_alerts(self, tender: Tender) -> int:
        alerts = (
            self.db.query(SearchAlert)
            .filter(
                SearchAlert.company_id == tender.company_id,
                SearchAlert.is_active.is_(True),
                SearchAlert.frequency == AlertFrequencyEnum.instant,
            )
            .all()
        )
        delivered = 0
        now = utcnow()
        for alert in alerts:
            if not tender_matches(tender, alert.criteria):
                continue
            sent = self._deliver(
                alert,
                title=f"Nouvelle opportunité : {tender.title}",
                message=f"L'appel d'offres « {tender.title} » correspond à votre alerte « {alert.name} ».",
                link=f"/tenders/{tender.id}",
                tender_id=tender.id,
                metadata={"alert_id": str(alert.id)},
            )
            alert.match_count += 1
            alert.last_triggered_at = now
            delivered += int(sent)
        self.db.commit()
        return delivered

    def send_digests(self, frequency: AlertFrequencyEnum, now: Optional[datetime] = None) -> dict:
        now = now or utcnow()
        period = DIGEST_PERIODS[frequency]
        alerts = (
            self.db.query(SearchAlert)
            .filter(SearchAlert.is_active.is_(True), SearchAlert.frequency == frequency)
            .all()
        )
        sent = 0
        for alert in alerts:
            since = alert.last_triggered_at or (now - period)
            if alert.last_triggered_at and now - alert.last_triggered_at < period:
                continue
            matches = self.find_matches(alert, since=since)
            if not matches:
                continue
            titles = "\n".join(f"- {t.title}" for t in matches[:10])
            delivered = self._deliver(
                alert,
                title=f"{len(matches)} nouvelles opportunités pour « {alert.name} »",
                message=f"Nouveaux appels d'offres correspondant à votre alerte :\n{titles}",
                link="/tenders",
                metadata={"alert_id": str(alert.id), "tender_ids": [str(t.id) for t in matches]},
            )
            alert.match_count += len(matches)
            alert.last_triggered_at = now
            sent += int(delivered)
        self.db.commit()
        logger.info(f"Sent {sent} {frequency.value} alert digests ({len(alerts)} alerts checked)")
        return {"sent": sent, "total": len(alerts)}


def process_new_tender(tender_id: uuid.UUID) -> None:
    """Background task: notify instant alerts matching a newly created tender."""
    db = SessionLocal()
    try:
        tender = db.get(Tender, tender_id)
        if tender is None:
            return
        delivered = AlertService(db).notify_instant_alerts(tender)
        if delivered:
            logger.info(f"Tender {tender_id} matched {delivered} instant alerts")
    except Exception as e:
        db.rollback()
        logger.error(f"Alert matching failed for tender {tender_id}: {e}", exc_info=True)
    finally:
        db.close()
