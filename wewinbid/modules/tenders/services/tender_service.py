"""
Service for creating, updating and tracking tenders.
"""
import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from wewinbid.core.errors import NotFoundError, ValidationError
from wewinbid.core.helpers import generate_tender_reference, utcnow
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.repositories.repository import UserRepository
from wewinbid.modules.calendar.services.calendar_service import CalendarService, TENDER_ENTITY
from wewinbid.modules.documents.services.document_service import DocumentService
from wewinbid.modules.notifications.db.schema import NotificationTypeEnum
from wewinbid.modules.notifications.services.notification_service import NotificationService
from wewinbid.modules.subscription.services.subscription_service import SubscriptionService
from wewinbid.modules.tenders.db.schema import (
    SectorEnum, Tender, TenderComment, TenderFavorite, TenderStatusEnum, TenderTypeEnum,
)
from wewinbid.modules.tenders.models.pydantic_models import CommentCreate, TenderCreate, TenderUpdate
from wewinbid.modules.tenders.repositories.repository import TenderRepository
from wewinbid.modules.tenders.services.status_transitions import allowed_targets, can_transition

logger = logging.getLogger(__name__)

RESULT_NOTIFICATIONS = {
    TenderStatusEnum.WON: (NotificationTypeEnum.TENDER_WON, "Appel d'offres remporté", "Félicitations ! L'appel d'offres « {title} » a été remporté."),
    TenderStatusEnum.LOST: (NotificationTypeEnum.TENDER_LOST, "Appel d'offres perdu", "L'appel d'offres « {title} » n'a pas été retenu."),
}


def _history_value(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)


class TenderService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TenderRepository(db)

    def get_tender(self, user: User, tender_id: uuid.UUID) -> Tender:
        tender = self.repo.get_for_company(user.company_id, tender_id)
        if not tender:
            raise NotFoundError("Tender not found")
        return tender

    def list_tenders(
        self,
        user: User,
        status: Optional[TenderStatusEnum] = None,
        type: Optional[TenderTypeEnum] = None,
        sector: Optional[SectorEnum] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Tender], int]:
        return self.repo.list_for_company(user.company_id, status, type, sector, search, limit, offset)

    def create_tender(self, user: User, request: TenderCreate) -> Tender:
        SubscriptionService(self.db).ensure_can_create_tender(user.company)

        data = request.model_dump()
        data["reference"] = (data.get("reference") or "").strip() or generate_tender_reference()
        data["country"] = data["country"].upper()
        tender = Tender(company_id=user.company_id, created_by=user.id, **data)
        self.db.add(tender)
        self.db.flush()

        self.repo.add_history(tender.id, user.id, "created", details={"reference": tender.reference, "status": tender.status.value})
        if tender.deadline:
            CalendarService(self.db).sync_tender_deadline(user.id, tender)

        self.db.commit()
        self.db.refresh(tender)
        logger.info(f"Tender {tender.id} ({tender.reference}) created by user {user.id}")
        return tender

    def update_tender(self, user: User, tender_id: uuid.UUID, request: TenderUpdate) -> Tender:
        tender = self.get_tender(user, tender_id)
        updates = request.model_dump(exclude_unset=True)
        if "country" in updates and updates["country"]:
            updates["country"] = updates["country"].upper()

        new_status = updates.pop("status", None)
        if new_status is not None and new_status != tender.status:
            if not can_transition(tender.status, new_status):
                raise ValidationError(
                    f"Invalid status transition from {tender.status.value} to {new_status.value}",
                    {"current": tender.status.value, "allowed": allowed_targets(tender.status)},
                )
            self._apply_status(user, tender, new_status)

        deadline_changed = False
        for field, value in updates.items():
            if field in ("title", "type", "country", "reference") and value is None:
                continue
            old_value = getattr(tender, field)
            if old_value == value:
                continue
            setattr(tender, field, value)
            self.repo.add_history(
                tender.id, user.id, "updated", field=field,
                old_value=_history_value(old_value), new_value=_history_value(value),
            )
            if field == "deadline":
                deadline_changed = True

        if deadline_changed or (tender.deadline and "title" in updates):
            owner_id = tender.created_by or user.id
            CalendarService(self.db).sync_tender_deadline(owner_id, tender)

        self.db.commit()
        self.db.refresh(tender)
        return tender

    def _apply_status(self, user: User, tender: Tender, new_status: TenderStatusEnum) -> None:
        old_status = tender.status
        tender.status = new_status
        now = utcnow()
        if new_status == TenderStatusEnum.SUBMITTED:
            tender.submission_date = now
        elif new_status in (TenderStatusEnum.WON, TenderStatusEnum.LOST):
            tender.result_date = now

        self.repo.add_history(
            tender.id, user.id, "status_changed", field="status",
            old_value=old_status.value, new_value=new_status.value,
        )
        logger.info(f"Tender {tender.id} status {old_status.value} -> {new_status.value}")

        if new_status in RESULT_NOTIFICATIONS:
            recipient = UserRepository(self.db).get_by_id(tender.created_by) if tender.created_by else None
            if recipient:
                notification_type, title, message = RESULT_NOTIFICATIONS[new_status]
                NotificationService(self.db).notify(
                    recipient,
                    type=notification_type,
                    title=title,
                    message=message.format(title=tender.title),
                    link=f"/tenders/{tender.id}",
                    tender_id=tender.id,
                    preference_key="tender_status_change",
                )

    def delete_tender(self, user: User, tender_id: uuid.UUID) -> None:
        tender = self.get_tender(user, tender_id)
        CalendarService(self.db).remove_entity_events(TENDER_ENTITY, tender.id)
        DocumentService(self.db).delete_tender_documents(tender.company_id, tender.id)
        self.db.delete(tender)
        self.db.commit()
        logger.info(f"Tender {tender_id} deleted by user {user.id}")

    # --- Comments ---

    def list_comments(self, user: User, tender_id: uuid.UUID) -> List[dict]:
        self.get_tender(user, tender_id)
        comments = self.repo.get_comments(tender_id)
        authors = {
            u.id: u.full_name or u.email
            for u in UserRepository(self.db).list_company_users(user.company_id)
        }
        by_id = {}
        roots = []
        for comment in comments:
            node = {
                "id": comment.id,
                "tender_id": comment.tender_id,
                "user_id": comment.user_id,
                "author_name": authors.get(comment.user_id),
                "parent_id": comment.parent_id,
                "content": comment.content,
                "mentions": comment.mentions or [],
                "created_at": comment.created_at,
                "replies": [],
            }
            by_id[comment.id] = node
        for node in by_id.values():
            parent = by_id.get(node["parent_id"]) if node["parent_id"] else None
            if parent is not None:
                parent["replies"].append(node)
            else:
                roots.append(node)
        return roots

    def add_comment(self, user: User, tender_id: uuid.UUID, request: CommentCreate) -> TenderComment:
        tender = self.get_tender(user, tender_id)
        if request.parent_id and not self.repo.get_comment(tender_id, request.parent_id):
            raise ValidationError("Parent comment does not belong to this tender")

        comment = TenderComment(
            tender_id=tender.id,
            user_id=user.id,
            parent_id=request.parent_id,
            content=request.content,
            mentions=[str(m) for m in request.mentions],
        )
        self.db.add(comment)
        self.repo.add_history(tender.id, user.id, "commented")

        users = UserRepository(self.db)
        notifications = NotificationService(self.db)
        author = user.full_name or user.email
        for mentioned_id in set(request.mentions):
            if mentioned_id == user.id:
                continue
            mentioned = users.get_company_user(user.company_id, mentioned_id)
            if mentioned is None:
                continue
            notifications.notify(
                mentioned,
                type=NotificationTypeEnum.COMMENT,
                title="Vous avez été mentionné",
                message=f"{author} vous a mentionné sur « {tender.title} » : {request.content[:200]}",
                link=f"/tenders/{tender.id}",
                tender_id=tender.id,
                preference_key="team_activity",
            )

        self.db.commit()
        self.db.refresh(comment)
        return comment

    # --- Favorites ---

    def toggle_favorite(self, user: User, tender_id: uuid.UUID) -> bool:
        self.get_tender(user, tender_id)
        favorite = self.repo.get_favorite(user.id, tender_id)
        if favorite:
            self.db.delete(favorite)
            self.db.commit()
            return False
        self.db.add(TenderFavorite(user_id=user.id, tender_id=tender_id))
        self.db.commit()
        return True

    def list_favorites(self, user: User) -> List[Tender]:
        return self.repo.list_favorites(user.id, user.company_id)
