"""
Personal data export and account deletion.

Deleting the last member of a company removes the company with everything it
owns; other members only take their personal rows with them.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from wewinbid.core.errors import ValidationError
from wewinbid.core.helpers import utcnow
from wewinbid.core.storage import delete_file
from wewinbid.modules.alerts.db.schema import SearchAlert
from wewinbid.modules.alerts.models.pydantic_models import AlertResponse
from wewinbid.modules.approvals.db.schema import ApprovalRequest, ApprovalWorkflow
from wewinbid.modules.auth.db.schema import User, UserRoleEnum
from wewinbid.modules.auth.models.pydantic_models import UserResponse
from wewinbid.modules.auth.repositories.repository import UserRepository
from wewinbid.modules.calendar.db.schema import CalendarEvent, EventReminder
from wewinbid.modules.calendar.models.pydantic_models import EventResponse
from wewinbid.modules.companies.db.schema import Company
from wewinbid.modules.companies.models.pydantic_models import CompanyResponse
from wewinbid.modules.documents.db.schema import Document
from wewinbid.modules.notifications.db.schema import Notification, NotificationPreference, NotificationSent
from wewinbid.modules.notifications.models.pydantic_models import NotificationResponse
from wewinbid.modules.search.db.schema import SavedSearch, SearchHistory
from wewinbid.modules.search.models.pydantic_models import SavedSearchResponse
from wewinbid.modules.signatures.db.schema import SignatureRequest
from wewinbid.modules.snippets.db.schema import Snippet, SnippetCategory
from wewinbid.modules.team.db.schema import TeamInvitation
from wewinbid.modules.tenders.db.schema import Tender, TenderFavorite
from wewinbid.modules.tenders.models.pydantic_models import Tender as TenderSchema

logger = logging.getLogger(__name__)

# Deleted in this order; requests reference workflows
COMPANY_OWNED_MODELS = (
    SignatureRequest, ApprovalRequest, ApprovalWorkflow, Document, Tender, SearchAlert, TeamInvitation,
    Snippet, SnippetCategory,
)


def _dump(schema, rows) -> list:
    return [schema.model_validate(row).model_dump(mode="json") for row in rows]


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    def export_user_data(self, user: User) -> dict:
        company = self.db.get(Company, user.company_id)
        tenders = self.db.query(Tender).filter(Tender.created_by == user.id).order_by(Tender.created_at).all()
        notifications = (
            self.db.query(Notification).filter(Notification.user_id == user.id).order_by(Notification.created_at).all()
        )
        events = (
            self.db.query(CalendarEvent).filter(CalendarEvent.user_id == user.id).order_by(CalendarEvent.start_date).all()
        )
        alerts = self.db.query(SearchAlert).filter(SearchAlert.user_id == user.id).all()
        saved_searches = self.db.query(SavedSearch).filter(SavedSearch.user_id == user.id).all()

        logger.info(f"Data export generated for user {user.id}")
        return {
            "exported_at": utcnow().isoformat(),
            "profile": UserResponse.model_validate(user).model_dump(mode="json"),
            "company": CompanyResponse.model_validate(company).model_dump(mode="json") if company else None,
            "tenders": _dump(TenderSchema, tenders),
            "notifications": _dump(NotificationResponse, notifications),
            "calendar_events": _dump(EventResponse, events),
            "alerts": _dump(AlertResponse, alerts),
            "saved_searches": _dump(SavedSearchResponse, saved_searches),
        }

    def _delete_personal_rows(self, user_id: uuid.UUID) -> None:
        for event in self.db.query(CalendarEvent).filter(CalendarEvent.user_id == user_id).all():
            self.db.delete(event)
        for model in (EventReminder, Notification, NotificationPreference, NotificationSent,
                      SavedSearch, SearchHistory, SearchAlert, TenderFavorite):
            self.db.query(model).filter(model.user_id == user_id).delete(synchronize_session=False)

    def _delete_company(self, company: Company) -> None:
        for model in COMPANY_OWNED_MODELS:
            for row in self.db.query(model).filter(model.company_id == company.id).all():
                if isinstance(row, Document):
                    delete_file(row.file_path)
                self.db.delete(row)
        self.db.flush()
        self.db.delete(company)

    def delete_account(self, user: User) -> None:
        users = UserRepository(self.db)
        member_count = users.count_company_users(user.company_id)
        if user.role == UserRoleEnum.OWNER and member_count > 1:
            raise ValidationError("Transfer ownership to another member before deleting your account")

        company_id = user.company_id
        self._delete_personal_rows(user.id)
        self.db.delete(user)
        self.db.flush()

        if member_count <= 1:
            company = self.db.get(Company, company_id)
            if company is not None:
                self._delete_company(company)
                logger.info(f"Company {company_id} deleted with its last member")

        self.db.commit()
        logger.info(f"Account {user.id} deleted")
