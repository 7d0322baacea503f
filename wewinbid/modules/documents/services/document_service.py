"""
Company documents: CRUD, uploads under the plan's storage quota and the
document expiry job.
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from wewinbid.core.errors import NotFoundError, ValidationError
from wewinbid.core.helpers import days_until, utcnow
from wewinbid.core.storage import delete_file, guess_mime_type, save_file, validate_file
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.repositories.repository import UserRepository
from wewinbid.modules.companies.db.schema import Company
from wewinbid.modules.documents.db.schema import Document, DocumentStatusEnum, DocumentTypeEnum
from wewinbid.modules.documents.models.pydantic_models import DocumentCreate, DocumentUpdate
from wewinbid.modules.notifications.db.schema import NotificationTypeEnum
from wewinbid.modules.notifications.repositories.repository import NotificationRepository
from wewinbid.modules.notifications.services.notification_service import NotificationService
from wewinbid.modules.subscription.services.subscription_service import SubscriptionService
from wewinbid.modules.tenders.repositories.repository import TenderRepository

logger = logging.getLogger(__name__)

EXPIRY_WARNING_DAYS = 30
EXPIRY_NOTIFICATION_TYPE = "document_expiring"


class DocumentService:
    def __init__(self, db: Session):
        self.db = db

    def _check_tender(self, user: User, tender_id: Optional[uuid.UUID]) -> None:
        if tender_id and not TenderRepository(self.db).get_for_company(user.company_id, tender_id):
            raise NotFoundError("Tender not found")

    def _check_template_feature(self, user: User) -> None:
        company = self.db.get(Company, user.company_id)
        SubscriptionService(self.db).ensure_feature(company, "templates")

    def list_documents(
        self,
        user: User,
        tender_id: Optional[uuid.UUID] = None,
        type: Optional[DocumentTypeEnum] = None,
        status: Optional[DocumentStatusEnum] = None,
        is_template: Optional[bool] = None,
        expiring_within_days: Optional[int] = None,
    ) -> List[Document]:
        query = self.db.query(Document).filter(Document.company_id == user.company_id)
        if tender_id:
            query = query.filter(Document.tender_id == tender_id)
        if type:
            query = query.filter(Document.type == type)
        if status:
            query = query.filter(Document.status == status)
        if is_template is not None:
            query = query.filter(Document.is_template.is_(is_template))
        if expiring_within_days is not None:
            query = query.filter(
                Document.expires_at.isnot(None),
                Document.expires_at <= utcnow() + timedelta(days=expiring_within_days),
            )
        return query.order_by(Document.created_at.desc()).all()

    def get_document(self, user: User, document_id: uuid.UUID) -> Document:
        document = (
            self.db.query(Document)
            .filter(Document.id == document_id, Document.company_id == user.company_id)
            .first()
        )
        if not document:
            raise NotFoundError("Document not found")
        return document

    def create_document(self, user: User, request: DocumentCreate, commit: bool = True) -> Document:
        self._check_tender(user, request.tender_id)
        if request.is_template:
            self._check_template_feature(user)
        document = Document(
            company_id=user.company_id,
            created_by=user.id,
            **request.model_dump(),
        )
        self.db.add(document)
        if commit:
            self.db.commit()
            self.db.refresh(document)
        else:
            self.db.flush()
        return document

    def upload_document(
        self,
        user: User,
        filename: str,
        content: bytes,
        type: DocumentTypeEnum = DocumentTypeEnum.OTHER,
        tender_id: Optional[uuid.UUID] = None,
        name: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> Document:
        is_valid, error = validate_file(filename, len(content))
        if not is_valid:
            raise ValidationError(error)
        self._check_tender(user, tender_id)
        company = self.db.get(Company, user.company_id)
        SubscriptionService(self.db).ensure_storage_available(company, len(content))

        file_path = save_file(content, filename, user.company_id)
        document = Document(
            company_id=user.company_id,
            created_by=user.id,
            tender_id=tender_id,
            name=name or filename,
            type=type,
            status=DocumentStatusEnum.DRAFT,
            file_path=file_path,
            file_name=filename,
            file_size=len(content),
            mime_type=guess_mime_type(filename),
            expires_at=expires_at,
        )
        self.db.add(document)
        self.db.commit()
        self.db.refresh(document)
        logger.info(f"Document {document.id} uploaded ({len(content)} bytes) for company {user.company_id}")
        return document

    def update_document(self, user: User, document_id: uuid.UUID, request: DocumentUpdate) -> Document:
        document = self.get_document(user, document_id)
        updates = request.model_dump(exclude_unset=True)
        if "tender_id" in updates:
            self._check_tender(user, updates["tender_id"])
        if updates.get("is_template") and not document.is_template:
            self._check_template_feature(user)
        if "content" in updates and updates["content"] != document.content:
            document.version += 1
        for field, value in updates.items():
            setattr(document, field, value)
        self.db.commit()
        self.db.refresh(document)
        return document

    def delete_document(self, user: User, document_id: uuid.UUID) -> None:
        document = self.get_document(user, document_id)
        delete_file(document.file_path)
        self.db.delete(document)
        self.db.commit()
        logger.info(f"Document {document_id} deleted by user {user.id}")

    def delete_tender_documents(self, company_id: uuid.UUID, tender_id: uuid.UUID) -> int:
        """Remove a tender's documents and their stored files. The caller commits."""
        documents = (
            self.db.query(Document)
            .filter(Document.company_id == company_id, Document.tender_id == tender_id)
            .all()
        )
        for document in documents:
            delete_file(document.file_path)
            self.db.delete(document)
        return len(documents)

    def notify_expiring_documents(self, now: Optional[datetime] = None) -> int:
        """Warn the company owner once about each document expiring within the warning window."""
        now = now or utcnow()
        documents = (
            self.db.query(Document)
            .filter(
                Document.expires_at.isnot(None),
                Document.expires_at > now,
                Document.expires_at <= now + timedelta(days=EXPIRY_WARNING_DAYS),
            )
            .all()
        )
        repo = NotificationRepository(self.db)
        notifications = NotificationService(self.db)
        users = UserRepository(self.db)
        sent = 0
        for document in documents:
            owner = users.get_company_owner(document.company_id)
            if owner is None or not owner.is_active:
                continue
            if repo.was_sent(EXPIRY_NOTIFICATION_TYPE, document.id, owner.id):
                continue
            days_left = days_until(document.expires_at, now)
            notifications.notify(
                owner,
                type=NotificationTypeEnum.DOCUMENT_EXPIRING,
                title=f"Document bientôt expiré : {document.name}",
                message=f"Le document « {document.name} » expire dans {days_left} jour(s).",
                link=f"/documents/{document.id}",
                tender_id=document.tender_id,
                metadata={"document_id": str(document.id), "days_left": days_left},
            )
            repo.record_sent(EXPIRY_NOTIFICATION_TYPE, document.id, owner.id)
            sent += 1
        self.db.commit()
        if sent:
            logger.info(f"Sent {sent} document expiry notifications")
        return sent
