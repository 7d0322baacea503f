"""
Electronic signature requests.

Creators manage requests from the app; signers act through their private
access token without an account. Every state change is written to the
request's audit log.
"""
import hashlib
import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from wewinbid.core.errors import GoneError, NotFoundError, ValidationError
from wewinbid.core.helpers import utcnow
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.repositories.repository import UserRepository
from wewinbid.modules.notifications.db.schema import NotificationTypeEnum
from wewinbid.modules.notifications.services.email_service import send_notification_email
from wewinbid.modules.notifications.services.notification_service import NotificationService
from wewinbid.modules.signatures.db.schema import (
    OPEN_SIGNATURE_STATUSES,
    SignatureAuditLog,
    SignatureRequest,
    SignatureRequestStatusEnum,
    SignatureSigner,
    SignerStatusEnum,
)
from wewinbid.modules.signatures.models.pydantic_models import SignatureRequestCreate
from wewinbid.modules.tenders.repositories.repository import TenderRepository

logger = logging.getLogger(__name__)

OPEN_SIGNER_STATUSES = (SignerStatusEnum.pending, SignerStatusEnum.notified, SignerStatusEnum.viewed)
CANCELLABLE_STATUSES = (SignatureRequestStatusEnum.draft,) + OPEN_SIGNATURE_STATUSES


def compute_document_hash(reference: Optional[str]) -> Optional[str]:
    if not reference:
        return None
    return hashlib.sha256(reference.encode("utf-8")).hexdigest()


class SignatureService:
    def __init__(self, db: Session):
        self.db = db

    def _audit(self, request: SignatureRequest, action: str, actor_id=None, actor_type: str = "user",
               signer: Optional[SignatureSigner] = None, details: Optional[dict] = None) -> None:
        request.audit_logs.append(SignatureAuditLog(
            action=action,
            actor_id=actor_id,
            actor_type=actor_type,
            signer_id=signer.id if signer else None,
            details=details,
        ))

    # Creator side

    def list_requests(
        self,
        user: User,
        status: Optional[SignatureRequestStatusEnum] = None,
        tender_id: Optional[uuid.UUID] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[SignatureRequest], int]:
        query = self.db.query(SignatureRequest).filter(SignatureRequest.company_id == user.company_id)
        if status:
            query = query.filter(SignatureRequest.status == status)
        if tender_id:
            query = query.filter(SignatureRequest.tender_id == tender_id)
        total = query.count()
        requests = (
            query.order_by(SignatureRequest.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return requests, total

    def get_request(self, user: User, request_id: uuid.UUID) -> SignatureRequest:
        request = (
            self.db.query(SignatureRequest)
            .filter(SignatureRequest.id == request_id, SignatureRequest.company_id == user.company_id)
            .first()
        )
        if not request:
            raise NotFoundError("Signature request not found")
        return request

    def create_request(self, user: User, data: SignatureRequestCreate) -> SignatureRequest:
        if data.tender_id and not TenderRepository(self.db).get_for_company(user.company_id, data.tender_id):
            raise NotFoundError("Tender not found")

        expires_at = utcnow() + timedelta(days=data.expires_in_days)
        request = SignatureRequest(
            company_id=user.company_id,
            created_by=user.id,
            tender_id=data.tender_id,
            title=data.title,
            description=data.description,
            status=SignatureRequestStatusEnum.draft,
            document_url=data.document_url,
            document_name=data.document_name,
            document_hash=compute_document_hash(data.document_url or data.document_name),
            expires_at=expires_at,
        )
        users = UserRepository(self.db)
        for index, signer_input in enumerate(data.signers):
            internal_user = users.get_by_email(signer_input.email)
            request.signers.append(SignatureSigner(
                user_id=internal_user.id if internal_user and internal_user.company_id == user.company_id else None,
                email=signer_input.email.lower(),
                name=signer_input.name,
                phone=signer_input.phone,
                order_index=index,
                status=SignerStatusEnum.pending,
                access_token=secrets.token_urlsafe(32),
                token_expires_at=expires_at,
            ))
        self.db.add(request)
        self.db.flush()
        self._audit(request, "created", actor_id=user.id, details={"signers_count": len(data.signers)})

        if data.send_immediately:
            self._send(request, user)

        self.db.commit()
        self.db.refresh(request)
        logger.info(f"Signature request {request.id} created ({request.status.value})")
        return request

    def _notify_signer(self, request: SignatureRequest, signer: SignatureSigner, reminder: bool = False) -> None:
        title = f"{'Rappel : ' if reminder else ''}Signature requise : {request.title}"
        message = f"Bonjour {signer.name}, vous êtes invité(e) à signer le document « {request.title} »."
        send_notification_email(signer.email, title, message, f"/sign/{signer.access_token}")
        if signer.user_id:
            user = self.db.get(User, signer.user_id)
            if user:
                NotificationService(self.db).notify(
                    user,
                    type=NotificationTypeEnum.SIGNATURE_REQUEST,
                    title=title,
                    message=message,
                    link=f"/sign/{signer.access_token}",
                    metadata={"signature_request_id": str(request.id)},
                    send_email=False,
                )
        signer.notified_at = utcnow()
        if signer.status == SignerStatusEnum.pending:
            signer.status = SignerStatusEnum.notified

    def _send(self, request: SignatureRequest, user: User) -> None:
        request.status = SignatureRequestStatusEnum.pending
        for signer in request.signers:
            self._notify_signer(request, signer)
        self._audit(request, "sent", actor_id=user.id, details={"signers_count": len(request.signers)})

    def send(self, user: User, request_id: uuid.UUID) -> SignatureRequest:
        request = self.get_request(user, request_id)
        if request.status != SignatureRequestStatusEnum.draft:
            raise ValidationError("Only draft requests can be sent")
        self._send(request, user)
        self.db.commit()
        self.db.refresh(request)
        return request

    def remind(self, user: User, request_id: uuid.UUID) -> SignatureRequest:
        request = self.get_request(user, request_id)
        if request.status not in OPEN_SIGNATURE_STATUSES:
            raise ValidationError("Reminders can only be sent for pending requests")
        reminded = [s for s in request.signers if s.status in OPEN_SIGNER_STATUSES]
        for signer in reminded:
            self._notify_signer(request, signer, reminder=True)
        self._audit(request, "reminder_sent", actor_id=user.id, details={"signers": [str(s.id) for s in reminded]})
        self.db.commit()
        self.db.refresh(request)
        return request

    def cancel(self, user: User, request_id: uuid.UUID) -> SignatureRequest:
        request = self.get_request(user, request_id)
        if request.status not in CANCELLABLE_STATUSES:
            raise ValidationError(f"Cannot cancel a {request.status.value} request")
        request.status = SignatureRequestStatusEnum.cancelled
        self._audit(request, "cancelled", actor_id=user.id)
        self.db.commit()
        self.db.refresh(request)
        return request

    def audit_log(self, user: User, request_id: uuid.UUID) -> List[SignatureAuditLog]:
        return self.get_request(user, request_id).audit_logs

    # Signer side

    def _expire(self, request: SignatureRequest) -> None:
        request.status = SignatureRequestStatusEnum.expired
        for signer in request.signers:
            if signer.status in OPEN_SIGNER_STATUSES:
                signer.status = SignerStatusEnum.expired
        self._audit(request, "expired", actor_type="system")

    def _get_signer(self, token: str) -> SignatureSigner:
        signer = self.db.query(SignatureSigner).filter(SignatureSigner.access_token == token).first()
        if not signer:
            raise NotFoundError("Signing link not found")
        request = signer.request
        if request.status == SignatureRequestStatusEnum.draft:
            raise ValidationError("This signature request has not been sent yet")
        if request.status in OPEN_SIGNATURE_STATUSES and utcnow() > request.expires_at:
            self._expire(request)
            self.db.commit()
        if request.status == SignatureRequestStatusEnum.expired:
            raise GoneError("This signature request has expired")
        if request.status not in OPEN_SIGNATURE_STATUSES:
            raise ValidationError(f"This signature request is {request.status.value}")
        return signer

    def view(self, token: str, ip_address: Optional[str] = None) -> SignatureSigner:
        signer = self._get_signer(token)
        if signer.status in (SignerStatusEnum.pending, SignerStatusEnum.notified):
            signer.status = SignerStatusEnum.viewed
            signer.viewed_at = utcnow()
            self._audit(signer.request, "viewed", actor_id=signer.id, actor_type="signer", signer=signer,
                        details={"ip_address": ip_address})
            self.db.commit()
            self.db.refresh(signer)
        return signer

    def sign(self, token: str, signature_data: str, ip_address: Optional[str] = None) -> SignatureSigner:
        signer = self._get_signer(token)
        if signer.status not in OPEN_SIGNER_STATUSES:
            raise ValidationError(f"You have already {signer.status.value} this document")
        request = signer.request
        now = utcnow()
        signer.status = SignerStatusEnum.signed
        signer.signed_at = now
        signer.signature_data = signature_data
        signer.ip_address = ip_address
        self._audit(request, "signed", actor_id=signer.id, actor_type="signer", signer=signer,
                    details={"ip_address": ip_address})

        if all(s.status == SignerStatusEnum.signed for s in request.signers):
            request.status = SignatureRequestStatusEnum.completed
            request.completed_at = now
            self._audit(request, "completed", actor_type="system")
            self._notify_creator(request, "Document signé", f"Tous les signataires ont signé « {request.title} ».")
            logger.info(f"Signature request {request.id} completed")
        else:
            request.status = SignatureRequestStatusEnum.partially_signed

        self.db.commit()
        self.db.refresh(signer)
        return signer

    def decline(self, token: str, reason: Optional[str] = None, ip_address: Optional[str] = None) -> SignatureSigner:
        signer = self._get_signer(token)
        if signer.status not in OPEN_SIGNER_STATUSES:
            raise ValidationError(f"You have already {signer.status.value} this document")
        request = signer.request
        signer.status = SignerStatusEnum.declined
        signer.declined_at = utcnow()
        signer.decline_reason = reason
        signer.ip_address = ip_address
        request.status = SignatureRequestStatusEnum.cancelled
        self._audit(request, "declined", actor_id=signer.id, actor_type="signer", signer=signer,
                    details={"reason": reason})
        self._notify_creator(
            request,
            "Signature refusée",
            f"{signer.name} a refusé de signer « {request.title} »." + (f" Motif : {reason}" if reason else ""),
        )
        self.db.commit()
        self.db.refresh(signer)
        return signer

    def _notify_creator(self, request: SignatureRequest, title: str, message: str) -> None:
        creator = self.db.get(User, request.created_by) if request.created_by else None
        if creator is None:
            return
        NotificationService(self.db).notify(
            creator,
            type=NotificationTypeEnum.SIGNATURE_REQUEST,
            title=title,
            message=message,
            link=f"/signatures/{request.id}",
            tender_id=request.tender_id,
            metadata={"signature_request_id": str(request.id), "status": request.status.value},
        )

    # Jobs

    def expire_overdue(self, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        overdue = (
            self.db.query(SignatureRequest)
            .filter(SignatureRequest.status.in_(OPEN_SIGNATURE_STATUSES), SignatureRequest.expires_at < now)
            .all()
        )
        for request in overdue:
            self._expire(request)
        self.db.commit()
        if overdue:
            logger.info(f"Expired {len(overdue)} signature requests")
        return len(overdue)
