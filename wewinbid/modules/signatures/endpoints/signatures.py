import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.signatures.db.schema import SignatureRequestStatusEnum, SignatureSigner
from wewinbid.modules.signatures.models.pydantic_models import (
    AuditLogResponse,
    DeclineRequest,
    SignatureRequestCreate,
    SignatureRequestList,
    SignatureRequestResponse,
    SignerResponse,
    SigningDocument,
    SignRequest,
)
from wewinbid.modules.signatures.services.signature_service import SignatureService

router = APIRouter(prefix="/signatures", tags=["Signatures"])


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _signing_document(signer: SignatureSigner) -> SigningDocument:
    signature_request = signer.request
    return SigningDocument(
        request_id=signature_request.id,
        title=signature_request.title,
        description=signature_request.description,
        document_url=signature_request.document_url,
        document_name=signature_request.document_name,
        document_hash=signature_request.document_hash,
        request_status=signature_request.status,
        expires_at=signature_request.expires_at,
        signer=SignerResponse.model_validate(signer),
    )


@router.get("", response_model=SignatureRequestList)
def list_signature_requests(
    status_filter: Optional[SignatureRequestStatusEnum] = Query(None, alias="status"),
    tender_id: Optional[uuid.UUID] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    requests, total = SignatureService(db).list_requests(current_user, status_filter, tender_id, page, limit)
    return SignatureRequestList(
        requests=[SignatureRequestResponse.model_validate(r) for r in requests],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("", response_model=SignatureRequestResponse, status_code=status.HTTP_201_CREATED)
def create_signature_request(
    request: SignatureRequestCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SignatureService(db).create_request(current_user, request)


# Public signer routes, declared before /{request_id}


@router.get("/sign/{token}", response_model=SigningDocument, summary="Open a signing link")
def view_signing_document(token: str, http_request: Request, db: Session = Depends(get_db_session)):
    signer = SignatureService(db).view(token, _client_ip(http_request))
    return _signing_document(signer)


@router.post("/sign/{token}", response_model=SigningDocument)
def sign_document(
    token: str,
    request: SignRequest,
    http_request: Request,
    db: Session = Depends(get_db_session),
):
    signer = SignatureService(db).sign(token, request.signature_data, _client_ip(http_request))
    return _signing_document(signer)


@router.post("/sign/{token}/decline", response_model=SigningDocument)
def decline_document(
    token: str,
    http_request: Request,
    request: Optional[DeclineRequest] = None,
    db: Session = Depends(get_db_session),
):
    reason = request.reason if request else None
    signer = SignatureService(db).decline(token, reason, _client_ip(http_request))
    return _signing_document(signer)


@router.get("/{request_id}", response_model=SignatureRequestResponse)
def get_signature_request(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SignatureService(db).get_request(current_user, request_id)


@router.post("/{request_id}/send", response_model=SignatureRequestResponse)
def send_signature_request(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SignatureService(db).send(current_user, request_id)


@router.post("/{request_id}/remind", response_model=SignatureRequestResponse)
def remind_signers(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SignatureService(db).remind(current_user, request_id)


@router.post("/{request_id}/cancel", response_model=SignatureRequestResponse)
def cancel_signature_request(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SignatureService(db).cancel(current_user, request_id)


@router.get("/{request_id}/audit", response_model=List[AuditLogResponse])
def get_audit_log(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SignatureService(db).audit_log(current_user, request_id)
