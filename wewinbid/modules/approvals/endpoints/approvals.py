import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.approvals.db.schema import ApprovalStatusEnum
from wewinbid.modules.approvals.models.pydantic_models import (
    ApprovalRequestCreate,
    ApprovalRequestDetail,
    ApprovalRequestResponse,
    AuditLogResponse,
    CommentCreate,
    CommentResponse,
    DecisionCreate,
    DecisionResponse,
    DecisionResult,
    WorkflowCreate,
    WorkflowResponse,
)
from wewinbid.modules.approvals.services.approval_service import ApprovalService
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user, require_company_admin

router = APIRouter(prefix="/approvals", tags=["Approvals"])


@router.get("/workflows", response_model=List[WorkflowResponse])
def list_workflows(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).list_workflows(current_user, include_inactive)


@router.post("/workflows", response_model=WorkflowResponse, status_code=status.HTTP_201_CREATED)
def create_workflow(
    request: WorkflowCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(require_company_admin),
):
    return ApprovalService(db).create_workflow(current_user, request)


@router.get("/workflows/{workflow_id}", response_model=WorkflowResponse)
def get_workflow(
    workflow_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).get_workflow(current_user, workflow_id)


@router.delete("/workflows/{workflow_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_workflow(
    workflow_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(require_company_admin),
):
    ApprovalService(db).deactivate_workflow(current_user, workflow_id)


@router.get("", response_model=List[ApprovalRequestResponse])
def list_requests(
    status_filter: Optional[ApprovalStatusEnum] = Query(None, alias="status"),
    role: Optional[str] = Query(None, pattern="^(requester|approver)$"),
    entity_type: Optional[str] = Query(None),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).list_requests(current_user, status_filter, role, entity_type)


@router.post("", response_model=ApprovalRequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    request: ApprovalRequestCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).create_request(current_user, request)


@router.get("/{request_id}", response_model=ApprovalRequestDetail)
def get_request(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    service = ApprovalService(db)
    approval = service.get_request(current_user, request_id)
    return ApprovalRequestDetail(
        request=ApprovalRequestResponse.model_validate(approval),
        can_approve=service.can_approve(current_user, approval),
        is_requester=approval.requested_by == current_user.id,
    )


@router.post("/{request_id}/decisions", response_model=DecisionResult)
def make_decision(
    request_id: uuid.UUID,
    request: DecisionCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    decision, approval = ApprovalService(db).decide(current_user, request_id, request)
    return DecisionResult(
        decision=DecisionResponse.model_validate(decision),
        request=ApprovalRequestResponse.model_validate(approval),
    )


@router.post("/{request_id}/resubmit", response_model=ApprovalRequestResponse)
def resubmit_request(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).resubmit(current_user, request_id)


@router.delete("/{request_id}", response_model=ApprovalRequestResponse)
def cancel_request(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).cancel(current_user, request_id)


@router.get("/{request_id}/comments", response_model=List[CommentResponse])
def list_comments(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).list_comments(current_user, request_id)


@router.post("/{request_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    request_id: uuid.UUID,
    request: CommentCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).add_comment(current_user, request_id, request)


@router.get("/{request_id}/audit", response_model=List[AuditLogResponse])
def get_audit_log(
    request_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ApprovalService(db).audit_log(current_user, request_id)
