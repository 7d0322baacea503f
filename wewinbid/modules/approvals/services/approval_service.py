"""
Approval workflow engine.

A request walks through the steps of its workflow in `step_order`. Each step
collects decisions from its eligible approvers during the current round (the
decisions made since `step_started_at`); once enough approvals are in, the
request moves to the next step or is approved.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from wewinbid.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from wewinbid.core.helpers import utcnow
from wewinbid.modules.approvals.db.schema import (
    FINAL_APPROVAL_STATUSES,
    ApprovalAuditLog,
    ApprovalComment,
    ApprovalDecision,
    ApprovalRequest,
    ApprovalStatusEnum,
    ApprovalStepApprover,
    ApprovalTypeEnum,
    ApprovalWorkflow,
    ApprovalWorkflowStep,
    ApproverTypeEnum,
    DecisionEnum,
)
from wewinbid.modules.approvals.models.pydantic_models import (
    ApprovalRequestCreate,
    CommentCreate,
    DecisionCreate,
    WorkflowCreate,
)
from wewinbid.modules.auth.db.schema import User, UserRoleEnum
from wewinbid.modules.auth.repositories.repository import UserRepository
from wewinbid.modules.notifications.db.schema import NotificationTypeEnum
from wewinbid.modules.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

MAX_LISTED_REQUESTS = 50


def required_approvals(step: ApprovalWorkflowStep, eligible_count: int) -> int:
    """Number of approvals that completes a step."""
    if step.approval_type == ApprovalTypeEnum.all:
        return max(eligible_count, 1)
    if step.approval_type == ApprovalTypeEnum.majority:
        return eligible_count // 2 + 1
    if step.approval_type == ApprovalTypeEnum.threshold:
        return step.threshold_count or 1
    return 1


class ApprovalService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.notifications = NotificationService(db)

    # Workflows

    def list_workflows(self, user: User, include_inactive: bool = False) -> List[ApprovalWorkflow]:
        query = self.db.query(ApprovalWorkflow).filter(ApprovalWorkflow.company_id == user.company_id)
        if not include_inactive:
            query = query.filter(ApprovalWorkflow.is_active.is_(True))
        return query.order_by(ApprovalWorkflow.created_at.desc()).all()

    def get_workflow(self, user: User, workflow_id: uuid.UUID) -> ApprovalWorkflow:
        workflow = (
            self.db.query(ApprovalWorkflow)
            .filter(ApprovalWorkflow.id == workflow_id, ApprovalWorkflow.company_id == user.company_id)
            .first()
        )
        if not workflow:
            raise NotFoundError("Workflow not found")
        return workflow

    def create_workflow(self, user: User, request: WorkflowCreate) -> ApprovalWorkflow:
        workflow = ApprovalWorkflow(
            company_id=user.company_id,
            created_by=user.id,
            name=request.name,
            description=request.description,
            entity_type=request.entity_type,
            is_active=True,
        )
        for order, step_input in enumerate(request.steps, start=1):
            step = ApprovalWorkflowStep(
                step_order=order,
                name=step_input.name,
                approval_type=step_input.approval_type,
                threshold_count=step_input.threshold_count,
            )
            for approver in step_input.approvers:
                if approver.approver_type == ApproverTypeEnum.user and not self.users.get_company_user(user.company_id, approver.user_id):
                    raise ValidationError(f"Approver {approver.user_id} is not a member of your company")
                step.approvers.append(ApprovalStepApprover(
                    approver_type=approver.approver_type,
                    user_id=approver.user_id,
                    role_name=approver.role_name.upper() if approver.role_name else None,
                ))
            workflow.steps.append(step)

        self.db.add(workflow)
        self.db.commit()
        self.db.refresh(workflow)
        logger.info(f"Workflow {workflow.id} created with {len(workflow.steps)} steps")
        return workflow

    def deactivate_workflow(self, user: User, workflow_id: uuid.UUID) -> None:
        workflow = self.get_workflow(user, workflow_id)
        workflow.is_active = False
        self.db.commit()

    # Approvers

    def eligible_approvers(self, company_id: uuid.UUID, step: ApprovalWorkflowStep) -> List[User]:
        approvers = {}
        role_names = []
        for approver in step.approvers:
            if approver.approver_type == ApproverTypeEnum.user and approver.user_id:
                user = self.users.get_company_user(company_id, approver.user_id)
                if user and user.is_active:
                    approvers[user.id] = user
            elif approver.approver_type == ApproverTypeEnum.role and approver.role_name:
                role_names.append(approver.role_name.upper())

        roles = [UserRoleEnum(name) for name in role_names if name in UserRoleEnum.__members__]
        for user in self.users.get_company_users_by_roles(company_id, roles):
            approvers[user.id] = user
        return list(approvers.values())

    def is_eligible(self, user: User, request: ApprovalRequest) -> bool:
        if request.current_step is None:
            return False
        return any(a.id == user.id for a in self.eligible_approvers(request.company_id, request.current_step))

    def _round_decisions(self, request: ApprovalRequest) -> List[ApprovalDecision]:
        return [
            d for d in request.decisions
            if d.step_id == request.current_step_id
            and (request.step_started_at is None or d.decided_at >= request.step_started_at)
        ]

    def can_approve(self, user: User, request: ApprovalRequest) -> bool:
        if request.status != ApprovalStatusEnum.in_progress or not self.is_eligible(user, request):
            return False
        return not any(d.approver_id == user.id for d in self._round_decisions(request))

    # Requests

    def _audit(self, request: ApprovalRequest, action: str, actor_id: Optional[uuid.UUID], details: Optional[dict] = None):
        request.audit_logs.append(ApprovalAuditLog(action=action, actor_id=actor_id, details=details))

    def _start_step(self, request: ApprovalRequest, step: ApprovalWorkflowStep, actor_id: Optional[uuid.UUID]) -> None:
        request.current_step_id = step.id
        request.current_step = step
        request.step_started_at = utcnow()
        request.status = ApprovalStatusEnum.in_progress
        self._audit(request, "step_started", actor_id, {"step_id": str(step.id), "step_name": step.name})

        approvers = self.eligible_approvers(request.company_id, step)
        self.notifications.notify_many(
            [a for a in approvers if a.id != actor_id],
            type=NotificationTypeEnum.APPROVAL_REQUEST,
            title=f"Approbation requise : {request.title}",
            message=f"Votre approbation est requise pour l'étape « {step.name} ».",
            link=f"/approvals/{request.id}",
            metadata={"approval_request_id": str(request.id), "step_id": str(step.id)},
        )

    def list_requests(
        self,
        user: User,
        status: Optional[ApprovalStatusEnum] = None,
        role: Optional[str] = None,
        entity_type: Optional[str] = None,
    ) -> List[ApprovalRequest]:
        query = self.db.query(ApprovalRequest).filter(ApprovalRequest.company_id == user.company_id)
        if status:
            query = query.filter(ApprovalRequest.status == status)
        if entity_type:
            query = query.filter(ApprovalRequest.entity_type == entity_type)
        if role == "requester":
            query = query.filter(ApprovalRequest.requested_by == user.id)
        requests = query.order_by(ApprovalRequest.created_at.desc()).all()
        if role == "approver":
            requests = [r for r in requests if r.status == ApprovalStatusEnum.in_progress and self.is_eligible(user, r)]
        return requests[:MAX_LISTED_REQUESTS]

    def get_request(self, user: User, request_id: uuid.UUID) -> ApprovalRequest:
        request = (
            self.db.query(ApprovalRequest)
            .filter(ApprovalRequest.id == request_id, ApprovalRequest.company_id == user.company_id)
            .first()
        )
        if not request:
            raise NotFoundError("Approval request not found")
        return request

    def create_request(self, user: User, data: ApprovalRequestCreate) -> ApprovalRequest:
        workflow = (
            self.db.query(ApprovalWorkflow)
            .filter(
                ApprovalWorkflow.id == data.workflow_id,
                ApprovalWorkflow.company_id == user.company_id,
                ApprovalWorkflow.is_active.is_(True),
            )
            .first()
        )
        if not workflow:
            raise NotFoundError("Workflow not found")
        if not workflow.steps:
            raise ValidationError("Workflow has no steps configured")

        request = ApprovalRequest(
            company_id=user.company_id,
            workflow_id=workflow.id,
            entity_type=data.entity_type,
            entity_id=data.entity_id,
            title=data.title,
            description=data.description,
            extra=data.metadata,
            is_urgent=data.is_urgent,
            due_date=data.due_date,
            requested_by=user.id,
            status=ApprovalStatusEnum.pending,
        )
        self.db.add(request)
        self.db.flush()

        self._audit(request, "created", user.id, {"workflow_id": str(workflow.id)})
        self._start_step(request, workflow.steps[0], user.id)
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"Approval request {request.id} created on workflow {workflow.id}")
        return request

    def decide(self, user: User, request_id: uuid.UUID, data: DecisionCreate):
        request = self.get_request(user, request_id)
        if request.status != ApprovalStatusEnum.in_progress:
            raise ValidationError("Request is not pending approval")
        if not self.is_eligible(user, request):
            raise PermissionDeniedError("You are not authorized to approve this step")
        round_decisions = self._round_decisions(request)
        if any(d.approver_id == user.id for d in round_decisions):
            raise ValidationError("You have already made a decision for this step")

        step = request.current_step
        decision = ApprovalDecision(
            step_id=step.id,
            approver_id=user.id,
            decision=data.decision,
            comment=data.comment,
            attachments=data.attachments,
            decided_at=utcnow(),
        )
        request.decisions.append(decision)
        self._audit(request, "decision_made", user.id, {
            "step_id": str(step.id), "step_name": step.name, "decision": data.decision.value, "comment": data.comment,
        })

        requester = self.users.get_by_id(request.requested_by)
        if data.decision == DecisionEnum.rejected:
            request.status = ApprovalStatusEnum.rejected
            request.completed_at = utcnow()
            self._audit(request, "rejected", user.id, {"step_id": str(step.id)})
            self._notify_requester(requester, request, "Demande rejetée", f"« {request.title} » a été rejetée.")
        elif data.decision == DecisionEnum.request_changes:
            request.status = ApprovalStatusEnum.changes_requested
            self._audit(request, "changes_requested", user.id, {"step_id": str(step.id)})
            self._notify_requester(
                requester, request, "Modifications demandées", f"Des modifications sont demandées sur « {request.title} »."
            )
        else:
            approvals = sum(1 for d in round_decisions if d.decision == DecisionEnum.approved) + 1
            eligible_count = len(self.eligible_approvers(request.company_id, step))
            if approvals >= required_approvals(step, eligible_count):
                self._complete_step(request, step, user, requester)

        self.db.commit()
        self.db.refresh(request)
        return decision, request

    def _complete_step(self, request: ApprovalRequest, step: ApprovalWorkflowStep, actor: User, requester: Optional[User]):
        self._audit(request, "step_completed", actor.id, {"step_id": str(step.id), "step_name": step.name})
        next_step = next((s for s in request.workflow.steps if s.step_order > step.step_order), None)
        if next_step is not None:
            self._start_step(request, next_step, actor.id)
            return
        request.status = ApprovalStatusEnum.approved
        request.completed_at = utcnow()
        self._audit(request, "approved", actor.id)
        self._notify_requester(requester, request, "Demande approuvée", f"« {request.title} » a été approuvée.")
        logger.info(f"Approval request {request.id} approved")

    def _notify_requester(self, requester: Optional[User], request: ApprovalRequest, title: str, message: str):
        if requester is None:
            return
        self.notifications.notify(
            requester,
            type=NotificationTypeEnum.APPROVAL_REQUEST,
            title=title,
            message=message,
            link=f"/approvals/{request.id}",
            metadata={"approval_request_id": str(request.id), "status": request.status.value},
        )

    def resubmit(self, user: User, request_id: uuid.UUID) -> ApprovalRequest:
        request = self.get_request(user, request_id)
        if request.requested_by != user.id:
            raise PermissionDeniedError("Only the requester can resubmit this request")
        if request.status != ApprovalStatusEnum.changes_requested:
            raise ValidationError("Only requests with requested changes can be resubmitted")
        self._audit(request, "resubmitted", user.id)
        self._start_step(request, request.current_step, user.id)
        self.db.commit()
        self.db.refresh(request)
        return request

    def cancel(self, user: User, request_id: uuid.UUID) -> ApprovalRequest:
        request = self.get_request(user, request_id)
        if request.requested_by != user.id:
            raise PermissionDeniedError("Only the requester can cancel this request")
        if request.status in FINAL_APPROVAL_STATUSES:
            raise ValidationError("Cannot cancel a completed request")
        request.status = ApprovalStatusEnum.cancelled
        request.completed_at = utcnow()
        self._audit(request, "cancelled", user.id, {"reason": "Cancelled by requester"})
        self.db.commit()
        self.db.refresh(request)
        return request

    # Comments

    def list_comments(self, user: User, request_id: uuid.UUID) -> List[ApprovalComment]:
        return self.get_request(user, request_id).comments

    def add_comment(self, user: User, request_id: uuid.UUID, data: CommentCreate) -> ApprovalComment:
        request = self.get_request(user, request_id)
        comment = ApprovalComment(user_id=user.id, content=data.content)
        request.comments.append(comment)
        self._audit(request, "comment_added", user.id)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def audit_log(self, user: User, request_id: uuid.UUID) -> List[ApprovalAuditLog]:
        return self.get_request(user, request_id).audit_logs
