"""
Schema for multi-step approval workflows.

A workflow is an ordered list of steps; each step names its approvers
(individual users or company roles) and how many approvals complete it.
Requests move through the steps of their workflow one at a time.
"""
import uuid
import enum
from datetime import datetime
from typing import Optional, List
from sqlalchemy import String, DateTime, ForeignKey, Text, Integer, Boolean, JSON, Uuid, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship, Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class ApprovalTypeEnum(str, enum.Enum):
    single = "single"
    all = "all"
    majority = "majority"
    threshold = "threshold"


class ApproverTypeEnum(str, enum.Enum):
    user = "user"
    role = "role"


class ApprovalStatusEnum(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    approved = "approved"
    rejected = "rejected"
    changes_requested = "changes_requested"
    cancelled = "cancelled"


FINAL_APPROVAL_STATUSES = (
    ApprovalStatusEnum.approved,
    ApprovalStatusEnum.rejected,
    ApprovalStatusEnum.cancelled,
)


class DecisionEnum(str, enum.Enum):
    approved = "approved"
    rejected = "rejected"
    request_changes = "request_changes"


class ApprovalWorkflow(Base):
    __tablename__ = 'approval_workflows'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False, default="tender")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    steps: Mapped[List["ApprovalWorkflowStep"]] = relationship(
        back_populates="workflow", cascade="all, delete-orphan", order_by="ApprovalWorkflowStep.step_order"
    )


class ApprovalWorkflowStep(Base):
    __tablename__ = 'approval_workflow_steps'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workflow_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('approval_workflows.id', ondelete='CASCADE'), nullable=False, index=True)
    step_order: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    approval_type: Mapped[ApprovalTypeEnum] = mapped_column(
        SQLAlchemyEnum(ApprovalTypeEnum, native_enum=False, length=20), nullable=False, default=ApprovalTypeEnum.single
    )
    threshold_count: Mapped[Optional[int]] = mapped_column(Integer)

    workflow: Mapped["ApprovalWorkflow"] = relationship(back_populates="steps")
    approvers: Mapped[List["ApprovalStepApprover"]] = relationship(back_populates="step", cascade="all, delete-orphan")


class ApprovalStepApprover(Base):
    __tablename__ = 'approval_step_approvers'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    step_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('approval_workflow_steps.id', ondelete='CASCADE'), nullable=False, index=True)
    approver_type: Mapped[ApproverTypeEnum] = mapped_column(
        SQLAlchemyEnum(ApproverTypeEnum, native_enum=False, length=10), nullable=False, default=ApproverTypeEnum.user
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'))
    role_name: Mapped[Optional[str]] = mapped_column(String(50))

    step: Mapped["ApprovalWorkflowStep"] = relationship(back_populates="approvers")


class ApprovalRequest(Base):
    __tablename__ = 'approval_requests'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    workflow_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('approval_workflows.id', ondelete='CASCADE'), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    extra: Mapped[Optional[dict]] = mapped_column("metadata", JSON)
    is_urgent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    requested_by: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    status: Mapped[ApprovalStatusEnum] = mapped_column(
        SQLAlchemyEnum(ApprovalStatusEnum, native_enum=False, length=30),
        nullable=False,
        default=ApprovalStatusEnum.pending,
        index=True,
    )
    current_step_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('approval_workflow_steps.id', ondelete='SET NULL'))
    step_started_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    workflow: Mapped["ApprovalWorkflow"] = relationship()
    current_step: Mapped[Optional["ApprovalWorkflowStep"]] = relationship()
    decisions: Mapped[List["ApprovalDecision"]] = relationship(
        back_populates="request", cascade="all, delete-orphan", order_by="ApprovalDecision.decided_at"
    )
    comments: Mapped[List["ApprovalComment"]] = relationship(
        back_populates="request", cascade="all, delete-orphan", order_by="ApprovalComment.created_at"
    )
    audit_logs: Mapped[List["ApprovalAuditLog"]] = relationship(
        back_populates="request", cascade="all, delete-orphan", order_by="ApprovalAuditLog.created_at"
    )


class ApprovalDecision(Base):
    __tablename__ = 'approval_decisions'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('approval_requests.id', ondelete='CASCADE'), nullable=False, index=True)
    step_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('approval_workflow_steps.id', ondelete='CASCADE'), nullable=False)
    approver_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    decision: Mapped[DecisionEnum] = mapped_column(SQLAlchemyEnum(DecisionEnum, native_enum=False, length=20), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    attachments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    decided_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    request: Mapped["ApprovalRequest"] = relationship(back_populates="decisions")


class ApprovalComment(Base):
    __tablename__ = 'approval_comments'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('approval_requests.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    request: Mapped["ApprovalRequest"] = relationship(back_populates="comments")


class ApprovalAuditLog(Base):
    __tablename__ = 'approval_audit_logs'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('approval_requests.id', ondelete='CASCADE'), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    actor_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'))
    details: Mapped[Optional[dict]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    request: Mapped["ApprovalRequest"] = relationship(back_populates="audit_logs")
