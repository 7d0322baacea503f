from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.core.types import UTCDateTime
from wewinbid.modules.approvals.db.schema import (
    ApprovalStatusEnum,
    ApprovalTypeEnum,
    ApproverTypeEnum,
    DecisionEnum,
)


class ApproverInput(BaseModel):
    approver_type: ApproverTypeEnum = ApproverTypeEnum.user
    user_id: Optional[UUID] = None
    role_name: Optional[str] = Field(None, max_length=50)

    @model_validator(mode="after")
    def check_target(self):
        if self.approver_type == ApproverTypeEnum.user and not self.user_id:
            raise ValueError("user_id is required for user approvers")
        if self.approver_type == ApproverTypeEnum.role and not self.role_name:
            raise ValueError("role_name is required for role approvers")
        return self


class StepInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    approval_type: ApprovalTypeEnum = ApprovalTypeEnum.single
    threshold_count: Optional[int] = Field(None, ge=1)
    approvers: List[ApproverInput] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_threshold(self):
        if self.approval_type == ApprovalTypeEnum.threshold and not self.threshold_count:
            raise ValueError("threshold_count is required for threshold steps")
        return self


class WorkflowCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    entity_type: str = Field("tender", max_length=50)
    steps: List[StepInput] = Field(default_factory=list)


class ApproverResponse(BaseModel):
    id: UUID
    approver_type: ApproverTypeEnum
    user_id: Optional[UUID] = None
    role_name: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class StepResponse(BaseModel):
    id: UUID
    step_order: int
    name: str
    approval_type: ApprovalTypeEnum
    threshold_count: Optional[int] = None
    approvers: List[ApproverResponse] = []
    model_config = ConfigDict(from_attributes=True)


class WorkflowResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    entity_type: str
    is_active: bool
    steps: List[StepResponse] = []
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ApprovalRequestCreate(BaseModel):
    workflow_id: UUID
    entity_type: str = Field(..., max_length=50)
    entity_id: Optional[UUID] = None
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    metadata: Optional[dict] = None
    is_urgent: bool = False
    due_date: Optional[UTCDateTime] = None


class DecisionCreate(BaseModel):
    decision: DecisionEnum
    comment: Optional[str] = None
    attachments: List[str] = Field(default_factory=list)


class DecisionResponse(BaseModel):
    id: UUID
    step_id: UUID
    approver_id: UUID
    decision: DecisionEnum
    comment: Optional[str] = None
    attachments: list = []
    decided_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ApprovalRequestResponse(BaseModel):
    id: UUID
    workflow_id: UUID
    entity_type: str
    entity_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    metadata: Optional[dict] = Field(None, validation_alias="extra")
    is_urgent: bool
    due_date: Optional[datetime] = None
    requested_by: UUID
    status: ApprovalStatusEnum
    current_step_id: Optional[UUID] = None
    current_step: Optional[StepResponse] = None
    step_started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    decisions: List[DecisionResponse] = []
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ApprovalRequestDetail(BaseModel):
    request: ApprovalRequestResponse
    can_approve: bool
    is_requester: bool


class DecisionResult(BaseModel):
    decision: DecisionResponse
    request: ApprovalRequestResponse


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class AuditLogResponse(BaseModel):
    id: UUID
    action: str
    actor_id: Optional[UUID] = None
    details: Optional[dict] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
