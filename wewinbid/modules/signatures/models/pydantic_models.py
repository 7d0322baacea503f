from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.modules.signatures.db.schema import SignatureRequestStatusEnum, SignerStatusEnum


class SignerInput(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class SignatureRequestCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    tender_id: Optional[UUID] = None
    document_url: Optional[str] = Field(None, max_length=1000)
    document_name: Optional[str] = Field(None, max_length=500)
    signers: List[SignerInput] = Field(..., min_length=1)
    expires_in_days: int = Field(30, ge=1, le=365)
    send_immediately: bool = False


class SignerResponse(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    email: str
    name: str
    phone: Optional[str] = None
    order_index: int
    status: SignerStatusEnum
    notified_at: Optional[datetime] = None
    viewed_at: Optional[datetime] = None
    signed_at: Optional[datetime] = None
    declined_at: Optional[datetime] = None
    decline_reason: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class SignatureRequestResponse(BaseModel):
    id: UUID
    tender_id: Optional[UUID] = None
    created_by: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    status: SignatureRequestStatusEnum
    document_url: Optional[str] = None
    document_name: Optional[str] = None
    document_hash: Optional[str] = None
    expires_at: datetime
    completed_at: Optional[datetime] = None
    signers: List[SignerResponse] = []
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SignatureRequestList(BaseModel):
    requests: List[SignatureRequestResponse]
    total: int
    page: int
    limit: int


class AuditLogResponse(BaseModel):
    id: UUID
    signer_id: Optional[UUID] = None
    action: str
    actor_id: Optional[UUID] = None
    actor_type: str
    details: Optional[dict] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SigningDocument(BaseModel):
    """What a signer sees when opening their signing link."""
    request_id: UUID
    title: str
    description: Optional[str] = None
    document_url: Optional[str] = None
    document_name: Optional[str] = None
    document_hash: Optional[str] = None
    request_status: SignatureRequestStatusEnum
    expires_at: datetime
    signer: SignerResponse


class SignRequest(BaseModel):
    signature_data: str = Field(..., min_length=1)


class DeclineRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)
