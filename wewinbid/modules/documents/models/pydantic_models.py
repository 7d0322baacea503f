from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.core.types import UTCDateTime
from wewinbid.modules.documents.db.schema import DocumentStatusEnum, DocumentTypeEnum


class DocumentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=500)
    type: DocumentTypeEnum = DocumentTypeEnum.OTHER
    status: DocumentStatusEnum = DocumentStatusEnum.DRAFT
    tender_id: Optional[UUID] = None
    content: Optional[str] = None
    is_template: bool = False
    expires_at: Optional[UTCDateTime] = None


class DocumentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=500)
    type: Optional[DocumentTypeEnum] = None
    status: Optional[DocumentStatusEnum] = None
    tender_id: Optional[UUID] = None
    content: Optional[str] = None
    is_template: Optional[bool] = None
    expires_at: Optional[UTCDateTime] = None


class DocumentResponse(BaseModel):
    id: UUID
    company_id: UUID
    tender_id: Optional[UUID] = None
    created_by: Optional[UUID] = None
    name: str
    type: DocumentTypeEnum
    status: DocumentStatusEnum
    file_name: Optional[str] = None
    file_size: int
    mime_type: Optional[str] = None
    content: Optional[str] = None
    version: int
    is_template: bool
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class TemplateSectionInfo(BaseModel):
    id: str
    title: str


class TemplateInfo(BaseModel):
    key: DocumentTypeEnum
    name: str
    category: str
    description: str
    sections: List[TemplateSectionInfo]


class GenerateRequest(BaseModel):
    tender_id: UUID
    document_type: DocumentTypeEnum
    custom_prompt: Optional[str] = Field(None, max_length=4000)
    save: bool = False


class GeneratedSection(BaseModel):
    id: str
    title: str
    content: str
    order: int


class GenerateResponse(BaseModel):
    document_type: DocumentTypeEnum
    title: str
    content: str
    sections: List[GeneratedSection]
    provider: str
    generated_at: datetime
    document_id: Optional[UUID] = None
