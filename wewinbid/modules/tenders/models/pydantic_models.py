from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.core.types import UTCDateTime
from wewinbid.modules.tenders.db.schema import BuyerTypeEnum, SectorEnum, TenderStatusEnum, TenderTypeEnum


class TenderBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    type: TenderTypeEnum
    sector: Optional[SectorEnum] = None
    country: str = Field(..., min_length=2, max_length=2)
    region: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    buyer_name: Optional[str] = Field(None, max_length=500)
    buyer_type: Optional[BuyerTypeEnum] = None
    buyer_contact: Optional[str] = Field(None, max_length=255)
    buyer_email: Optional[str] = Field(None, max_length=255)
    buyer_phone: Optional[str] = Field(None, max_length=50)
    estimated_value: Optional[float] = Field(None, ge=0)
    proposed_price: Optional[float] = Field(None, ge=0)
    publication_date: Optional[UTCDateTime] = None
    deadline: Optional[UTCDateTime] = None
    source_url: Optional[str] = Field(None, max_length=1000)
    platform: Optional[str] = Field(None, max_length=255)
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class TenderCreate(TenderBase):
    reference: Optional[str] = Field(None, max_length=100)
    status: TenderStatusEnum = TenderStatusEnum.DRAFT


class TenderUpdate(BaseModel):
    reference: Optional[str] = Field(None, min_length=1, max_length=100)
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    type: Optional[TenderTypeEnum] = None
    status: Optional[TenderStatusEnum] = None
    sector: Optional[SectorEnum] = None
    country: Optional[str] = Field(None, min_length=2, max_length=2)
    region: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    buyer_name: Optional[str] = Field(None, max_length=500)
    buyer_type: Optional[BuyerTypeEnum] = None
    buyer_contact: Optional[str] = Field(None, max_length=255)
    buyer_email: Optional[str] = Field(None, max_length=255)
    buyer_phone: Optional[str] = Field(None, max_length=50)
    estimated_value: Optional[float] = Field(None, ge=0)
    proposed_price: Optional[float] = Field(None, ge=0)
    winning_price: Optional[float] = Field(None, ge=0)
    publication_date: Optional[UTCDateTime] = None
    deadline: Optional[UTCDateTime] = None
    source_url: Optional[str] = Field(None, max_length=1000)
    platform: Optional[str] = Field(None, max_length=255)
    tags: Optional[List[str]] = None
    notes: Optional[str] = None


class Tender(TenderBase):
    id: UUID
    reference: str
    status: TenderStatusEnum
    company_id: UUID
    created_by: Optional[UUID] = None
    winning_price: Optional[float] = None
    submission_date: Optional[datetime] = None
    result_date: Optional[datetime] = None
    ai_score: Optional[float] = None
    ai_score_updated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class TenderListResponse(BaseModel):
    tenders: List[Tender]
    pagination: Pagination


class TenderHistoryEntry(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    action: str
    field: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    details: Optional[dict] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)
    parent_id: Optional[UUID] = None
    mentions: List[UUID] = Field(default_factory=list)


class CommentResponse(BaseModel):
    id: UUID
    tender_id: UUID
    user_id: Optional[UUID] = None
    author_name: Optional[str] = None
    parent_id: Optional[UUID] = None
    content: str
    mentions: List[str] = []
    created_at: datetime
    replies: List["CommentResponse"] = []
    model_config = ConfigDict(from_attributes=True)


class FavoriteToggleResponse(BaseModel):
    tender_id: UUID
    is_favorite: bool


class ScoreCriterion(BaseModel):
    key: str
    name: str
    score: int
    max_score: int
    details: str
    improvements: List[str] = []


class TenderScoreResponse(BaseModel):
    tender_id: UUID
    total_score: int
    max_score: int
    percentage: int
    grade: str
    criteria: List[ScoreCriterion]
    summary: str
    recommendations: List[str]
    win_probability: int
    calculated_at: datetime


class TenderDraft(BaseModel):
    title: Optional[str] = None
    reference: Optional[str] = None
    buyer_name: Optional[str] = None
    deadline: Optional[datetime] = None
    estimated_value: Optional[float] = None
    description: Optional[str] = None
    sector: Optional[SectorEnum] = None
    country: Optional[str] = None


class TenderExtractionResponse(BaseModel):
    file_name: str
    characters: int
    excerpt: str
    provider: str
    draft: TenderDraft
