from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.modules.tenders.models.pydantic_models import Tender


class SearchFilters(BaseModel):
    countries: List[str] = Field(default_factory=list)
    sectors: List[str] = Field(default_factory=list)
    statuses: List[str] = Field(default_factory=list)
    min_budget: Optional[float] = None
    max_budget: Optional[float] = None
    deadline_from: Optional[datetime] = None
    deadline_to: Optional[datetime] = None


class SearchPagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class SearchResponse(BaseModel):
    results: List[Tender]
    pagination: SearchPagination
    filters: SearchFilters
    query: Optional[str] = None


class SuggestionsResponse(BaseModel):
    suggestions: List[str]


class SearchHistoryEntry(BaseModel):
    id: UUID
    query: Optional[str] = None
    filters: dict
    results_count: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SavedSearchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    query: Optional[str] = Field(None, max_length=500)
    filters: dict = Field(default_factory=dict)
    notify: bool = False


class SavedSearchUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    query: Optional[str] = Field(None, max_length=500)
    filters: Optional[dict] = None
    notify: Optional[bool] = None


class SavedSearchResponse(BaseModel):
    id: UUID
    name: str
    query: Optional[str] = None
    filters: dict
    notify: bool
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)
