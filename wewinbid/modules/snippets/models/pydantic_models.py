from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

SHORTCUT_PATTERN = r"^[a-z0-9-]+$"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None
    color: str = Field("#6B7280", pattern=COLOR_PATTERN)
    icon: Optional[str] = Field(None, max_length=50)
    display_order: int = Field(0, ge=0)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)
    icon: Optional[str] = Field(None, max_length=50)
    display_order: Optional[int] = Field(None, ge=0)


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    color: str
    icon: Optional[str] = None
    display_order: int
    snippet_count: int = 0
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CategorySummary(BaseModel):
    id: UUID
    name: str
    color: str
    icon: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class SnippetCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    content: str = Field(..., min_length=5)
    category_id: Optional[UUID] = None
    tags: List[str] = Field(default_factory=list)
    shortcut: Optional[str] = Field(None, max_length=50, pattern=SHORTCUT_PATTERN)
    is_favorite: bool = False

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(value)


class SnippetUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    content: Optional[str] = Field(None, min_length=5)
    category_id: Optional[UUID] = None
    tags: Optional[List[str]] = None
    shortcut: Optional[str] = Field(None, max_length=50, pattern=SHORTCUT_PATTERN)
    is_favorite: Optional[bool] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(value)


class SnippetResponse(BaseModel):
    id: UUID
    title: str
    content: str
    category_id: Optional[UUID] = None
    category: Optional[CategorySummary] = None
    tags: List[str] = []
    shortcut: Optional[str] = None
    is_favorite: bool
    usage_count: int
    last_used_at: Optional[datetime] = None
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SnippetListResponse(BaseModel):
    snippets: List[SnippetResponse]
    total: int
