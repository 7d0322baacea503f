import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wewinbid.core.helpers import to_naive_utc
from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.search.models.pydantic_models import (
    SavedSearchCreate,
    SavedSearchResponse,
    SavedSearchUpdate,
    SearchFilters,
    SearchHistoryEntry,
    SearchPagination,
    SearchResponse,
    SuggestionsResponse,
)
from wewinbid.modules.search.services.search_service import SearchService, split_list
from wewinbid.modules.tenders.models.pydantic_models import Tender

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("", response_model=SearchResponse)
def search_tenders(
    q: Optional[str] = Query(None, max_length=500),
    country: Optional[str] = Query(None, description="Comma-separated ISO country codes"),
    sector: Optional[str] = Query(None, description="Comma-separated sectors"),
    status_filter: Optional[str] = Query(None, alias="status", description="Comma-separated statuses"),
    min_budget: Optional[float] = Query(None, ge=0),
    max_budget: Optional[float] = Query(None, ge=0),
    deadline_from: Optional[datetime] = Query(None),
    deadline_to: Optional[datetime] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    query = q.strip() if q and q.strip() else None
    filters = SearchFilters(
        countries=split_list(country),
        sectors=split_list(sector),
        statuses=split_list(status_filter),
        min_budget=min_budget,
        max_budget=max_budget,
        deadline_from=to_naive_utc(deadline_from) if deadline_from else None,
        deadline_to=to_naive_utc(deadline_to) if deadline_to else None,
    )
    results, total, total_pages = SearchService(db).search(current_user, query, filters, page, limit)
    return SearchResponse(
        results=[Tender.model_validate(t) for t in results],
        pagination=SearchPagination(page=page, limit=limit, total=total, total_pages=total_pages),
        filters=filters,
        query=query,
    )


@router.get("/suggestions", response_model=SuggestionsResponse)
def search_suggestions(
    q: str = Query(..., min_length=2, max_length=100),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SuggestionsResponse(suggestions=SearchService(db).suggestions(current_user, q.strip()))


@router.get("/history", response_model=List[SearchHistoryEntry])
def get_search_history(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SearchService(db).history(current_user)


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_search_history(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    SearchService(db).clear_history(current_user)


@router.get("/saved", response_model=List[SavedSearchResponse])
def list_saved_searches(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SearchService(db).list_saved(current_user)


@router.post("/saved", response_model=SavedSearchResponse, status_code=status.HTTP_201_CREATED)
def create_saved_search(
    request: SavedSearchCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SearchService(db).create_saved(current_user, request)


@router.get("/saved/{saved_id}", response_model=SavedSearchResponse)
def get_saved_search(
    saved_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SearchService(db).get_saved(current_user, saved_id)


@router.patch("/saved/{saved_id}", response_model=SavedSearchResponse)
def update_saved_search(
    saved_id: uuid.UUID,
    request: SavedSearchUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SearchService(db).update_saved(current_user, saved_id, request)


@router.delete("/saved/{saved_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_search(
    saved_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    SearchService(db).delete_saved(current_user, saved_id)
