import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.search.services.search_service import split_list
from wewinbid.modules.snippets.models.pydantic_models import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    SnippetCreate,
    SnippetListResponse,
    SnippetResponse,
    SnippetUpdate,
)
from wewinbid.modules.snippets.services.snippet_service import SnippetService

router = APIRouter(prefix="/snippets", tags=["Snippets"])


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SnippetService(db).list_categories(current_user)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    request: CategoryCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SnippetService(db).create_category(current_user, request)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: uuid.UUID,
    request: CategoryUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SnippetService(db).update_category(current_user, category_id, request)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    SnippetService(db).delete_category(current_user, category_id)


@router.get("", response_model=SnippetListResponse)
def list_snippets(
    category_id: Optional[uuid.UUID] = Query(None),
    is_favorite: bool = Query(False),
    query: Optional[str] = Query(None, max_length=200),
    tags: Optional[str] = Query(None, description="Comma-separated tags, all must match"),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    snippets = SnippetService(db).list_snippets(
        current_user,
        category_id=category_id,
        favorites_only=is_favorite,
        query=query.strip() if query and query.strip() else None,
        tags=split_list(tags),
    )
    return SnippetListResponse(snippets=[SnippetResponse.model_validate(s) for s in snippets], total=len(snippets))


@router.post("", response_model=SnippetResponse, status_code=status.HTTP_201_CREATED)
def create_snippet(
    request: SnippetCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SnippetService(db).create_snippet(current_user, request)


@router.get("/shortcut/{shortcut}", response_model=SnippetResponse)
def get_snippet_by_shortcut(
    shortcut: str,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SnippetService(db).get_by_shortcut(current_user, shortcut)


@router.get("/{snippet_id}", response_model=SnippetResponse)
def get_snippet(
    snippet_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SnippetService(db).get_snippet(current_user, snippet_id)


@router.patch("/{snippet_id}", response_model=SnippetResponse)
def update_snippet(
    snippet_id: uuid.UUID,
    request: SnippetUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SnippetService(db).update_snippet(current_user, snippet_id, request)


@router.delete("/{snippet_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_snippet(
    snippet_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    SnippetService(db).delete_snippet(current_user, snippet_id)


@router.post("/{snippet_id}/use", response_model=SnippetResponse, summary="Record that a snippet was inserted")
def use_snippet(
    snippet_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SnippetService(db).record_use(current_user, snippet_id)
