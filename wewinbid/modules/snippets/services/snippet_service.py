"""
Company snippet library: reusable blocks of bid text, grouped in categories.

Snippets are soft-deleted so usage statistics survive; a deleted snippet frees
its shortcut for reuse.
"""
import logging
import uuid
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from wewinbid.core.errors import ConflictError, NotFoundError, ValidationError
from wewinbid.core.helpers import utcnow
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.snippets.db.schema import Snippet, SnippetCategory
from wewinbid.modules.snippets.models.pydantic_models import (
    CategoryCreate,
    CategoryUpdate,
    SnippetCreate,
    SnippetUpdate,
)

logger = logging.getLogger(__name__)


class SnippetService:
    def __init__(self, db: Session):
        self.db = db

    # --- Categories ---

    def _active_counts(self, company_id: uuid.UUID) -> Dict[uuid.UUID, int]:
        rows = (
            self.db.query(Snippet.category_id, func.count(Snippet.id))
            .filter(Snippet.company_id == company_id, Snippet.is_active.is_(True), Snippet.category_id.isnot(None))
            .group_by(Snippet.category_id)
            .all()
        )
        return {category_id: count for category_id, count in rows}

    def list_categories(self, user: User) -> List[dict]:
        categories = (
            self.db.query(SnippetCategory)
            .filter(SnippetCategory.company_id == user.company_id)
            .order_by(SnippetCategory.display_order, SnippetCategory.name)
            .all()
        )
        counts = self._active_counts(user.company_id)
        return [self._category_dict(c, counts.get(c.id, 0)) for c in categories]

    @staticmethod
    def _category_dict(category: SnippetCategory, snippet_count: int) -> dict:
        return {
            "id": category.id,
            "name": category.name,
            "description": category.description,
            "color": category.color,
            "icon": category.icon,
            "display_order": category.display_order,
            "snippet_count": snippet_count,
            "created_at": category.created_at,
            "updated_at": category.updated_at,
        }

    def get_category(self, user: User, category_id: uuid.UUID) -> SnippetCategory:
        category = (
            self.db.query(SnippetCategory)
            .filter(SnippetCategory.id == category_id, SnippetCategory.company_id == user.company_id)
            .first()
        )
        if not category:
            raise NotFoundError("Snippet category not found")
        return category

    def _ensure_category_name_free(self, company_id: uuid.UUID, name: str, exclude_id: Optional[uuid.UUID] = None):
        query = self.db.query(SnippetCategory.id).filter(
            SnippetCategory.company_id == company_id, func.lower(SnippetCategory.name) == name.lower()
        )
        if exclude_id:
            query = query.filter(SnippetCategory.id != exclude_id)
        if query.first():
            raise ConflictError("A category with this name already exists", {"name": name})

    def create_category(self, user: User, request: CategoryCreate) -> dict:
        name = request.name.strip()
        self._ensure_category_name_free(user.company_id, name)
        category = SnippetCategory(company_id=user.company_id, **request.model_dump(exclude={"name"}), name=name)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return self._category_dict(category, 0)

    def update_category(self, user: User, category_id: uuid.UUID, request: CategoryUpdate) -> dict:
        category = self.get_category(user, category_id)
        changes = request.model_dump(exclude_unset=True)
        if changes.get("name"):
            changes["name"] = changes["name"].strip()
            self._ensure_category_name_free(user.company_id, changes["name"], exclude_id=category.id)
        for field, value in changes.items():
            if value is not None:
                setattr(category, field, value)
        self.db.commit()
        self.db.refresh(category)
        return self._category_dict(category, self._active_counts(user.company_id).get(category.id, 0))

    def delete_category(self, user: User, category_id: uuid.UUID) -> None:
        category = self.get_category(user, category_id)
        in_use = self._active_counts(user.company_id).get(category.id, 0)
        if in_use:
            raise ValidationError("Cannot delete a category that still contains snippets", {"snippet_count": in_use})
        # Soft-deleted snippets keep their text but lose the category
        self.db.query(Snippet).filter(Snippet.category_id == category.id).update(
            {Snippet.category_id: None}, synchronize_session=False
        )
        self.db.delete(category)
        self.db.commit()
        logger.info(f"Snippet category {category_id} deleted by user {user.id}")

    # --- Snippets ---

    def list_snippets(
        self,
        user: User,
        category_id: Optional[uuid.UUID] = None,
        favorites_only: bool = False,
        query: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> List[Snippet]:
        q = self.db.query(Snippet).filter(Snippet.company_id == user.company_id, Snippet.is_active.is_(True))
        if category_id:
            q = q.filter(Snippet.category_id == category_id)
        if favorites_only:
            q = q.filter(Snippet.is_favorite.is_(True))
        if query:
            pattern = f"%{query}%"
            q = q.filter(or_(Snippet.title.ilike(pattern), Snippet.content.ilike(pattern)))
        snippets = q.order_by(Snippet.usage_count.desc(), Snippet.title).all()

        if tags:
            wanted = {t.strip().lower() for t in tags if t.strip()}
            snippets = [s for s in snippets if wanted <= set(s.tags or [])]
        return snippets

    def get_snippet(self, user: User, snippet_id: uuid.UUID) -> Snippet:
        snippet = (
            self.db.query(Snippet)
            .filter(Snippet.id == snippet_id, Snippet.company_id == user.company_id, Snippet.is_active.is_(True))
            .first()
        )
        if not snippet:
            raise NotFoundError("Snippet not found")
        return snippet

    def get_by_shortcut(self, user: User, shortcut: str) -> Snippet:
        snippet = (
            self.db.query(Snippet)
            .filter(Snippet.company_id == user.company_id, Snippet.shortcut == shortcut, Snippet.is_active.is_(True))
            .first()
        )
        if not snippet:
            raise NotFoundError(f"No snippet with shortcut '{shortcut}'")
        return snippet

    def _ensure_shortcut_free(self, company_id: uuid.UUID, shortcut: str, exclude_id: Optional[uuid.UUID] = None):
        query = self.db.query(Snippet.id).filter(
            Snippet.company_id == company_id, Snippet.shortcut == shortcut, Snippet.is_active.is_(True)
        )
        if exclude_id:
            query = query.filter(Snippet.id != exclude_id)
        if query.first():
            raise ConflictError("This shortcut is already in use", {"shortcut": shortcut})

    def create_snippet(self, user: User, request: SnippetCreate) -> Snippet:
        if request.category_id:
            self.get_category(user, request.category_id)
        if request.shortcut:
            self._ensure_shortcut_free(user.company_id, request.shortcut)

        snippet = Snippet(company_id=user.company_id, created_by=user.id, **request.model_dump())
        self.db.add(snippet)
        self.db.commit()
        self.db.refresh(snippet)
        logger.info(f"Snippet {snippet.id} created by user {user.id}")
        return snippet

    def update_snippet(self, user: User, snippet_id: uuid.UUID, request: SnippetUpdate) -> Snippet:
        snippet = self.get_snippet(user, snippet_id)
        changes = request.model_dump(exclude_unset=True)
        if changes.get("category_id"):
            self.get_category(user, changes["category_id"])
        if changes.get("shortcut"):
            self._ensure_shortcut_free(user.company_id, changes["shortcut"], exclude_id=snippet.id)

        for field, value in changes.items():
            # category_id and shortcut may be cleared explicitly
            if value is not None or field in ("category_id", "shortcut"):
                setattr(snippet, field, value)
        self.db.commit()
        self.db.refresh(snippet)
        return snippet

    def delete_snippet(self, user: User, snippet_id: uuid.UUID) -> None:
        snippet = self.get_snippet(user, snippet_id)
        snippet.is_active = False
        self.db.commit()
        logger.info(f"Snippet {snippet_id} deleted by user {user.id}")

    def record_use(self, user: User, snippet_id: uuid.UUID) -> Snippet:
        snippet = self.get_snippet(user, snippet_id)
        snippet.usage_count = (snippet.usage_count or 0) + 1
        snippet.last_used_at = utcnow()
        self.db.commit()
        self.db.refresh(snippet)
        return snippet
