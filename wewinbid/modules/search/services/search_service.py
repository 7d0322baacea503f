"""
Full-text search over the company's tenders, with history and saved searches.
"""
import logging
import math
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from wewinbid.core.errors import NotFoundError, ValidationError
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.search.db.schema import SavedSearch, SearchHistory
from wewinbid.modules.search.models.pydantic_models import SavedSearchCreate, SavedSearchUpdate, SearchFilters
from wewinbid.modules.tenders.db.schema import SectorEnum, Tender, TenderStatusEnum

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20
MAX_SUGGESTIONS = 8


def split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _to_enums(values: List[str], enum_cls, label: str) -> list:
    try:
        return [enum_cls(v.upper()) for v in values]
    except ValueError:
        raise ValidationError(f"Invalid {label} filter", details={"allowed": [e.value for e in enum_cls]})


class SearchService:
    def __init__(self, db: Session):
        self.db = db

    def search(
        self,
        user: User,
        query: Optional[str],
        filters: SearchFilters,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Tender], int, int]:
        q = self.db.query(Tender).filter(Tender.company_id == user.company_id)

        if query:
            for term in query.split():
                pattern = f"%{term}%"
                q = q.filter(or_(
                    Tender.title.ilike(pattern),
                    Tender.description.ilike(pattern),
                    Tender.reference.ilike(pattern),
                    Tender.buyer_name.ilike(pattern),
                ))
        if filters.countries:
            q = q.filter(Tender.country.in_([c.upper() for c in filters.countries]))
        if filters.sectors:
            q = q.filter(Tender.sector.in_(_to_enums(filters.sectors, SectorEnum, "sector")))
        if filters.statuses:
            q = q.filter(Tender.status.in_(_to_enums(filters.statuses, TenderStatusEnum, "status")))
        if filters.min_budget is not None:
            q = q.filter(Tender.estimated_value >= filters.min_budget)
        if filters.max_budget is not None:
            q = q.filter(Tender.estimated_value <= filters.max_budget)
        if filters.deadline_from:
            q = q.filter(Tender.deadline >= filters.deadline_from)
        if filters.deadline_to:
            q = q.filter(Tender.deadline <= filters.deadline_to)

        total = q.count()
        results = (
            q.order_by(Tender.deadline.is_(None), Tender.deadline.asc(), Tender.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        total_pages = math.ceil(total / limit) if total else 0

        self.db.add(SearchHistory(
            user_id=user.id,
            query=query,
            filters=filters.model_dump(mode="json", exclude_none=True),
            results_count=total,
        ))
        self.db.commit()
        return results, total, total_pages

    def suggestions(self, user: User, prefix: str) -> List[str]:
        pattern = f"%{prefix}%"
        rows = (
            self.db.query(Tender.title, Tender.buyer_name)
            .filter(
                Tender.company_id == user.company_id,
                or_(Tender.title.ilike(pattern), Tender.buyer_name.ilike(pattern)),
            )
            .order_by(Tender.created_at.desc())
            .limit(50)
            .all()
        )
        needle = prefix.lower()
        seen = []
        for title, buyer_name in rows:
            for candidate in (title, buyer_name):
                if candidate and needle in candidate.lower() and candidate not in seen:
                    seen.append(candidate)
                if len(seen) >= MAX_SUGGESTIONS:
                    return seen
        return seen

    def history(self, user: User) -> List[SearchHistory]:
        return (
            self.db.query(SearchHistory)
            .filter(SearchHistory.user_id == user.id)
            .order_by(SearchHistory.created_at.desc())
            .limit(HISTORY_LIMIT)
            .all()
        )

    def clear_history(self, user: User) -> int:
        deleted = self.db.query(SearchHistory).filter(SearchHistory.user_id == user.id).delete()
        self.db.commit()
        return deleted

    # Saved searches

    def list_saved(self, user: User) -> List[SavedSearch]:
        return (
            self.db.query(SavedSearch)
            .filter(SavedSearch.user_id == user.id)
            .order_by(SavedSearch.created_at.desc())
            .all()
        )

    def get_saved(self, user: User, saved_id: uuid.UUID) -> SavedSearch:
        saved = (
            self.db.query(SavedSearch)
            .filter(SavedSearch.id == saved_id, SavedSearch.user_id == user.id)
            .first()
        )
        if not saved:
            raise NotFoundError("Saved search not found")
        return saved

    def create_saved(self, user: User, request: SavedSearchCreate) -> SavedSearch:
        saved = SavedSearch(user_id=user.id, **request.model_dump())
        self.db.add(saved)
        self.db.commit()
        self.db.refresh(saved)
        return saved

    def update_saved(self, user: User, saved_id: uuid.UUID, request: SavedSearchUpdate) -> SavedSearch:
        saved = self.get_saved(user, saved_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(saved, field, value)
        self.db.commit()
        self.db.refresh(saved)
        return saved

    def delete_saved(self, user: User, saved_id: uuid.UUID) -> None:
        saved = self.get_saved(user, saved_id)
        self.db.delete(saved)
        self.db.commit()
