import uuid
from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session

from wewinbid.modules.tenders.db.schema import (
    Tender, TenderComment, TenderFavorite, TenderHistory, TenderStatusEnum, TenderTypeEnum, SectorEnum,
)


class TenderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_for_company(self, company_id: uuid.UUID, tender_id: uuid.UUID) -> Optional[Tender]:
        return (
            self.db.query(Tender)
            .filter(Tender.id == tender_id, Tender.company_id == company_id)
            .first()
        )

    def list_for_company(
        self,
        company_id: uuid.UUID,
        status: Optional[TenderStatusEnum] = None,
        type: Optional[TenderTypeEnum] = None,
        sector: Optional[SectorEnum] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Tender], int]:
        query = self.db.query(Tender).filter(Tender.company_id == company_id)
        if status:
            query = query.filter(Tender.status == status)
        if type:
            query = query.filter(Tender.type == type)
        if sector:
            query = query.filter(Tender.sector == sector)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Tender.title.ilike(pattern), Tender.reference.ilike(pattern)))

        total = query.count()
        tenders = query.order_by(Tender.created_at.desc()).offset(offset).limit(limit).all()
        return tenders, total

    def all_for_company(self, company_id: uuid.UUID) -> List[Tender]:
        return (
            self.db.query(Tender)
            .filter(Tender.company_id == company_id)
            .order_by(Tender.created_at.desc())
            .all()
        )

    def add_history(
        self,
        tender_id: uuid.UUID,
        user_id: Optional[uuid.UUID],
        action: str,
        field: Optional[str] = None,
        old_value: Optional[str] = None,
        new_value: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> TenderHistory:
        entry = TenderHistory(
            tender_id=tender_id,
            user_id=user_id,
            action=action,
            field=field,
            old_value=old_value,
            new_value=new_value,
            details=details,
        )
        self.db.add(entry)
        return entry

    def get_history(self, tender_id: uuid.UUID, limit: int = 100) -> List[TenderHistory]:
        return (
            self.db.query(TenderHistory)
            .filter(TenderHistory.tender_id == tender_id)
            .order_by(TenderHistory.created_at.desc())
            .limit(limit)
            .all()
        )

    def get_comments(self, tender_id: uuid.UUID) -> List[TenderComment]:
        return (
            self.db.query(TenderComment)
            .filter(TenderComment.tender_id == tender_id)
            .order_by(TenderComment.created_at.asc())
            .all()
        )

    def get_comment(self, tender_id: uuid.UUID, comment_id: uuid.UUID) -> Optional[TenderComment]:
        return (
            self.db.query(TenderComment)
            .filter(TenderComment.id == comment_id, TenderComment.tender_id == tender_id)
            .first()
        )

    def get_favorite(self, user_id: uuid.UUID, tender_id: uuid.UUID) -> Optional[TenderFavorite]:
        return (
            self.db.query(TenderFavorite)
            .filter(TenderFavorite.user_id == user_id, TenderFavorite.tender_id == tender_id)
            .first()
        )

    def list_favorites(self, user_id: uuid.UUID, company_id: uuid.UUID) -> List[Tender]:
        return (
            self.db.query(Tender)
            .join(TenderFavorite, TenderFavorite.tender_id == Tender.id)
            .filter(TenderFavorite.user_id == user_id, Tender.company_id == company_id)
            .order_by(TenderFavorite.created_at.desc())
            .all()
        )
