import uuid
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from wewinbid.modules.auth.db.schema import User, UserRoleEnum


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def get_company_user(self, company_id: uuid.UUID, user_id: uuid.UUID) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.company_id == company_id, User.id == user_id)
            .first()
        )

    def list_company_users(self, company_id: uuid.UUID, active_only: bool = False) -> List[User]:
        query = self.db.query(User).filter(User.company_id == company_id)
        if active_only:
            query = query.filter(User.is_active.is_(True))
        return query.order_by(User.created_at.asc()).all()

    def count_company_users(self, company_id: uuid.UUID) -> int:
        return self.db.query(User).filter(User.company_id == company_id).count()

    def get_company_owner(self, company_id: uuid.UUID) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.company_id == company_id, User.role == UserRoleEnum.OWNER)
            .order_by(User.created_at.asc())
            .first()
        )

    def get_company_users_by_roles(self, company_id: uuid.UUID, roles: List[str]) -> List[User]:
        if not roles:
            return []
        return (
            self.db.query(User)
            .filter(User.company_id == company_id, User.role.in_(roles), User.is_active.is_(True))
            .all()
        )
