import logging

from sqlalchemy.orm import Session

from wewinbid.core.errors import NotFoundError
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.companies.db.schema import Company
from wewinbid.modules.companies.models.pydantic_models import CompanyUpdate

logger = logging.getLogger(__name__)


class CompanyService:
    def __init__(self, db: Session):
        self.db = db

    def get_company(self, user: User) -> Company:
        company = self.db.get(Company, user.company_id)
        if company is None:
            raise NotFoundError("Company not found")
        return company

    def update_company(self, user: User, request: CompanyUpdate) -> Company:
        company = self.get_company(user)
        updates = request.model_dump(mode="json", exclude_unset=True)
        for field, value in updates.items():
            setattr(company, field, value)
        self.db.commit()
        self.db.refresh(company)
        logger.info(f"Company {company.id} updated by user {user.id}: {sorted(updates)}")
        return company
