from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user, require_company_admin
from wewinbid.modules.companies.models.pydantic_models import CompanyResponse, CompanyUpdate
from wewinbid.modules.companies.services.company_service import CompanyService

router = APIRouter(prefix="/company", tags=["Company"])


@router.get("", response_model=CompanyResponse)
def get_company(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return CompanyService(db).get_company(current_user)


@router.patch("", response_model=CompanyResponse)
def update_company(
    request: CompanyUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(require_company_admin),
):
    return CompanyService(db).update_company(current_user, request)
