import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.subscription.services.pricing_service import get_pricing_for_country
from wewinbid.modules.subscription.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/subscription/usage", tags=["Subscription"], summary="Plan usage and feature access")
def get_usage(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return SubscriptionService(db).get_usage(current_user.company)


@router.get("/pricing", tags=["Subscription"], summary="Regional plan pricing (public)")
def get_pricing(country: Optional[str] = Query(None, min_length=2, max_length=2)):
    return get_pricing_for_country(country)
