import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from wewinbid.core.errors import ValidationError
from wewinbid.core.helpers import to_naive_utc
from wewinbid.db.database import get_db_session
from wewinbid.modules.analytics.models.pydantic_models import DashboardStats, MatchedTender, MatchedTendersResponse
from wewinbid.modules.analytics.services.analytics_service import AnalyticsService
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.tenders.models.pydantic_models import Tender

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Analytics"])


@router.get("/analytics", summary="Tender performance over a period, compared with the previous one")
def get_analytics(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    start, end = to_naive_utc(start), to_naive_utc(end)
    if start and end and start >= end:
        raise ValidationError("start must be before end")
    try:
        return AnalyticsService(db).get_analytics(current_user, start, end)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Analytics computation failed for company {current_user.company_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to compute analytics")


@router.get("/dashboard/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return AnalyticsService(db).dashboard_stats(current_user)


@router.get("/dashboard/matched-tenders", response_model=MatchedTendersResponse)
def get_matched_tenders(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    matched = [
        MatchedTender(tender=Tender.model_validate(m["tender"]), matched_alerts=m["matched_alerts"])
        for m in AnalyticsService(db).matched_tenders(current_user, limit)
    ]
    return MatchedTendersResponse(tenders=matched, total=len(matched))
