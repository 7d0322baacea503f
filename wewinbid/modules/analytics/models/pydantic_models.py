from pydantic import BaseModel
from typing import List

from wewinbid.modules.tenders.models.pydantic_models import Tender


class DashboardStats(BaseModel):
    total_matched_tenders: int
    upcoming_deadlines: int
    active_searches: int
    win_rate: float


class MatchedTender(BaseModel):
    tender: Tender
    matched_alerts: List[str]


class MatchedTendersResponse(BaseModel):
    tenders: List[MatchedTender]
    total: int
