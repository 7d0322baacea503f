from dataclasses import dataclass, asdict
from typing import Optional

from wewinbid.modules.companies.db.schema import SubscriptionPlanEnum

# Limits use None for "unlimited".


@dataclass(frozen=True)
class PlanLimits:
    tenders_per_month: Optional[int]
    collaborators: Optional[int]
    storage_gb: Optional[float]
    ai_score: bool
    winner_analysis: bool
    templates: bool
    co_editing: bool
    api_access: bool

    def features(self) -> dict:
        data = asdict(self)
        return {key: data[key] for key in ("ai_score", "winner_analysis", "templates", "co_editing", "api_access")}


PLAN_LIMITS: dict[SubscriptionPlanEnum, PlanLimits] = {
    SubscriptionPlanEnum.FREE: PlanLimits(
        tenders_per_month=2, collaborators=1, storage_gb=0.1,
        ai_score=False, winner_analysis=False, templates=False, co_editing=False, api_access=False,
    ),
    SubscriptionPlanEnum.PRO: PlanLimits(
        tenders_per_month=20, collaborators=5, storage_gb=5,
        ai_score=True, winner_analysis=True, templates=True, co_editing=False, api_access=False,
    ),
    SubscriptionPlanEnum.BUSINESS: PlanLimits(
        tenders_per_month=None, collaborators=20, storage_gb=50,
        ai_score=True, winner_analysis=True, templates=True, co_editing=True, api_access=True,
    ),
    SubscriptionPlanEnum.ENTERPRISE: PlanLimits(
        tenders_per_month=None, collaborators=None, storage_gb=None,
        ai_score=True, winner_analysis=True, templates=True, co_editing=True, api_access=True,
    ),
}

FEATURES = ("ai_score", "winner_analysis", "templates", "co_editing", "api_access")


def get_plan_limits(plan: SubscriptionPlanEnum) -> PlanLimits:
    return PLAN_LIMITS.get(plan, PLAN_LIMITS[SubscriptionPlanEnum.FREE])
