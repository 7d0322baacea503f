from wewinbid.modules.companies.db.schema import SubscriptionPlanEnum
from wewinbid.modules.subscription.services.plans import get_plan_limits
from wewinbid.modules.subscription.services.pricing_service import (
    ON_QUOTE,
    calculate_yearly_savings,
    get_pricing_for_country,
    get_region_from_country,
)


def test_region_lookup():
    assert get_region_from_country("de") == "WESTERN_EUROPE"
    assert get_region_from_country("MA") == "MENA"
    assert get_region_from_country("JP") == "FRANCE"
    assert get_region_from_country(None) == "FRANCE"


def test_yearly_savings():
    assert calculate_yearly_savings(49, 490) == 17
    assert calculate_yearly_savings(0, 0) == 0


def test_pricing_for_uk():
    pricing = get_pricing_for_country("gb")
    assert pricing["country"] == "GB"
    assert pricing["currency"] == "GBP"
    plans = {p["id"]: p for p in pricing["plans"]}
    assert plans["free"]["monthly_price"] == 0
    assert plans["pro"]["monthly_price"] == 45
    assert plans["enterprise"]["monthly_price"] == ON_QUOTE
    assert plans["enterprise"]["yearly_savings"] == 0
    assert plans["business"]["limits"]["api_access"] is True


def test_plan_limits():
    free = get_plan_limits(SubscriptionPlanEnum.FREE)
    assert free.tenders_per_month == 2
    assert free.ai_score is False
    assert get_plan_limits(SubscriptionPlanEnum.ENTERPRISE).collaborators is None
