"""
Regional pricing. Prices are per plan and billing period, in the region's
currency and excluding VAT; -1 means the plan is priced on quote.
"""
from wewinbid.core.helpers import round_half_up
from wewinbid.modules.companies.db.schema import SubscriptionPlanEnum
from wewinbid.modules.subscription.services.plans import get_plan_limits

ON_QUOTE = -1

REGIONAL_PRICING = {
    "FRANCE": {"currency": "EUR", "symbol": "€", "vat_rate": 20, "pro": (49, 490), "business": (149, 1490)},
    "WESTERN_EUROPE": {"currency": "EUR", "symbol": "€", "vat_rate": 21, "pro": (59, 590), "business": (169, 1690)},
    "SOUTHERN_EUROPE": {"currency": "EUR", "symbol": "€", "vat_rate": 22, "pro": (39, 390), "business": (119, 1190)},
    "UK": {"currency": "GBP", "symbol": "£", "vat_rate": 20, "pro": (45, 450), "business": (139, 1390)},
    "USA": {"currency": "USD", "symbol": "$", "vat_rate": 0, "pro": (59, 590), "business": (179, 1790)},
    "LATAM": {"currency": "USD", "symbol": "$", "vat_rate": 0, "pro": (29, 290), "business": (89, 890)},
    "MENA": {"currency": "USD", "symbol": "$", "vat_rate": 5, "pro": (39, 390), "business": (99, 990)},
}

COUNTRY_TO_REGION = {
    "FR": "FRANCE",
    **dict.fromkeys(("DE", "BE", "NL", "LU", "AT", "CH"), "WESTERN_EUROPE"),
    **dict.fromkeys(("ES", "IT", "PT", "GR"), "SOUTHERN_EUROPE"),
    **dict.fromkeys(("GB", "IE"), "UK"),
    **dict.fromkeys(("US", "CA"), "USA"),
    **dict.fromkeys(("MX", "BR", "AR", "CO", "CL", "PE"), "LATAM"),
    **dict.fromkeys(("MA", "TN", "DZ", "AE", "SA", "QA", "KW", "EG"), "MENA"),
}

DEFAULT_REGION = "FRANCE"

PLAN_DESCRIPTIONS = {
    SubscriptionPlanEnum.FREE: ("Gratuit", "Pour découvrir WeWinBid"),
    SubscriptionPlanEnum.PRO: ("Pro", "Pour les PME qui répondent régulièrement"),
    SubscriptionPlanEnum.BUSINESS: ("Business", "Pour les équipes commerciales structurées"),
    SubscriptionPlanEnum.ENTERPRISE: ("Entreprise", "Pour les grands comptes, sur devis"),
}


def get_region_from_country(country_code: str | None) -> str:
    if not country_code:
        return DEFAULT_REGION
    return COUNTRY_TO_REGION.get(country_code.upper(), DEFAULT_REGION)


def calculate_yearly_savings(monthly: float, yearly: float) -> int:
    """Percentage saved by paying yearly instead of twelve monthly payments."""
    if monthly <= 0 or yearly < 0:
        return 0
    full_price = monthly * 12
    return round_half_up((full_price - yearly) / full_price * 100)


def get_plan_prices(region: str, plan: SubscriptionPlanEnum) -> tuple[int, int]:
    pricing = REGIONAL_PRICING[region]
    if plan == SubscriptionPlanEnum.FREE:
        return 0, 0
    if plan == SubscriptionPlanEnum.ENTERPRISE:
        return ON_QUOTE, ON_QUOTE
    return pricing[plan.value.lower()]


def get_pricing_for_country(country_code: str | None) -> dict:
    region = get_region_from_country(country_code)
    pricing = REGIONAL_PRICING[region]
    plans = []
    for plan in SubscriptionPlanEnum:
        monthly, yearly = get_plan_prices(region, plan)
        limits = get_plan_limits(plan)
        name, description = PLAN_DESCRIPTIONS[plan]
        plans.append({
            "id": plan.value.lower(),
            "name": name,
            "description": description,
            "monthly_price": monthly,
            "yearly_price": yearly,
            "yearly_savings": calculate_yearly_savings(monthly, yearly) if monthly > 0 else 0,
            "limits": {
                "tenders_per_month": limits.tenders_per_month,
                "collaborators": limits.collaborators,
                "storage_gb": limits.storage_gb,
                **limits.features(),
            },
        })
    return {
        "country": (country_code or "FR").upper(),
        "region": region,
        "currency": pricing["currency"],
        "currency_symbol": pricing["symbol"],
        "vat_rate": pricing["vat_rate"],
        "plans": plans,
    }
