from datetime import datetime, timedelta

from wewinbid.modules.analytics.services.analytics_service import (
    compute_by_category,
    compute_by_type,
    compute_funnel,
    compute_overview,
    compute_top_clients,
    compute_trends,
    win_rate,
)
from wewinbid.modules.tenders.db.schema import SectorEnum, Tender, TenderStatusEnum, TenderTypeEnum

START = datetime(2026, 3, 1)


def tender(status, value=None, day=0, submitted_after=None, sector=None, buyer=None, type_=TenderTypeEnum.PUBLIC):
    created = START + timedelta(days=day)
    return Tender(
        title="AO",
        type=type_,
        status=status,
        sector=sector,
        country="FR",
        buyer_name=buyer,
        estimated_value=value,
        created_at=created,
        submission_date=created + timedelta(days=submitted_after) if submitted_after is not None else None,
    )


TENDERS = [
    tender(TenderStatusEnum.WON, 100000, day=0, submitted_after=4, sector=SectorEnum.SECURITY_PRIVATE, buyer="Ville de Lyon"),
    tender(TenderStatusEnum.WON, 50000, day=1, submitted_after=2, sector=SectorEnum.SECURITY_PRIVATE, buyer="Ville de Lyon"),
    tender(TenderStatusEnum.LOST, 80000, day=1, submitted_after=3, sector=SectorEnum.CLEANING, buyer="Région Sud"),
    tender(TenderStatusEnum.SUBMITTED, 20000, day=2, submitted_after=1, type_=TenderTypeEnum.PRIVATE),
    tender(TenderStatusEnum.DRAFT, day=2),
]


def test_overview():
    overview = compute_overview(TENDERS)
    assert overview == {
        "total_tenders": 5,
        "won_tenders": 2,
        "lost_tenders": 1,
        "pending_tenders": 2,
        "total_revenue": 150000,
        "avg_deal_size": 75000.0,
        "win_rate": 66.7,
        "avg_response_time": 2.5,
    }


def test_empty_overview():
    overview = compute_overview([])
    assert overview["win_rate"] == 0
    assert overview["avg_deal_size"] == 0
    assert overview["avg_response_time"] == 0


def test_win_rate_ignores_undecided():
    assert win_rate(0, 0) == 0
    assert win_rate(1, 3) == 25.0


def test_daily_trends():
    trends = compute_trends(TENDERS, START, START + timedelta(days=2))
    assert [t["tenders"] for t in trends] == [1, 2, 2]
    assert trends[0] == {"date": "2026-03-01", "tenders": 1, "won": 1, "revenue": 100000}


def test_weekly_trends_for_long_windows():
    trends = compute_trends(TENDERS, START, START + timedelta(days=90))
    assert trends[0]["tenders"] == 5
    assert trends[1]["date"] == "2026-03-08"


def test_categories_types_and_clients():
    categories = compute_by_category(TENDERS)
    assert categories[0] == {"category": "SECURITY_PRIVATE", "count": 2, "won": 2, "value": 150000}
    assert {c["category"] for c in categories} == {"SECURITY_PRIVATE", "CLEANING", "OTHER"}

    by_type = {t["type"]: t for t in compute_by_type(TENDERS)}
    assert by_type["PUBLIC"]["percentage"] == 80
    assert by_type["PRIVATE"]["percentage"] == 20

    clients = compute_top_clients(TENDERS)
    assert clients[0] == {"name": "Ville de Lyon", "tenders": 2, "value": 150000, "win_rate": 100.0}
    assert clients[1]["name"] == "Client inconnu"


def test_funnel():
    funnel = {stage["stage"]: stage for stage in compute_funnel(TENDERS)}
    assert funnel["identified"] == {"stage": "identified", "count": 5, "rate": 100}
    assert funnel["started"]["count"] == 4
    assert funnel["submitted"]["rate"] == 80.0
    assert funnel["won"]["rate"] == 40.0
