from datetime import datetime

from wewinbid.modules.alerts.services.matching import tender_matches
from wewinbid.modules.tenders.db.schema import SectorEnum, Tender, TenderStatusEnum, TenderTypeEnum


def make_tender(**fields):
    defaults = dict(
        reference="AO-2026-01", title="Gardiennage de sites", description="Surveillance humaine 24/7",
        type=TenderTypeEnum.PUBLIC, status=TenderStatusEnum.DRAFT, sector=SectorEnum.SECURITY_PRIVATE,
        country="FR", estimated_value=80000, deadline=datetime(2026, 6, 1, 12, 0),
    )
    defaults.update(fields)
    return Tender(**defaults)


def test_empty_criteria_match_everything():
    assert tender_matches(make_tender(), {})


def test_query_terms_must_all_appear():
    assert tender_matches(make_tender(), {"query": "surveillance gardiennage"})
    assert not tender_matches(make_tender(), {"query": "surveillance nettoyage"})


def test_sector_and_country():
    criteria = {"sectors": ["SECURITY_PRIVATE"], "countries": ["fr"]}
    assert tender_matches(make_tender(), criteria)
    assert not tender_matches(make_tender(country="BE"), criteria)
    assert not tender_matches(make_tender(sector=SectorEnum.CLEANING), criteria)


def test_value_range_requires_estimate():
    assert tender_matches(make_tender(), {"min_value": 50000, "max_value": 100000})
    assert not tender_matches(make_tender(estimated_value=None), {"min_value": 0})
    assert not tender_matches(make_tender(estimated_value=150000), {"max_value": 100000})


def test_deadline_range_accepts_iso_strings():
    criteria = {"deadline_from": "2026-05-01T00:00:00Z", "deadline_to": "2026-05-31T23:59:59Z"}
    assert not tender_matches(make_tender(), criteria)
    assert tender_matches(make_tender(deadline=datetime(2026, 5, 15)), criteria)
    assert not tender_matches(make_tender(deadline=None), criteria)


def test_type_and_status():
    assert tender_matches(make_tender(), {"tender_type": "PUBLIC", "status": ["DRAFT", "ANALYSIS"]})
    assert not tender_matches(make_tender(), {"tender_type": "PRIVATE"})
