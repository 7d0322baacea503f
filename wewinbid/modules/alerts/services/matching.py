"""
Matching of tenders against alert criteria.

Criteria are stored as JSON (see AlertCriteria); every criterion present must
hold for a tender to match, and empty criteria match every tender.
"""
from datetime import datetime
from typing import Optional

from wewinbid.core.helpers import to_naive_utc
from wewinbid.modules.tenders.db.schema import Tender


def _parse_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return to_naive_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


def _enum_value(value) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


def matches_query(tender: Tender, query: Optional[str]) -> bool:
    if not query or not query.strip():
        return True
    haystack = " ".join(
        part for part in (tender.title, tender.description, tender.reference, tender.buyer_name) if part
    ).lower()
    return all(term in haystack for term in query.lower().split())


def tender_matches(tender: Tender, criteria: dict) -> bool:
    if not criteria:
        return True

    if not matches_query(tender, criteria.get("query")):
        return False

    sectors = criteria.get("sectors") or []
    if sectors and _enum_value(tender.sector) not in sectors:
        return False

    countries = [c.upper() for c in criteria.get("countries") or []]
    if countries and (tender.country or "").upper() not in countries:
        return False

    min_value = criteria.get("min_value")
    max_value = criteria.get("max_value")
    if min_value is not None or max_value is not None:
        if tender.estimated_value is None:
            return False
        if min_value is not None and tender.estimated_value < min_value:
            return False
        if max_value is not None and tender.estimated_value > max_value:
            return False

    deadline_from = _parse_datetime(criteria.get("deadline_from"))
    deadline_to = _parse_datetime(criteria.get("deadline_to"))
    if deadline_from or deadline_to:
        if tender.deadline is None:
            return False
        if deadline_from and tender.deadline < deadline_from:
            return False
        if deadline_to and tender.deadline > deadline_to:
            return False

    tender_type = criteria.get("tender_type")
    if tender_type and _enum_value(tender.type) != tender_type:
        return False

    statuses = criteria.get("status") or []
    if statuses and _enum_value(tender.status) not in statuses:
        return False

    return True
