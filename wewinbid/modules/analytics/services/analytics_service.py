"""
Tender performance analytics and dashboard statistics.

All figures are computed in Python over the company's tenders created in the
requested window; the previous period is the window of the same length that
ends where the current one starts.
"""
import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from wewinbid.core.helpers import percentage, round_half_up, utcnow
from wewinbid.modules.alerts.db.schema import SearchAlert
from wewinbid.modules.alerts.services.matching import tender_matches
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.search.db.schema import SavedSearch
from wewinbid.modules.tenders.db.schema import OPEN_TENDER_STATUSES, Tender, TenderStatusEnum

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(days=30)
WEEKLY_TRENDS_AFTER_DAYS = 60
TOP_CATEGORIES = 6
TOP_CLIENTS = 5
UPCOMING_DEADLINE_DAYS = 7
UNKNOWN_CLIENT = "Client inconnu"

PENDING_STATUSES = OPEN_TENDER_STATUSES + (TenderStatusEnum.SUBMITTED,)


def _value(tender: Tender) -> float:
    return tender.estimated_value or 0


def _is_won(tender: Tender) -> bool:
    return tender.status == TenderStatusEnum.WON


def win_rate(won: int, lost: int) -> float:
    return percentage(won, won + lost)


def compute_overview(tenders: List[Tender]) -> dict:
    won = sum(1 for t in tenders if _is_won(t))
    lost = sum(1 for t in tenders if t.status == TenderStatusEnum.LOST)
    pending = sum(1 for t in tenders if t.status in PENDING_STATUSES)
    revenue = sum(_value(t) for t in tenders if _is_won(t))
    response_days = [
        (t.submission_date - t.created_at).total_seconds() / 86400
        for t in tenders if t.submission_date
    ]
    return {
        "total_tenders": len(tenders),
        "won_tenders": won,
        "lost_tenders": lost,
        "pending_tenders": pending,
        "total_revenue": revenue,
        "avg_deal_size": round_half_up(revenue / won, 2) if won else 0,
        "win_rate": win_rate(won, lost),
        "avg_response_time": round_half_up(sum(response_days) / len(response_days), 1) if response_days else 0,
    }


def compute_trends(tenders: List[Tender], start: datetime, end: datetime) -> List[dict]:
    interval = timedelta(days=7 if (end - start).days > WEEKLY_TRENDS_AFTER_DAYS else 1)
    trends = []
    bucket_start = start
    while bucket_start <= end:
        bucket_end = bucket_start + interval
        bucket = [t for t in tenders if bucket_start <= t.created_at < bucket_end]
        trends.append({
            "date": bucket_start.date().isoformat(),
            "tenders": len(bucket),
            "won": sum(1 for t in bucket if _is_won(t)),
            "revenue": sum(_value(t) for t in bucket if _is_won(t)),
        })
        bucket_start = bucket_end
    return trends


def compute_by_category(tenders: List[Tender]) -> List[dict]:
    groups: Dict[str, dict] = {}
    for tender in tenders:
        key = tender.sector.value if tender.sector else "OTHER"
        group = groups.setdefault(key, {"category": key, "count": 0, "won": 0, "value": 0})
        group["count"] += 1
        group["won"] += int(_is_won(tender))
        group["value"] += _value(tender)
    return sorted(groups.values(), key=lambda g: g["count"], reverse=True)[:TOP_CATEGORIES]


def compute_by_type(tenders: List[Tender]) -> List[dict]:
    counts = defaultdict(int)
    for tender in tenders:
        counts[tender.type.value] += 1
    total = len(tenders) or 1
    return [
        {"type": type_, "count": count, "percentage": round_half_up(count / total * 100)}
        for type_, count in counts.items()
    ]


def compute_by_region(tenders: List[Tender]) -> List[dict]:
    groups: Dict[str, dict] = {}
    for tender in tenders:
        key = tender.region or tender.country
        group = groups.setdefault(key, {"region": key, "count": 0, "won": 0, "value": 0})
        group["count"] += 1
        group["won"] += int(_is_won(tender))
        group["value"] += _value(tender)
    return sorted(groups.values(), key=lambda g: g["count"], reverse=True)


def compute_top_clients(tenders: List[Tender]) -> List[dict]:
    groups: Dict[str, dict] = {}
    for tender in tenders:
        name = tender.buyer_name or UNKNOWN_CLIENT
        group = groups.setdefault(name, {"name": name, "tenders": 0, "value": 0, "won": 0})
        group["tenders"] += 1
        group["value"] += _value(tender)
        group["won"] += int(_is_won(tender))
    clients = [
        {"name": g["name"], "tenders": g["tenders"], "value": g["value"], "win_rate": percentage(g["won"], g["tenders"])}
        for g in groups.values()
    ]
    return sorted(clients, key=lambda c: c["tenders"], reverse=True)[:TOP_CLIENTS]


def compute_funnel(tenders: List[Tender]) -> List[dict]:
    total = len(tenders)
    stages = [
        ("identified", total),
        ("started", sum(1 for t in tenders if t.status != TenderStatusEnum.DRAFT)),
        ("submitted", sum(1 for t in tenders if t.submission_date)),
        ("won", sum(1 for t in tenders if _is_won(t))),
    ]
    return [
        {"stage": stage, "count": count, "rate": 100 if stage == "identified" else percentage(count, total)}
        for stage, count in stages
    ]


class AnalyticsService:
    def __init__(self, db: Session):
        self.db = db

    def _tenders_between(self, company_id, start: datetime, end: datetime, include_end: bool = True) -> List[Tender]:
        upper = Tender.created_at <= end if include_end else Tender.created_at < end
        return (
            self.db.query(Tender)
            .filter(Tender.company_id == company_id, Tender.created_at >= start, upper)
            .all()
        )

    def get_analytics(self, user: User, start: Optional[datetime] = None, end: Optional[datetime] = None) -> dict:
        end = end or utcnow()
        start = start or end - DEFAULT_WINDOW
        previous_start = start - (end - start)

        current = self._tenders_between(user.company_id, start, end)
        previous = self._tenders_between(user.company_id, previous_start, start, include_end=False)

        return {
            "period": {"start": start, "end": end, "previous_start": previous_start},
            "current": {
                "overview": compute_overview(current),
                "trends": compute_trends(current, start, end),
                "by_category": compute_by_category(current),
                "by_type": compute_by_type(current),
                "by_region": compute_by_region(current),
                "top_clients": compute_top_clients(current),
                "conversion_funnel": compute_funnel(current),
            },
            "previous": {
                "overview": compute_overview(previous),
                "trends": compute_trends(previous, previous_start, start),
            },
        }

    # Dashboard

    def _active_alerts(self, user: User) -> List[SearchAlert]:
        return (
            self.db.query(SearchAlert)
            .filter(SearchAlert.user_id == user.id, SearchAlert.is_active.is_(True))
            .all()
        )

    def matched_tenders(self, user: User, limit: Optional[int] = None) -> List[dict]:
        alerts = self._active_alerts(user)
        if not alerts:
            return []
        tenders = (
            self.db.query(Tender)
            .filter(Tender.company_id == user.company_id)
            .order_by(Tender.created_at.desc())
            .all()
        )
        matched = []
        for tender in tenders:
            names = [a.name for a in alerts if tender_matches(tender, a.criteria)]
            if names:
                matched.append({"tender": tender, "matched_alerts": names})
                if limit and len(matched) >= limit:
                    break
        return matched

    def dashboard_stats(self, user: User) -> dict:
        now = utcnow()
        upcoming = (
            self.db.query(Tender)
            .filter(
                Tender.company_id == user.company_id,
                Tender.status.in_(OPEN_TENDER_STATUSES),
                Tender.deadline >= now,
                Tender.deadline <= now + timedelta(days=UPCOMING_DEADLINE_DAYS),
            )
            .count()
        )
        active_alerts = len(self._active_alerts(user))
        saved = self.db.query(SavedSearch).filter(SavedSearch.user_id == user.id).count()
        won = self.db.query(Tender).filter(Tender.company_id == user.company_id, Tender.status == TenderStatusEnum.WON).count()
        lost = self.db.query(Tender).filter(Tender.company_id == user.company_id, Tender.status == TenderStatusEnum.LOST).count()
        return {
            "total_matched_tenders": len(self.matched_tenders(user)),
            "upcoming_deadlines": upcoming,
            "active_searches": active_alerts + saved,
            "win_rate": win_rate(won, lost),
        }
