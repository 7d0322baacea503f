"""
Plan quota checks and usage statistics for a company.
"""
import logging
import uuid
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from wewinbid.core.errors import QuotaExceededError
from wewinbid.core.helpers import percentage, utcnow
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.companies.db.schema import Company, SubscriptionPlanEnum
from wewinbid.modules.documents.db.schema import Document
from wewinbid.modules.subscription.services.plans import FEATURES, get_plan_limits
from wewinbid.modules.team.db.schema import TeamInvitation, InvitationStatusEnum
from wewinbid.modules.tenders.db.schema import Tender

logger = logging.getLogger(__name__)

BYTES_PER_GB = 1024 ** 3


def start_of_month(now: datetime | None = None) -> datetime:
    now = now or utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class SubscriptionService:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def is_subscription_active(company: Company) -> bool:
        if company.subscription_plan == SubscriptionPlanEnum.FREE:
            return True
        return company.subscription_status == "active"

    def count_tenders_this_month(self, company_id: uuid.UUID) -> int:
        return (
            self.db.query(Tender)
            .filter(Tender.company_id == company_id, Tender.created_at >= start_of_month())
            .count()
        )

    def count_collaborators(self, company_id: uuid.UUID, include_pending: bool = True) -> int:
        members = self.db.query(User).filter(User.company_id == company_id).count()
        if not include_pending:
            return members
        pending = (
            self.db.query(TeamInvitation)
            .filter(
                TeamInvitation.company_id == company_id,
                TeamInvitation.status == InvitationStatusEnum.pending,
                TeamInvitation.expires_at > utcnow(),
            )
            .count()
        )
        return members + pending

    def storage_used_bytes(self, company_id: uuid.UUID) -> int:
        total = self.db.query(func.coalesce(func.sum(Document.file_size), 0)).filter(Document.company_id == company_id).scalar()
        return int(total or 0)

    def ensure_can_create_tender(self, company: Company) -> None:
        if not self.is_subscription_active(company):
            raise QuotaExceededError("Your subscription is not active", {"status": company.subscription_status})
        limit = get_plan_limits(company.subscription_plan).tenders_per_month
        if limit is None:
            return
        current = self.count_tenders_this_month(company.id)
        if current >= limit:
            logger.info(f"Tender quota reached for company {company.id}: {current}/{limit}")
            raise QuotaExceededError(
                f"Monthly tender limit reached ({limit}). Upgrade your plan to create more tenders.",
                {"current_count": current, "limit": limit},
            )

    def ensure_can_add_collaborator(self, company: Company) -> None:
        if not self.is_subscription_active(company):
            raise QuotaExceededError("Your subscription is not active", {"status": company.subscription_status})
        limit = get_plan_limits(company.subscription_plan).collaborators
        if limit is None:
            return
        current = self.count_collaborators(company.id)
        if current >= limit:
            raise QuotaExceededError(
                f"Collaborator limit reached ({limit}). Upgrade your plan to invite more members.",
                {"current_count": current, "limit": limit},
            )

    def ensure_storage_available(self, company: Company, additional_bytes: int) -> None:
        limit_gb = get_plan_limits(company.subscription_plan).storage_gb
        if limit_gb is None:
            return
        used = self.storage_used_bytes(company.id)
        if used + additional_bytes > limit_gb * BYTES_PER_GB:
            raise QuotaExceededError(
                "Storage limit reached for your plan",
                {"used_bytes": used, "limit_bytes": int(limit_gb * BYTES_PER_GB)},
            )

    def has_feature_access(self, company: Company, feature: str) -> bool:
        if feature not in FEATURES:
            return False
        if not self.is_subscription_active(company):
            return False
        return getattr(get_plan_limits(company.subscription_plan), feature)

    def ensure_feature(self, company: Company, feature: str) -> None:
        if not self.has_feature_access(company, feature):
            raise QuotaExceededError(
                f"Your plan does not include the '{feature}' feature",
                {"feature": feature, "plan": company.subscription_plan.value},
            )

    def get_usage(self, company: Company) -> dict:
        limits = get_plan_limits(company.subscription_plan)
        tenders = self.count_tenders_this_month(company.id)
        collaborators = self.count_collaborators(company.id, include_pending=False)
        storage_bytes = self.storage_used_bytes(company.id)
        storage_gb = storage_bytes / BYTES_PER_GB

        def usage(current, limit):
            return {
                "current": current,
                "limit": limit,
                "percentage": 0 if limit is None else min(percentage(current, limit), 100),
            }

        return {
            "plan": company.subscription_plan.value,
            "status": company.subscription_status,
            "is_active": self.is_subscription_active(company),
            "period_end": company.subscription_period_end,
            "usage": {
                "tenders": usage(tenders, limits.tenders_per_month),
                "collaborators": usage(collaborators, limits.collaborators),
                "storage": {**usage(round(storage_gb, 4), limits.storage_gb), "bytes": storage_bytes},
            },
            "features": limits.features(),
        }
