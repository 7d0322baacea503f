from fastapi import APIRouter

from wewinbid.modules.alerts.router import router as alerts_router
from wewinbid.modules.analytics.router import router as analytics_router
from wewinbid.modules.approvals.router import router as approvals_router
from wewinbid.modules.auth.router import router as auth_router
from wewinbid.modules.calendar.router import router as calendar_router
from wewinbid.modules.companies.router import router as companies_router
from wewinbid.modules.documents.router import router as documents_router
from wewinbid.modules.health.router import router as health_router
from wewinbid.modules.jobs.router import router as jobs_router
from wewinbid.modules.notifications.router import router as notifications_router
from wewinbid.modules.search.router import router as search_router
from wewinbid.modules.signatures.router import router as signatures_router
from wewinbid.modules.snippets.router import router as snippets_router
from wewinbid.modules.subscription.router import router as subscription_router
from wewinbid.modules.team.router import router as team_router
from wewinbid.modules.tenders.router import router as tenders_router

api_v1_router = APIRouter()

api_v1_router.include_router(health_router)
api_v1_router.include_router(auth_router)
api_v1_router.include_router(companies_router)
api_v1_router.include_router(team_router)
api_v1_router.include_router(subscription_router)
api_v1_router.include_router(tenders_router)
api_v1_router.include_router(search_router)
api_v1_router.include_router(alerts_router)
api_v1_router.include_router(notifications_router)
api_v1_router.include_router(calendar_router)
api_v1_router.include_router(approvals_router)
api_v1_router.include_router(signatures_router)
api_v1_router.include_router(analytics_router)
api_v1_router.include_router(documents_router)
api_v1_router.include_router(snippets_router)
api_v1_router.include_router(jobs_router)
