from fastapi import APIRouter

from wewinbid.modules.analytics.endpoints import analytics

router = APIRouter()

router.include_router(analytics.router)
