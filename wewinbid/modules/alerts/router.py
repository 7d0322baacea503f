from fastapi import APIRouter

from wewinbid.modules.alerts.endpoints import alerts

router = APIRouter()

router.include_router(alerts.router)
