from fastapi import APIRouter

from wewinbid.modules.health.endpoints import health

router = APIRouter()

router.include_router(health.router)
