from fastapi import APIRouter

from wewinbid.modules.jobs.endpoints import cron

router = APIRouter()

router.include_router(cron.router)
