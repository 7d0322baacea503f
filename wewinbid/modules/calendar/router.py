from fastapi import APIRouter

from wewinbid.modules.calendar.endpoints import calendar

router = APIRouter()

router.include_router(calendar.router)
