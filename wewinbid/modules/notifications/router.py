from fastapi import APIRouter

from wewinbid.modules.notifications.endpoints import notifications

router = APIRouter()

router.include_router(notifications.router)
