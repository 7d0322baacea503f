from fastapi import APIRouter

from wewinbid.modules.subscription.endpoints import subscription

router = APIRouter()

router.include_router(subscription.router)
