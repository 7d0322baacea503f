from fastapi import APIRouter

from wewinbid.modules.tenders.endpoints import tenders

router = APIRouter()

router.include_router(tenders.router)
