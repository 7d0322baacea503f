from fastapi import APIRouter

from wewinbid.modules.approvals.endpoints import approvals

router = APIRouter()

router.include_router(approvals.router)
