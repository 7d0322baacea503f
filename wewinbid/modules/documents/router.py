from fastapi import APIRouter

from wewinbid.modules.documents.endpoints import documents

router = APIRouter()

router.include_router(documents.router)
