from fastapi import APIRouter

from wewinbid.modules.signatures.endpoints import signatures

router = APIRouter()

router.include_router(signatures.router)
