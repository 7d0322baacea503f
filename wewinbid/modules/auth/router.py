from fastapi import APIRouter

from wewinbid.modules.auth.endpoints import auth

router = APIRouter()

router.include_router(auth.router)
