from fastapi import APIRouter

from wewinbid.modules.search.endpoints import search

router = APIRouter()

router.include_router(search.router)
