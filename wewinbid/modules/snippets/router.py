from fastapi import APIRouter

from wewinbid.modules.snippets.endpoints import snippets

router = APIRouter()

router.include_router(snippets.router)
