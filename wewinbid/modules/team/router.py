from fastapi import APIRouter

from wewinbid.modules.team.endpoints import team

router = APIRouter()

router.include_router(team.router)
