from fastapi import APIRouter

from wewinbid.modules.companies.endpoints import companies

router = APIRouter()

router.include_router(companies.router)
