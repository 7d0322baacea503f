from fastapi import APIRouter

from wewinbid.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check():
    return {"status": "ok", "version": settings.APP_VERSION}
