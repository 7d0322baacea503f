import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from wewinbid.core.text_extraction import extract_text
from wewinbid.db.database import get_db_session
from wewinbid.modules.alerts.services.alert_service import process_new_tender
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.tenders.db.schema import SectorEnum, TenderStatusEnum, TenderTypeEnum
from wewinbid.modules.tenders.models.pydantic_models import (
    CommentCreate,
    CommentResponse,
    FavoriteToggleResponse,
    Pagination,
    Tender,
    TenderCreate,
    TenderExtractionResponse,
    TenderHistoryEntry,
    TenderListResponse,
    TenderScoreResponse,
    TenderUpdate,
)
from wewinbid.modules.tenders.repositories.repository import TenderRepository
from wewinbid.modules.tenders.services.export_service import export_csv, export_xlsx
from wewinbid.modules.tenders.services.extraction_service import extract_tender_draft
from wewinbid.modules.tenders.services.scoring_service import ScoringService
from wewinbid.modules.tenders.services.tender_service import TenderService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tenders", tags=["Tenders"])

MAX_EXTRACTION_FILE_SIZE = 20 * 1024 * 1024


@router.get("", response_model=TenderListResponse, summary="List the company's tenders")
def list_tenders(
    status_filter: Optional[TenderStatusEnum] = Query(None, alias="status"),
    type: Optional[TenderTypeEnum] = Query(None),
    sector: Optional[SectorEnum] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    tenders, total = TenderService(db).list_tenders(current_user, status_filter, type, sector, search, limit, offset)
    return TenderListResponse(
        tenders=[Tender.model_validate(t) for t in tenders],
        pagination=Pagination(total=total, limit=limit, offset=offset, has_more=offset + len(tenders) < total),
    )


@router.post("", response_model=Tender, status_code=status.HTTP_201_CREATED)
def create_tender(
    request: TenderCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    tender = TenderService(db).create_tender(current_user, request)
    background_tasks.add_task(process_new_tender, tender_id=tender.id)
    return tender


@router.get("/export", summary="Download the company's tenders as CSV or XLSX")
def export_tenders(
    format: str = Query("csv", pattern="^(csv|xlsx)$"),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    tenders = TenderRepository(db).all_for_company(current_user.company_id)
    if format == "xlsx":
        content = export_xlsx(tenders)
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    else:
        content = export_csv(tenders)
        media_type = "text/csv; charset=utf-8"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="tenders.{format}"'},
    )


@router.get("/favorites", response_model=List[Tender])
def list_favorites(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return TenderService(db).list_favorites(current_user)


@router.post("/extract", response_model=TenderExtractionResponse, summary="Prefill a tender from a PDF/DOCX notice")
async def extract_tender(
    file: UploadFile = File(..., description="PDF or DOCX file of the tender notice"),
    current_user: User = Depends(get_current_active_user),
):
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is empty")
    if len(content) > MAX_EXTRACTION_FILE_SIZE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File size exceeds maximum limit of 20MB")
    try:
        text = extract_text(file.filename or "", content, max_pages=30)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    draft, provider = extract_tender_draft(text)
    logger.info(f"Extracted tender draft from {file.filename} for user {current_user.id} using {provider}")
    return TenderExtractionResponse(
        file_name=file.filename or "",
        characters=len(text),
        excerpt=text[:1000],
        provider=provider,
        draft=draft,
    )


@router.get("/{tender_id}", response_model=Tender)
def get_tender(
    tender_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return TenderService(db).get_tender(current_user, tender_id)


@router.patch("/{tender_id}", response_model=Tender)
def update_tender(
    tender_id: uuid.UUID,
    request: TenderUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    try:
        return TenderService(db).update_tender(current_user, tender_id, request)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update tender {tender_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update tender")


@router.delete("/{tender_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tender(
    tender_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    TenderService(db).delete_tender(current_user, tender_id)


@router.get("/{tender_id}/history", response_model=List[TenderHistoryEntry])
def get_tender_history(
    tender_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    TenderService(db).get_tender(current_user, tender_id)
    return TenderRepository(db).get_history(tender_id)


@router.get("/{tender_id}/comments", response_model=List[CommentResponse])
def list_comments(
    tender_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return TenderService(db).list_comments(current_user, tender_id)


@router.post("/{tender_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    tender_id: uuid.UUID,
    request: CommentCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    comment = TenderService(db).add_comment(current_user, tender_id, request)
    return CommentResponse(
        id=comment.id,
        tender_id=comment.tender_id,
        user_id=comment.user_id,
        author_name=current_user.full_name or current_user.email,
        parent_id=comment.parent_id,
        content=comment.content,
        mentions=comment.mentions or [],
        created_at=comment.created_at,
    )


@router.post("/{tender_id}/favorite", response_model=FavoriteToggleResponse)
def toggle_favorite(
    tender_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    is_favorite = TenderService(db).toggle_favorite(current_user, tender_id)
    return FavoriteToggleResponse(tender_id=tender_id, is_favorite=is_favorite)


@router.post("/{tender_id}/score", response_model=TenderScoreResponse, summary="Compute the compatibility score")
def score_tender(
    tender_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ScoringService(db).score_tender(current_user, tender_id)


@router.get("/{tender_id}/score", response_model=TenderScoreResponse)
def get_tender_score(
    tender_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return ScoringService(db).get_score(current_user, tender_id)
