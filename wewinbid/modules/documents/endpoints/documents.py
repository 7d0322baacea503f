import logging
import os
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from sse_starlette.sse import EventSourceResponse

from wewinbid.core.errors import NotFoundError
from wewinbid.core.helpers import to_naive_utc
from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.companies.db.schema import Company
from wewinbid.modules.documents.db.schema import DocumentStatusEnum, DocumentTypeEnum
from wewinbid.modules.documents.models.pydantic_models import (
    DocumentCreate,
    DocumentResponse,
    DocumentUpdate,
    GenerateRequest,
    GenerateResponse,
    TemplateInfo,
)
from wewinbid.modules.documents.services.document_service import DocumentService
from wewinbid.modules.documents.services.export_service import export_docx, export_pdf
from wewinbid.modules.documents.services.generation_service import GenerationService, stream_generation
from wewinbid.modules.documents.services.templates import list_templates

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/documents", tags=["Documents"])

EXPORT_MEDIA_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


@router.get("", response_model=List[DocumentResponse])
def list_documents(
    tender_id: Optional[uuid.UUID] = Query(None),
    type: Optional[DocumentTypeEnum] = Query(None),
    status_filter: Optional[DocumentStatusEnum] = Query(None, alias="status"),
    is_template: Optional[bool] = Query(None),
    expiring_within_days: Optional[int] = Query(None, ge=0, le=365),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return DocumentService(db).list_documents(
        current_user, tender_id, type, status_filter, is_template, expiring_within_days
    )


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def create_document(
    request: DocumentCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return DocumentService(db).create_document(current_user, request)


@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    type: DocumentTypeEnum = Form(DocumentTypeEnum.OTHER),
    tender_id: Optional[uuid.UUID] = Form(None),
    name: Optional[str] = Form(None),
    expires_at: Optional[datetime] = Form(None),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    content = await file.read()
    return DocumentService(db).upload_document(
        current_user,
        filename=file.filename or "document",
        content=content,
        type=type,
        tender_id=tender_id,
        name=name,
        expires_at=to_naive_utc(expires_at),
    )


@router.get("/templates", response_model=List[TemplateInfo])
def get_templates(current_user: User = Depends(get_current_active_user)):
    return list_templates()


@router.post("/generate", response_model=GenerateResponse)
def generate_document(
    request: GenerateRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    service = GenerationService(db)
    context = service.prepare(current_user, request.tender_id, request.document_type, request.custom_prompt)
    try:
        return service.generate(context, save=request.save)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Document generation failed for tender {request.tender_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Document generation failed")


@router.post("/generate/stream", summary="Generate a document and stream it as Server-Sent Events")
def generate_document_stream(
    request: GenerateRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    context = GenerationService(db).prepare(current_user, request.tender_id, request.document_type, request.custom_prompt)
    return EventSourceResponse(stream_generation(context, save=request.save))


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return DocumentService(db).get_document(current_user, document_id)


@router.patch("/{document_id}", response_model=DocumentResponse)
def update_document(
    document_id: uuid.UUID,
    request: DocumentUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return DocumentService(db).update_document(current_user, document_id, request)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    DocumentService(db).delete_document(current_user, document_id)


@router.get("/{document_id}/download")
def download_document(
    document_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    document = DocumentService(db).get_document(current_user, document_id)
    if not document.file_path or not os.path.exists(document.file_path):
        raise NotFoundError("No stored file for this document")
    return FileResponse(
        document.file_path,
        media_type=document.mime_type or "application/octet-stream",
        filename=document.file_name or document.name,
    )


@router.get("/{document_id}/export")
def export_document(
    document_id: uuid.UUID,
    format: str = Query("pdf", pattern="^(pdf|docx)$"),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    document = DocumentService(db).get_document(current_user, document_id)
    company = db.get(Company, current_user.company_id)
    company_name = company.name if company else None
    try:
        if format == "docx":
            content = export_docx(document.name, document.content, company_name)
        else:
            content = export_pdf(document.name, document.content, company_name)
    except Exception as e:
        logger.error(f"Failed to export document {document_id} as {format}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to export document")

    safe_name = "".join(c if c.isalnum() or c in "-_" else "_" for c in document.name)[:100] or "document"
    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{safe_name}.{format}"'},
    )
