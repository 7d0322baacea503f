import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.notifications.models.pydantic_models import (
    MarkReadRequest,
    NotificationCreateRequest,
    NotificationListResponse,
    NotificationPagination,
    NotificationPreferencesResponse,
    NotificationPreferencesUpdate,
    NotificationResponse,
    NotificationUpdateRequest,
)
from wewinbid.modules.notifications.repositories.repository import NotificationRepository
from wewinbid.modules.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse, summary="List the caller's notifications")
def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread: bool = Query(False, description="Only unread notifications"),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    repo = NotificationRepository(db)
    items, total = repo.list_for_user(current_user.id, limit, offset, unread_only=unread)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        unread_count=repo.count_unread(current_user.id),
        pagination=NotificationPagination(limit=limit, offset=offset, total=total, has_more=offset + len(items) < total),
    )


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def create_notification(
    request: NotificationCreateRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    notification = NotificationService(db).notify(
        current_user,
        type=request.type,
        title=request.title,
        message=request.message,
        link=request.link,
        tender_id=request.tender_id,
        metadata=request.metadata,
        send_email=False,
    )
    db.commit()
    db.refresh(notification)
    return NotificationResponse.model_validate(notification)


@router.post("/mark-read", summary="Mark notifications as read")
def mark_read(
    request: MarkReadRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    try:
        ids = None if request.mark_all else request.notification_ids
        updated = NotificationRepository(db).mark_read(current_user.id, ids)
        db.commit()
        return {"success": True, "updated": updated}
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to mark notifications read for user {current_user.id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update notifications")


@router.get("/preferences", response_model=NotificationPreferencesResponse)
def get_preferences(
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    prefs = NotificationService(db).get_or_create_preferences(current_user.id)
    db.commit()
    return NotificationPreferencesResponse.model_validate(prefs)


@router.put("/preferences", response_model=NotificationPreferencesResponse)
def update_preferences(
    request: NotificationPreferencesUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    prefs = NotificationService(db).update_preferences(current_user.id, request.model_dump(exclude_unset=True))
    return NotificationPreferencesResponse.model_validate(prefs)


@router.patch("/{notification_id}", response_model=NotificationResponse)
def update_notification(
    notification_id: uuid.UUID,
    request: NotificationUpdateRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    notification = NotificationService(db).set_read(current_user.id, notification_id, request.read)
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    NotificationService(db).delete(current_user.id, notification_id)
