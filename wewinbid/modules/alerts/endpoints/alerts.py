import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wewinbid.db.database import get_db_session
from wewinbid.modules.alerts.models.pydantic_models import AlertCreate, AlertResponse, AlertUpdate
from wewinbid.modules.alerts.services.alert_service import AlertService
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.tenders.models.pydantic_models import Tender

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("", response_model=List[AlertResponse])
def list_alerts(
    active_only: bool = Query(False),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return AlertService(db).list_alerts(current_user, active_only)


@router.post("", response_model=AlertResponse, status_code=status.HTTP_201_CREATED)
def create_alert(
    request: AlertCreate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return AlertService(db).create_alert(current_user, request)


@router.get("/{alert_id}", response_model=AlertResponse)
def get_alert(
    alert_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return AlertService(db).get_alert(current_user, alert_id)


@router.patch("/{alert_id}", response_model=AlertResponse)
def update_alert(
    alert_id: uuid.UUID,
    request: AlertUpdate,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return AlertService(db).update_alert(current_user, alert_id, request)


@router.delete("/{alert_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_alert(
    alert_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    AlertService(db).delete_alert(current_user, alert_id)


@router.get("/{alert_id}/matches", response_model=List[Tender], summary="Preview tenders matching an alert")
def preview_matches(
    alert_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return AlertService(db).preview_matches(current_user, alert_id)
