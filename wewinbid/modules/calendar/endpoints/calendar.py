import logging
import uuid
from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from wewinbid.core.helpers import utcnow
from wewinbid.core.types import UTCDateTime
from wewinbid.db.database import get_db_session
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.auth.services.auth_service import get_current_active_user
from wewinbid.modules.calendar.db.schema import EventTypeEnum
from wewinbid.modules.calendar.models.pydantic_models import EventCreateRequest, EventResponse, EventUpdateRequest
from wewinbid.modules.calendar.services.calendar_service import CalendarService
from wewinbid.modules.calendar.services.ics_service import generate_ics

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.get("/events", response_model=List[EventResponse])
def list_events(
    start: Optional[UTCDateTime] = Query(None),
    end: Optional[UTCDateTime] = Query(None),
    type: Optional[EventTypeEnum] = Query(None),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return CalendarService(db).list_events(current_user.id, start, end, type)


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    request: EventCreateRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return CalendarService(db).create_event(current_user.id, request)


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(
    event_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return CalendarService(db).get_event(current_user.id, event_id)


@router.patch("/events/{event_id}", response_model=EventResponse)
def update_event(
    event_id: uuid.UUID,
    request: EventUpdateRequest,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    return CalendarService(db).update_event(current_user.id, event_id, request)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: uuid.UUID,
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    CalendarService(db).delete_event(current_user.id, event_id)


@router.get("/export", summary="Export events as an iCalendar file")
def export_calendar(
    start: Optional[UTCDateTime] = Query(None),
    end: Optional[UTCDateTime] = Query(None),
    db: Session = Depends(get_db_session),
    current_user: User = Depends(get_current_active_user),
):
    start = start or utcnow()
    end = end or start + timedelta(days=90)
    events = CalendarService(db).list_events(current_user.id, start, end)
    return Response(
        content=generate_ics(events),
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="calendar-events.ics"'},
    )
