"""
Calendar events and their reminders.
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from wewinbid.core.errors import NotFoundError, ValidationError
from wewinbid.core.helpers import utcnow
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.calendar.db.schema import CalendarEvent, EventReminder, EventTypeEnum, ReminderTypeEnum
from wewinbid.modules.calendar.models.pydantic_models import EventCreateRequest, EventUpdateRequest, ReminderInput
from wewinbid.modules.notifications.db.schema import NotificationTypeEnum
from wewinbid.modules.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

TENDER_ENTITY = "tender"
# Reminders attached to automatically created tender deadline events
DEADLINE_REMINDER_MINUTES = (60 * 24, 60 * 24 * 3)


class CalendarService:
    def __init__(self, db: Session):
        self.db = db

    def list_events(
        self,
        user_id: uuid.UUID,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        event_type: Optional[EventTypeEnum] = None,
    ) -> List[CalendarEvent]:
        query = (
            self.db.query(CalendarEvent)
            .options(selectinload(CalendarEvent.reminders))
            .filter(CalendarEvent.user_id == user_id, CalendarEvent.status == "active")
        )
        if start:
            query = query.filter(CalendarEvent.start_date >= start)
        if end:
            query = query.filter(CalendarEvent.start_date <= end)
        if event_type:
            query = query.filter(CalendarEvent.event_type == event_type)
        return query.order_by(CalendarEvent.start_date.asc()).all()

    def get_event(self, user_id: uuid.UUID, event_id: uuid.UUID) -> CalendarEvent:
        event = (
            self.db.query(CalendarEvent)
            .filter(CalendarEvent.id == event_id, CalendarEvent.user_id == user_id)
            .first()
        )
        if not event:
            raise NotFoundError("Event not found")
        return event

    def _build_reminders(self, event: CalendarEvent, reminders: List[ReminderInput]) -> None:
        event.reminders = [
            EventReminder(
                user_id=event.user_id,
                reminder_type=reminder.reminder_type,
                minutes_before=reminder.minutes_before,
                scheduled_for=event.start_date - timedelta(minutes=reminder.minutes_before),
            )
            for reminder in reminders
        ]

    def create_event(self, user_id: uuid.UUID, request: EventCreateRequest, commit: bool = True) -> CalendarEvent:
        data = request.model_dump(exclude={"reminders", "metadata"})
        event = CalendarEvent(user_id=user_id, extra=request.metadata, **data)
        self._build_reminders(event, request.reminders)
        self.db.add(event)
        if commit:
            self.db.commit()
            self.db.refresh(event)
        else:
            self.db.flush()
        logger.info(f"Calendar event {event.id} created for user {user_id}")
        return event

    def update_event(self, user_id: uuid.UUID, event_id: uuid.UUID, request: EventUpdateRequest) -> CalendarEvent:
        event = self.get_event(user_id, event_id)
        updates = request.model_dump(exclude_unset=True, exclude={"reminders", "metadata"})
        for field, value in updates.items():
            setattr(event, field, value)
        if "metadata" in request.model_fields_set:
            event.extra = request.metadata
        if event.end_date is not None and event.end_date < event.start_date:
            raise ValidationError("end_date must be after start_date")

        if request.reminders is not None:
            self._build_reminders(event, request.reminders)
        elif "start_date" in updates:
            self._reschedule_reminders(event)

        self.db.commit()
        self.db.refresh(event)
        return event

    def _reschedule_reminders(self, event: CalendarEvent) -> None:
        for reminder in event.reminders:
            if reminder.sent_at is None:
                reminder.scheduled_for = event.start_date - timedelta(minutes=reminder.minutes_before)

    def delete_event(self, user_id: uuid.UUID, event_id: uuid.UUID) -> None:
        event = self.get_event(user_id, event_id)
        self.db.delete(event)
        self.db.commit()

    # --- Tender deadline events ---

    def find_entity_event(self, user_id: uuid.UUID, entity_type: str, entity_id: uuid.UUID) -> Optional[CalendarEvent]:
        return (
            self.db.query(CalendarEvent)
            .filter(
                CalendarEvent.user_id == user_id,
                CalendarEvent.entity_type == entity_type,
                CalendarEvent.entity_id == entity_id,
                CalendarEvent.event_type == EventTypeEnum.deadline,
            )
            .first()
        )

    def sync_tender_deadline(self, user_id: uuid.UUID, tender) -> Optional[CalendarEvent]:
        """
        Keep one deadline event per tender for `user_id`; removes it when the
        tender no longer has a deadline. Does not commit.
        """
        event = self.find_entity_event(user_id, TENDER_ENTITY, tender.id)
        if tender.deadline is None:
            if event:
                self.db.delete(event)
            return None

        title = f"Date limite : {tender.title}"
        if event is None:
            request = EventCreateRequest(
                title=title,
                description=f"Remise de l'offre {tender.reference}",
                event_type=EventTypeEnum.deadline,
                start_date=tender.deadline,
                color="#EF4444",
                entity_type=TENDER_ENTITY,
                entity_id=tender.id,
                reminders=[ReminderInput(minutes_before=m) for m in DEADLINE_REMINDER_MINUTES],
            )
            return self.create_event(user_id, request, commit=False)

        event.title = title
        if event.start_date != tender.deadline:
            event.start_date = tender.deadline
            self._reschedule_reminders(event)
        return event

    def remove_entity_events(self, entity_type: str, entity_id: uuid.UUID) -> None:
        events = (
            self.db.query(CalendarEvent)
            .filter(CalendarEvent.entity_type == entity_type, CalendarEvent.entity_id == entity_id)
            .all()
        )
        for event in events:
            self.db.delete(event)

    # --- Reminder dispatch ---

    def dispatch_due_reminders(self, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        due = (
            self.db.query(EventReminder)
            .join(CalendarEvent, EventReminder.event_id == CalendarEvent.id)
            .filter(
                EventReminder.sent_at.is_(None),
                EventReminder.scheduled_for <= now,
                CalendarEvent.status == "active",
                CalendarEvent.start_date >= now,
            )
            .all()
        )
        notifications = NotificationService(self.db)
        sent = 0
        for reminder in due:
            user = self.db.get(User, reminder.user_id)
            if user is None or not user.is_active:
                reminder.sent_at = now
                continue
            event = reminder.event
            starts = event.start_date.strftime("%d/%m/%Y %H:%M")
            notifications.notify(
                user,
                type=NotificationTypeEnum.REMINDER,
                title=f"Rappel : {event.title}",
                message=f"{event.title} commence le {starts}.",
                link="/calendar",
                tender_id=event.entity_id if event.entity_type == TENDER_ENTITY else None,
                metadata={"event_id": str(event.id)},
                send_email=reminder.reminder_type == ReminderTypeEnum.email,
            )
            reminder.sent_at = now
            sent += 1
        self.db.commit()
        logger.info(f"Dispatched {sent} calendar reminders")
        return sent
