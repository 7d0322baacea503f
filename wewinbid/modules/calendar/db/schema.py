import uuid
import enum
from datetime import datetime
from typing import Optional, List
from sqlalchemy import String, DateTime, ForeignKey, Text, Integer, Boolean, JSON, Uuid, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship, Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class EventTypeEnum(str, enum.Enum):
    deadline = "deadline"
    meeting = "meeting"
    reminder = "reminder"
    submission = "submission"
    other = "other"


class ReminderTypeEnum(str, enum.Enum):
    notification = "notification"
    email = "email"


class CalendarEvent(Base):
    __tablename__ = 'calendar_events'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    event_type: Mapped[EventTypeEnum] = mapped_column(
        SQLAlchemyEnum(EventTypeEnum, native_enum=False, length=20), nullable=False, default=EventTypeEnum.reminder
    )
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    all_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    location: Mapped[Optional[str]] = mapped_column(String(500))
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurrence_rule: Mapped[Optional[str]] = mapped_column(String(500))
    color: Mapped[str] = mapped_column(String(20), nullable=False, default="#3B82F6")
    category: Mapped[Optional[str]] = mapped_column(String(100))
    entity_type: Mapped[Optional[str]] = mapped_column(String(50))
    entity_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, index=True)
    extra: Mapped[Optional[dict]] = mapped_column("metadata", JSON)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    reminders: Mapped[List["EventReminder"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", order_by="EventReminder.minutes_before"
    )


class EventReminder(Base):
    __tablename__ = 'event_reminders'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('calendar_events.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    reminder_type: Mapped[ReminderTypeEnum] = mapped_column(
        SQLAlchemyEnum(ReminderTypeEnum, native_enum=False, length=20), nullable=False, default=ReminderTypeEnum.notification
    )
    minutes_before: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    scheduled_for: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    event: Mapped["CalendarEvent"] = relationship(back_populates="reminders")
