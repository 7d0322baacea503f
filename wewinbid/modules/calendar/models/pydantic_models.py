from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.core.types import UTCDateTime
from wewinbid.modules.calendar.db.schema import EventTypeEnum, ReminderTypeEnum


class ReminderInput(BaseModel):
    reminder_type: ReminderTypeEnum = ReminderTypeEnum.notification
    minutes_before: int = Field(30, ge=0, le=60 * 24 * 30)


class ReminderResponse(BaseModel):
    id: UUID
    reminder_type: ReminderTypeEnum
    minutes_before: int
    scheduled_for: datetime
    sent_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    event_type: EventTypeEnum = EventTypeEnum.reminder
    start_date: UTCDateTime
    end_date: Optional[UTCDateTime] = None
    all_day: bool = False
    location: Optional[str] = Field(None, max_length=500)
    is_recurring: bool = False
    recurrence_rule: Optional[str] = Field(None, max_length=500)
    color: str = Field("#3B82F6", pattern=r"^#[0-9A-Fa-f]{6}$")
    category: Optional[str] = Field(None, max_length=100)
    entity_type: Optional[str] = Field(None, max_length=50)
    entity_id: Optional[UUID] = None
    metadata: Optional[dict] = None


class EventCreateRequest(EventBase):
    reminders: List[ReminderInput] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class EventUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    event_type: Optional[EventTypeEnum] = None
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    all_day: Optional[bool] = None
    location: Optional[str] = Field(None, max_length=500)
    is_recurring: Optional[bool] = None
    recurrence_rule: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    category: Optional[str] = Field(None, max_length=100)
    status: Optional[str] = Field(None, pattern="^(active|cancelled)$")
    metadata: Optional[dict] = None
    reminders: Optional[List[ReminderInput]] = None


class EventResponse(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    event_type: EventTypeEnum
    start_date: datetime
    end_date: Optional[datetime] = None
    all_day: bool
    location: Optional[str] = None
    is_recurring: bool
    recurrence_rule: Optional[str] = None
    color: str
    category: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[UUID] = None
    metadata: Optional[dict] = Field(None, validation_alias="extra")
    status: str
    reminders: List[ReminderResponse] = []
    created_at: datetime
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
