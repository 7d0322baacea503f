from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.core.types import UTCDateTime
from wewinbid.modules.alerts.db.schema import AlertFrequencyEnum
from wewinbid.modules.tenders.db.schema import SectorEnum, TenderStatusEnum, TenderTypeEnum


class AlertCriteria(BaseModel):
    query: Optional[str] = Field(None, max_length=500)
    sectors: List[SectorEnum] = Field(default_factory=list)
    countries: List[str] = Field(default_factory=list)
    min_value: Optional[float] = Field(None, ge=0)
    max_value: Optional[float] = Field(None, ge=0)
    deadline_from: Optional[UTCDateTime] = None
    deadline_to: Optional[UTCDateTime] = None
    tender_type: Optional[TenderTypeEnum] = None
    status: List[TenderStatusEnum] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_ranges(self):
        if self.min_value is not None and self.max_value is not None and self.min_value > self.max_value:
            raise ValueError("min_value must be lower than max_value")
        if self.deadline_from and self.deadline_to and self.deadline_from > self.deadline_to:
            raise ValueError("deadline_from must be before deadline_to")
        self.countries = [c.upper() for c in self.countries]
        return self


class NotificationChannels(BaseModel):
    email: bool = True
    in_app: bool = True


class AlertCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    criteria: AlertCriteria = Field(default_factory=AlertCriteria)
    frequency: AlertFrequencyEnum = AlertFrequencyEnum.daily
    notification_channels: NotificationChannels = Field(default_factory=NotificationChannels)
    is_active: bool = True


class AlertUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    criteria: Optional[AlertCriteria] = None
    frequency: Optional[AlertFrequencyEnum] = None
    notification_channels: Optional[NotificationChannels] = None
    is_active: Optional[bool] = None


class AlertResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    criteria: dict
    frequency: AlertFrequencyEnum
    notification_channels: dict
    is_active: bool
    last_triggered_at: Optional[datetime] = None
    match_count: int
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)
