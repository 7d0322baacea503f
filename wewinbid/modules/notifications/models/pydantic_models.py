from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.modules.notifications.db.schema import NotificationTypeEnum


class NotificationResponse(BaseModel):
    id: UUID
    type: NotificationTypeEnum
    title: str
    message: str
    link: Optional[str] = None
    tender_id: Optional[UUID] = None
    read: bool
    metadata: Optional[dict] = Field(None, validation_alias="extra")
    created_at: datetime
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class NotificationPagination(BaseModel):
    limit: int
    offset: int
    total: int
    has_more: bool


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
    pagination: NotificationPagination


class NotificationCreateRequest(BaseModel):
    type: NotificationTypeEnum = NotificationTypeEnum.SYSTEM
    title: str = Field(..., min_length=1, max_length=500)
    message: str = Field(..., min_length=1)
    link: Optional[str] = None
    tender_id: Optional[UUID] = None
    metadata: Optional[dict] = None


class MarkReadRequest(BaseModel):
    notification_ids: Optional[List[UUID]] = None
    mark_all: bool = False

    @model_validator(mode="after")
    def check_target(self):
        if not self.mark_all and not self.notification_ids:
            raise ValueError("Provide notification_ids or set mark_all to true")
        return self


class NotificationUpdateRequest(BaseModel):
    read: bool


class NotificationPreferencesResponse(BaseModel):
    email_enabled: bool
    push_enabled: bool
    deadline_7d: bool
    deadline_3d: bool
    deadline_24h: bool
    tender_status_change: bool
    team_activity: bool
    marketing: bool
    model_config = ConfigDict(from_attributes=True)


class NotificationPreferencesUpdate(BaseModel):
    email_enabled: Optional[bool] = None
    push_enabled: Optional[bool] = None
    deadline_7d: Optional[bool] = None
    deadline_3d: Optional[bool] = None
    deadline_24h: Optional[bool] = None
    tender_status_change: Optional[bool] = None
    team_activity: Optional[bool] = None
    marketing: Optional[bool] = None
