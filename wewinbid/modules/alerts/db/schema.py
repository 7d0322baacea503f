import uuid
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey, Text, Integer, Boolean, JSON, Uuid, Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class AlertFrequencyEnum(str, enum.Enum):
    instant = "instant"
    daily = "daily"
    weekly = "weekly"


class SearchAlert(Base):
    """Saved tender criteria that raise NEW_OPPORTUNITY notifications."""
    __tablename__ = 'search_alerts'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    criteria: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    frequency: Mapped[AlertFrequencyEnum] = mapped_column(
        SQLAlchemyEnum(AlertFrequencyEnum, native_enum=False, length=20),
        nullable=False,
        default=AlertFrequencyEnum.daily,
    )
    notification_channels: Mapped[dict] = mapped_column(JSON, nullable=False, default=lambda: {"email": True, "in_app": True})
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    last_triggered_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    match_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
