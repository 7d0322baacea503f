import uuid
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey, Text, Boolean, JSON, Uuid, UniqueConstraint, Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class NotificationTypeEnum(str, enum.Enum):
    DEADLINE_7D = "DEADLINE_7D"
    DEADLINE_3D = "DEADLINE_3D"
    DEADLINE_24H = "DEADLINE_24H"
    TENDER_WON = "TENDER_WON"
    TENDER_LOST = "TENDER_LOST"
    COMMENT = "COMMENT"
    TEAM_INVITE = "TEAM_INVITE"
    NEW_OPPORTUNITY = "NEW_OPPORTUNITY"
    APPROVAL_REQUEST = "APPROVAL_REQUEST"
    SIGNATURE_REQUEST = "SIGNATURE_REQUEST"
    DOCUMENT_EXPIRING = "DOCUMENT_EXPIRING"
    REMINDER = "REMINDER"
    SYSTEM = "SYSTEM"


class Notification(Base):
    __tablename__ = 'notifications'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    type: Mapped[NotificationTypeEnum] = mapped_column(
        SQLAlchemyEnum(NotificationTypeEnum, native_enum=False, length=30), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[Optional[str]] = mapped_column(String(1000))
    tender_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('tenders.id', ondelete='CASCADE'))
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    extra: Mapped[Optional[dict]] = mapped_column("metadata", JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False, index=True)


class NotificationPreference(Base):
    __tablename__ = 'notification_preferences'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    email_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    push_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deadline_7d: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deadline_3d: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deadline_24h: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    tender_status_change: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    team_activity: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    marketing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class NotificationSent(Base):
    """Delivery ledger so scheduled notifications go out once per recipient."""
    __tablename__ = 'notification_sent'
    __table_args__ = (
        UniqueConstraint('notification_type', 'reference_id', 'user_id', name='uq_notification_sent_type_ref_user'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    notification_type: Mapped[str] = mapped_column(String(50), nullable=False)
    reference_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
