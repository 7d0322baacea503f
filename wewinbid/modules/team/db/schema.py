import uuid
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, ForeignKey, Uuid, Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base
from wewinbid.modules.auth.db.schema import UserRoleEnum


class InvitationStatusEnum(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    revoked = "revoked"
    expired = "expired"


class TeamInvitation(Base):
    __tablename__ = 'team_invitations'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[UserRoleEnum] = mapped_column(
        SQLAlchemyEnum(UserRoleEnum, native_enum=False, length=20), nullable=False, default=UserRoleEnum.MEMBER
    )
    token: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    invited_by: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'))
    status: Mapped[InvitationStatusEnum] = mapped_column(
        SQLAlchemyEnum(InvitationStatusEnum, native_enum=False, length=20),
        nullable=False,
        default=InvitationStatusEnum.pending,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
