import uuid
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, Boolean, ForeignKey, Uuid, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship, Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class UserRoleEnum(str, enum.Enum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class User(Base):
    __tablename__ = 'users'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(255))
    job_title: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1000))
    locale: Mapped[str] = mapped_column(String(10), nullable=False, default="fr")
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="Europe/Paris")

    role: Mapped[UserRoleEnum] = mapped_column(
        SQLAlchemyEnum(UserRoleEnum, native_enum=False, length=20),
        nullable=False,
        default=UserRoleEnum.MEMBER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    email_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    company: Mapped["Company"] = relationship(back_populates="users")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def is_company_admin(self) -> bool:
        return self.role in (UserRoleEnum.OWNER, UserRoleEnum.ADMIN)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
