"""
Schema for electronic signature requests and their signers.
"""
import uuid
import enum
from datetime import datetime
from typing import Optional, List
from sqlalchemy import String, DateTime, ForeignKey, Text, Integer, JSON, Uuid, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship, Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class SignatureRequestStatusEnum(str, enum.Enum):
    draft = "draft"
    pending = "pending"
    partially_signed = "partially_signed"
    completed = "completed"
    cancelled = "cancelled"
    expired = "expired"


OPEN_SIGNATURE_STATUSES = (
    SignatureRequestStatusEnum.pending,
    SignatureRequestStatusEnum.partially_signed,
)


class SignerStatusEnum(str, enum.Enum):
    pending = "pending"
    notified = "notified"
    viewed = "viewed"
    signed = "signed"
    declined = "declined"
    expired = "expired"


class SignatureRequest(Base):
    __tablename__ = 'signature_requests'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'))
    tender_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('tenders.id', ondelete='SET NULL'), index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[SignatureRequestStatusEnum] = mapped_column(
        SQLAlchemyEnum(SignatureRequestStatusEnum, native_enum=False, length=30),
        nullable=False,
        default=SignatureRequestStatusEnum.draft,
        index=True,
    )
    document_url: Mapped[Optional[str]] = mapped_column(String(1000))
    document_name: Mapped[Optional[str]] = mapped_column(String(500))
    document_hash: Mapped[Optional[str]] = mapped_column(String(64))
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    signers: Mapped[List["SignatureSigner"]] = relationship(
        back_populates="request", cascade="all, delete-orphan", order_by="SignatureSigner.order_index"
    )
    audit_logs: Mapped[List["SignatureAuditLog"]] = relationship(
        back_populates="request", cascade="all, delete-orphan", order_by="SignatureAuditLog.created_at"
    )


class SignatureSigner(Base):
    __tablename__ = 'signature_signers'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('signature_requests.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'))
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[SignerStatusEnum] = mapped_column(
        SQLAlchemyEnum(SignerStatusEnum, native_enum=False, length=20), nullable=False, default=SignerStatusEnum.pending
    )
    access_token: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    token_expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    notified_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    viewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    signed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    declined_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    decline_reason: Mapped[Optional[str]] = mapped_column(Text)
    signature_data: Mapped[Optional[str]] = mapped_column(Text)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64))

    request: Mapped["SignatureRequest"] = relationship(back_populates="signers")


class SignatureAuditLog(Base):
    __tablename__ = 'signature_audit_logs'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('signature_requests.id', ondelete='CASCADE'), nullable=False, index=True)
    signer_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('signature_signers.id', ondelete='SET NULL'))
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    actor_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    actor_type: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    details: Mapped[Optional[dict]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    request: Mapped["SignatureRequest"] = relationship(back_populates="audit_logs")
