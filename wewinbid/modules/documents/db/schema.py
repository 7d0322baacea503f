"""
Schema for company documents: uploaded files, generated drafts and templates.
"""
import uuid
import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import (
    String, DateTime, ForeignKey, Text, Integer, Boolean, Uuid,
    Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class DocumentTypeEnum(str, enum.Enum):
    DC1 = "DC1"
    DC2 = "DC2"
    DC4 = "DC4"
    TECHNICAL_MEMO = "TECHNICAL_MEMO"
    DPGF = "DPGF"
    BPU = "BPU"
    ACTE_ENGAGEMENT = "ACTE_ENGAGEMENT"
    PLANNING = "PLANNING"
    METHODOLOGY = "METHODOLOGY"
    QUALITY_PLAN = "QUALITY_PLAN"
    SAFETY_PLAN = "SAFETY_PLAN"
    ENVIRONMENTAL_PLAN = "ENVIRONMENTAL_PLAN"
    REFERENCES_LIST = "REFERENCES_LIST"
    COMMERCIAL_PROPOSAL = "COMMERCIAL_PROPOSAL"
    QUOTE = "QUOTE"
    COMPANY_PRESENTATION = "COMPANY_PRESENTATION"
    COVER_LETTER = "COVER_LETTER"
    APPENDIX = "APPENDIX"
    INSURANCE_RC = "INSURANCE_RC"
    INSURANCE_DECENNALE = "INSURANCE_DECENNALE"
    TAX_ATTESTATION = "TAX_ATTESTATION"
    SOCIAL_ATTESTATION = "SOCIAL_ATTESTATION"
    KBIS = "KBIS"
    RIB = "RIB"
    OTHER = "OTHER"


class DocumentStatusEnum(str, enum.Enum):
    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    VALIDATED = "VALIDATED"
    SUBMITTED = "SUBMITTED"


class Document(Base):
    __tablename__ = 'documents'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    tender_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('tenders.id', ondelete='CASCADE'), index=True)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'))

    name: Mapped[str] = mapped_column(String(500), nullable=False)
    type: Mapped[DocumentTypeEnum] = mapped_column(
        SQLAlchemyEnum(DocumentTypeEnum, native_enum=False, length=40), nullable=False, default=DocumentTypeEnum.OTHER
    )
    status: Mapped[DocumentStatusEnum] = mapped_column(
        SQLAlchemyEnum(DocumentStatusEnum, native_enum=False, length=20), nullable=False, default=DocumentStatusEnum.DRAFT
    )

    # Stored file (uploads only)
    file_path: Mapped[Optional[str]] = mapped_column(String(1000))
    file_name: Mapped[Optional[str]] = mapped_column(String(500))
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # in bytes
    mime_type: Mapped[Optional[str]] = mapped_column(String(100))

    # Markdown body for generated / edited documents
    content: Mapped[Optional[str]] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_template: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Document(id={self.id}, name='{self.name}', type={self.type})>"
