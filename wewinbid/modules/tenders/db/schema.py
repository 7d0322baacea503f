"""
Schema for tenders and their activity (history, comments, favorites).
"""
import uuid
import enum
from datetime import datetime
from typing import Optional, List
from sqlalchemy import (
    String, DateTime, ForeignKey, Text, Float, JSON, Uuid, UniqueConstraint,
    Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class TenderTypeEnum(str, enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class TenderStatusEnum(str, enum.Enum):
    DRAFT = "DRAFT"
    ANALYSIS = "ANALYSIS"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    SUBMITTED = "SUBMITTED"
    WON = "WON"
    LOST = "LOST"
    ABANDONED = "ABANDONED"


# Tenders still being worked on
OPEN_TENDER_STATUSES = (
    TenderStatusEnum.DRAFT,
    TenderStatusEnum.ANALYSIS,
    TenderStatusEnum.IN_PROGRESS,
    TenderStatusEnum.REVIEW,
)


class SectorEnum(str, enum.Enum):
    SECURITY_PRIVATE = "SECURITY_PRIVATE"
    SECURITY_ELECTRONIC = "SECURITY_ELECTRONIC"
    CONSTRUCTION = "CONSTRUCTION"
    LOGISTICS = "LOGISTICS"
    IT_SOFTWARE = "IT_SOFTWARE"
    MAINTENANCE = "MAINTENANCE"
    CONSULTING = "CONSULTING"
    CLEANING = "CLEANING"
    CATERING = "CATERING"
    TRANSPORT = "TRANSPORT"
    ENERGY = "ENERGY"
    HEALTHCARE = "HEALTHCARE"
    EDUCATION = "EDUCATION"
    OTHER = "OTHER"


class BuyerTypeEnum(str, enum.Enum):
    STATE = "STATE"
    REGION = "REGION"
    DEPARTMENT = "DEPARTMENT"
    MUNICIPALITY = "MUNICIPALITY"
    PUBLIC_ESTABLISHMENT = "PUBLIC_ESTABLISHMENT"
    HOSPITAL = "HOSPITAL"
    PRIVATE_COMPANY = "PRIVATE_COMPANY"
    ASSOCIATION = "ASSOCIATION"
    OTHER = "OTHER"


class Tender(Base):
    __tablename__ = 'tenders'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'), index=True)

    reference: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    type: Mapped[TenderTypeEnum] = mapped_column(
        SQLAlchemyEnum(TenderTypeEnum, native_enum=False, length=20), nullable=False
    )
    status: Mapped[TenderStatusEnum] = mapped_column(
        SQLAlchemyEnum(TenderStatusEnum, native_enum=False, length=20),
        nullable=False,
        default=TenderStatusEnum.DRAFT,
        index=True,
    )
    sector: Mapped[Optional[SectorEnum]] = mapped_column(SQLAlchemyEnum(SectorEnum, native_enum=False, length=40))

    # Location
    country: Mapped[str] = mapped_column(String(2), nullable=False)
    region: Mapped[Optional[str]] = mapped_column(String(255))
    department: Mapped[Optional[str]] = mapped_column(String(255))

    # Buyer
    buyer_name: Mapped[Optional[str]] = mapped_column(String(500))
    buyer_type: Mapped[Optional[BuyerTypeEnum]] = mapped_column(SQLAlchemyEnum(BuyerTypeEnum, native_enum=False, length=40))
    buyer_contact: Mapped[Optional[str]] = mapped_column(String(255))
    buyer_email: Mapped[Optional[str]] = mapped_column(String(255))
    buyer_phone: Mapped[Optional[str]] = mapped_column(String(50))

    # Money
    estimated_value: Mapped[Optional[float]] = mapped_column(Float)
    proposed_price: Mapped[Optional[float]] = mapped_column(Float)
    winning_price: Mapped[Optional[float]] = mapped_column(Float)

    # Dates
    publication_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    deadline: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)
    submission_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    result_date: Mapped[Optional[datetime]] = mapped_column(DateTime)

    # Scoring
    ai_score: Mapped[Optional[float]] = mapped_column(Float)
    ai_score_details: Mapped[Optional[dict]] = mapped_column(JSON)
    ai_score_updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    source_url: Mapped[Optional[str]] = mapped_column(String(1000))
    platform: Mapped[Optional[str]] = mapped_column(String(255))
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    history: Mapped[List["TenderHistory"]] = relationship(back_populates="tender", cascade="all, delete-orphan")
    comments: Mapped[List["TenderComment"]] = relationship(back_populates="tender", cascade="all, delete-orphan")
    favorites: Mapped[List["TenderFavorite"]] = relationship(back_populates="tender", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Tender(id={self.id}, reference='{self.reference}', status={self.status})>"


class TenderHistory(Base):
    """One row per change made to a tender."""
    __tablename__ = 'tender_history'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tender_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('tenders.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'))
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    field: Mapped[Optional[str]] = mapped_column(String(100))
    old_value: Mapped[Optional[str]] = mapped_column(Text)
    new_value: Mapped[Optional[str]] = mapped_column(Text)
    details: Mapped[Optional[dict]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    tender: Mapped["Tender"] = relationship(back_populates="history")


class TenderComment(Base):
    __tablename__ = 'tender_comments'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tender_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('tenders.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('users.id', ondelete='SET NULL'))
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey('tender_comments.id', ondelete='CASCADE'))
    content: Mapped[str] = mapped_column(Text, nullable=False)
    mentions: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    tender: Mapped["Tender"] = relationship(back_populates="comments")


class TenderFavorite(Base):
    __tablename__ = 'tender_favorites'
    __table_args__ = (UniqueConstraint('user_id', 'tender_id', name='uq_tender_favorites_user_tender'),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    tender_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('tenders.id', ondelete='CASCADE'), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    tender: Mapped["Tender"] = relationship(back_populates="favorites")
