"""
Schema for companies (tenants).

Every tender, document, workflow and signature request belongs to exactly one
company; users see only the rows of their own company.
"""
import uuid
import enum
from datetime import datetime
from typing import Optional, List
from sqlalchemy import (
    String, DateTime, Text, Boolean, Integer, Float, JSON, Uuid,
    Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from wewinbid.core.helpers import utcnow
from wewinbid.db.database import Base


class SubscriptionPlanEnum(str, enum.Enum):
    FREE = "FREE"
    PRO = "PRO"
    BUSINESS = "BUSINESS"
    ENTERPRISE = "ENTERPRISE"


class Company(Base):
    __tablename__ = 'companies'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    legal_name: Mapped[Optional[str]] = mapped_column(String(255))
    siret: Mapped[Optional[str]] = mapped_column(String(14))
    siren: Mapped[Optional[str]] = mapped_column(String(9))
    vat_number: Mapped[Optional[str]] = mapped_column(String(50))

    address: Mapped[Optional[str]] = mapped_column(String(500))
    city: Mapped[Optional[str]] = mapped_column(String(255))
    postal_code: Mapped[Optional[str]] = mapped_column(String(20))
    country: Mapped[str] = mapped_column(String(2), nullable=False, default="FR")
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    website: Mapped[Optional[str]] = mapped_column(String(500))
    logo_url: Mapped[Optional[str]] = mapped_column(String(1000))
    description: Mapped[Optional[str]] = mapped_column(Text)

    # Bid profile, used by tender scoring
    sectors: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    certifications: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    annual_revenue: Mapped[Optional[float]] = mapped_column(Float)
    employee_count: Mapped[Optional[int]] = mapped_column(Integer)
    founded_year: Mapped[Optional[int]] = mapped_column(Integer)
    references_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    avg_contract_value: Mapped[Optional[float]] = mapped_column(Float)
    has_rc_insurance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_fiscal_attestation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    subscription_plan: Mapped[SubscriptionPlanEnum] = mapped_column(
        SQLAlchemyEnum(SubscriptionPlanEnum, native_enum=False, length=20),
        nullable=False,
        default=SubscriptionPlanEnum.FREE,
    )
    subscription_status: Mapped[str] = mapped_column(String(30), nullable=False, default="active")
    subscription_period_end: Mapped[Optional[datetime]] = mapped_column(DateTime)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    users: Mapped[List["User"]] = relationship(back_populates="company")

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}', plan={self.subscription_plan})>"
