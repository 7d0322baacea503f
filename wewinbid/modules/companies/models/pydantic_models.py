from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from wewinbid.modules.companies.db.schema import SubscriptionPlanEnum
from wewinbid.modules.tenders.db.schema import SectorEnum


class CompanyResponse(BaseModel):
    id: UUID
    name: str
    legal_name: Optional[str] = None
    siret: Optional[str] = None
    siren: Optional[str] = None
    vat_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None
    sectors: List[str] = []
    certifications: List[str] = []
    annual_revenue: Optional[float] = None
    employee_count: Optional[int] = None
    founded_year: Optional[int] = None
    references_count: int = 0
    avg_contract_value: Optional[float] = None
    has_rc_insurance: bool = False
    has_fiscal_attestation: bool = False
    subscription_plan: SubscriptionPlanEnum
    subscription_status: str
    subscription_period_end: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CompanyUpdate(BaseModel):
    """Editable company profile. Subscription fields are managed by billing."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    legal_name: Optional[str] = Field(None, max_length=255)
    siret: Optional[str] = Field(None, pattern=r"^\d{14}$")
    siren: Optional[str] = Field(None, pattern=r"^\d{9}$")
    vat_number: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=255)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, min_length=2, max_length=2)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    website: Optional[str] = Field(None, max_length=500)
    logo_url: Optional[str] = Field(None, max_length=1000)
    description: Optional[str] = None
    sectors: Optional[List[SectorEnum]] = None
    certifications: Optional[List[str]] = None
    annual_revenue: Optional[float] = Field(None, ge=0)
    employee_count: Optional[int] = Field(None, ge=0)
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
    references_count: Optional[int] = Field(None, ge=0)
    avg_contract_value: Optional[float] = Field(None, ge=0)
    has_rc_insurance: Optional[bool] = None
    has_fiscal_attestation: Optional[bool] = None

    @field_validator("country")
    @classmethod
    def upper_country(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value else value
