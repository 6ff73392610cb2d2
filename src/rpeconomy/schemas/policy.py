from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PolicyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Version number; the highest is current")
    savings_apr: int
    income_tax_rate: int
    sales_tax_rate: int
    business_tax_rate: int
    investing_lockup_months: int
    is_investing_enabled: bool
    created_at: datetime


class PolicyUpdate(BaseModel):
    """Partial policy; omitted fields carry over from the current version."""

    model_config = ConfigDict(extra="forbid")

    savings_apr: int | None = Field(None, ge=0, description="Yearly savings interest, percent")
    income_tax_rate: int | None = Field(None, ge=0, le=100)
    sales_tax_rate: int | None = Field(None, ge=0, le=100)
    business_tax_rate: int | None = Field(None, ge=0, le=100)
    investing_lockup_months: int | None = Field(None, ge=0)
    is_investing_enabled: bool | None = None
