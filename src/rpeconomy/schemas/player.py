from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlayerCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    cash: int | None = Field(None, ge=0, description="Starting cash; server default when omitted")
    job_id: int | None = Field(None, description="Job to assign immediately")
    attributes: dict[str, Any] = Field(
        default_factory=dict, description="Cosmetic attributes (hair, eyes, height, ...)"
    )


class PlayerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Primary key")
    first_name: str
    last_name: str
    attributes: dict[str, Any]
    job_id: int | None
    cash: int = Field(..., ge=0, description="Physical money on hand")
    bank: int = Field(..., ge=0, description="Sum of the player's account balances")
    created_at: datetime


class JobCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    salary: int = Field(..., ge=0, description="Gross salary per payroll run")


class JobRead(JobCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Primary key")
