from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rpeconomy.domain.enums import AccountSubType, AccountType


class AccountRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Primary key")
    owner_id: str = Field(..., description="Player owning the account")
    type: AccountType = Field(..., description="personal or business")
    sub_type: AccountSubType = Field(..., description="chequing, savings or investing")
    balance: int = Field(..., ge=0, description="Current balance in minor units")
    apr: int = Field(..., description="Yearly interest percentage snapshotted at creation")
    is_active: bool = Field(..., description="Whether the account may take part in operations")
    created_at: datetime


class AccountCreate(BaseModel):
    owner_id: str = Field(..., min_length=1, description="Player to provision accounts for")
    type: AccountType = Field(default=AccountType.PERSONAL)
