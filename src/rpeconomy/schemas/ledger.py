from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from rpeconomy.domain.enums import EntryType


class LedgerEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Primary key")
    player_id: str = Field(..., description="Initiator of the movement")
    account_id: str | None
    amount: int = Field(..., description="Signed amount; negative for an outflow")
    type: EntryType
    memo: str | None = Field(
        None,
        validation_alias=AliasChoices("memo", "metadata"),
        serialization_alias="metadata",
        description="Free-form tag such as paycheck or to:<account>",
    )
    correlation_id: str | None = Field(None, description="Shared by every leg of one operation")
    counterparty_account_id: str | None
    created_at: datetime
