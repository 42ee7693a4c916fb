"""Pydantic schemas used across the project."""
import uuid
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class WalletOperationRequest(BaseModel):
    """Raw mutation request; fields are validated by the wallet module.

    Fields are left untyped so that a wrong value is reported with the
    wallet error for that field instead of a generic schema error.
    """

    wallet_id: Any = Field(default=None, validation_alias=AliasChoices("walletId", "valletId"))
    operation_type: Any = Field(default=None, validation_alias="operationType")
    amount: Any = None


class WalletBalanceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    wallet_id: uuid.UUID = Field(alias="walletId")
    balance: int


class ErrorResponse(BaseModel):
    code: Optional[str] = None
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
