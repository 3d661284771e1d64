"""
Pydantic request/response models for the HTTP surface.

Field names are snake_case in Python and carry the public wire names
(``ClientId``, ``paymentDate``, ``fullName`` ...) as serialization aliases.
Money is a Decimal internally and a JSON number on the wire.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from marketplace_kernel.models.contract import ContractStatus

Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class ContractResponse(BaseModel):
    """A contract as seen by one of its parties"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    terms: str
    status: ContractStatus
    client_id: int = Field(serialization_alias="ClientId")
    contractor_id: int = Field(serialization_alias="ContractorId")


class JobResponse(BaseModel):
    """A job on a contract"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    price: Money
    paid: bool
    payment_date: Optional[datetime] = Field(None, serialization_alias="paymentDate")
    contract_id: int = Field(serialization_alias="ContractId")


class PaymentResponse(BaseModel):
    message: str = "Payment successful"
    job_id: int


class DepositRequest(BaseModel):
    """Deposit request body"""
    amount: Decimal


class DepositResponse(BaseModel):
    message: str = "Deposit successful"
    balance: Money


class ProfessionEarningsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profession: str
    total_earned: Money


class ClientSpendResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str = Field(serialization_alias="fullName")
    paid: Money


class HealthResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx response"""
    error: str
    message: str
