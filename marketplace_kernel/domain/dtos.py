"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable records returned by selectors and services:
    ProfileInfo, ContractInfo, JobInfo, the JobWithParties join record used
    by the payment path, the PaymentReceipt and DepositReceipt results, and
    the report rows.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods exist as boundary converters but are only
    invoked from selectors and services (never from domain rules).

Invariants enforced:
    - Domain rules accept and return DTOs, never ORM entities.
    - All monetary fields are Decimal.
    - JobInfo rejects a paid flag without a payment date and vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from marketplace_kernel.models.contract import ContractStatus
from marketplace_kernel.models.profile import ProfileType

if TYPE_CHECKING:
    from marketplace_kernel.models.contract import Contract as ContractModel
    from marketplace_kernel.models.job import Job as JobModel
    from marketplace_kernel.models.profile import Profile as ProfileModel


@dataclass(frozen=True)
class ProfileInfo:
    """Immutable view of a profile."""

    id: int
    first_name: str
    last_name: str
    profession: str
    balance: Decimal
    profile_type: ProfileType

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_client(self) -> bool:
        return self.profile_type == ProfileType.CLIENT

    @classmethod
    def from_model(cls, model: ProfileModel) -> ProfileInfo:
        return cls(
            id=model.id,
            first_name=model.first_name,
            last_name=model.last_name,
            profession=model.profession,
            balance=model.balance,
            profile_type=ProfileType(model.profile_type),
        )


@dataclass(frozen=True)
class ContractInfo:
    """Immutable view of a contract."""

    id: int
    terms: str
    status: ContractStatus
    client_id: int
    contractor_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_party(self, profile_id: int) -> bool:
        return profile_id in (self.client_id, self.contractor_id)

    @classmethod
    def from_model(cls, model: ContractModel) -> ContractInfo:
        return cls(
            id=model.id,
            terms=model.terms,
            status=ContractStatus(model.status),
            client_id=model.client_id,
            contractor_id=model.contractor_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


@dataclass(frozen=True)
class JobInfo:
    """Immutable view of a job."""

    id: int
    description: str
    price: Decimal
    paid: bool
    payment_date: datetime | None
    contract_id: int

    def __post_init__(self) -> None:
        if self.paid != (self.payment_date is not None):
            raise ValueError(
                f"Job {self.id}: paid={self.paid} inconsistent with "
                f"payment_date={self.payment_date}"
            )

    @classmethod
    def from_model(cls, model: JobModel) -> JobInfo:
        return cls(
            id=model.id,
            description=model.description,
            price=model.price,
            paid=bool(model.paid),
            payment_date=model.payment_date,
            contract_id=model.contract_id,
        )


@dataclass(frozen=True)
class JobWithParties:
    """
    Typed join of a job with its contract and both contract parties.

    This is the single record the payment rules inspect; it replaces
    navigating lazy ORM associations.
    """

    job: JobInfo
    contract: ContractInfo
    client: ProfileInfo
    contractor: ProfileInfo


@dataclass(frozen=True)
class PaymentReceipt:
    """Outcome of a successful job payment."""

    job_id: int
    client_id: int
    contractor_id: int
    amount: Decimal
    paid_at: datetime


@dataclass(frozen=True)
class DepositReceipt:
    """Outcome of a successful deposit."""

    client_id: int
    amount: Decimal
    new_balance: Decimal


@dataclass(frozen=True)
class ProfessionEarnings:
    """Row of the best-profession report."""

    profession: str
    total_earned: Decimal


@dataclass(frozen=True)
class ClientSpend:
    """Row of the best-clients report."""

    id: int
    full_name: str
    paid: Decimal
