"""
Module: marketplace_kernel.models.contract
Responsibility: ORM persistence for agreements between one client profile
    and one contractor profile.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - client_id <> contractor_id (ck_contract_distinct_parties).
    - status is one of ContractStatus.  Status transitions happen outside
      this service; contracts are read-only here.
"""

from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_kernel.db.base import IdentityInteger, TrackedBase


class ContractStatus(str, Enum):
    """Contract lifecycle status.

    Only IN_PROGRESS contracts contribute unpaid jobs to listings and to
    the deposit cap.
    """

    NEW = "new"
    IN_PROGRESS = "in_progress"
    TERMINATED = "terminated"


class Contract(TrackedBase):
    """An agreement between a client and a contractor."""

    __tablename__ = "contracts"

    __table_args__ = (
        CheckConstraint(
            "client_id <> contractor_id",
            name="ck_contract_distinct_parties",
        ),
        CheckConstraint(
            "status IN ('new', 'in_progress', 'terminated')",
            name="ck_contract_status",
        ),
        Index("idx_contract_client", "client_id"),
        Index("idx_contract_contractor", "contractor_id"),
        Index("idx_contract_status", "status"),
    )

    terms: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[ContractStatus] = mapped_column(
        String(20),
        nullable=False,
        default=ContractStatus.NEW.value,
    )

    client_id: Mapped[int] = mapped_column(
        IdentityInteger,
        ForeignKey("profiles.id"),
        nullable=False,
    )

    contractor_id: Mapped[int] = mapped_column(
        IdentityInteger,
        ForeignKey("profiles.id"),
        nullable=False,
    )

    def has_party(self, profile_id: int) -> bool:
        return profile_id in (self.client_id, self.contractor_id)

    def __repr__(self) -> str:
        return f"<Contract {self.id}: {self.client_id} -> {self.contractor_id} ({ContractStatus(self.status).value})>"
