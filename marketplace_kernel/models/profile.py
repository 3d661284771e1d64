"""
Module: marketplace_kernel.models.profile
Responsibility: ORM persistence for marketplace accounts.  A profile is
    either a client (pays for jobs, may deposit) or a contractor (gets paid),
    and holds a cash balance.
Architecture position: Kernel > Models.  May import from db/ only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - balance >= 0 (ck_profile_balance_non_negative).  The payment service
      debits with a guarded UPDATE, so a violating write never reaches the
      constraint in normal operation.
    - profile_type is one of ProfileType.
    - balance is mutated only by PaymentService and BalanceService.
"""

from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_kernel.db.base import TrackedBase


class ProfileType(str, Enum):
    """Classification of marketplace accounts."""

    CLIENT = "client"
    CONTRACTOR = "contractor"


class Profile(TrackedBase):
    """
    A marketplace account holding a cash balance.

    Guarantees:
        - balance is never negative (database CHECK).
        - profession is free text; meaningful for contractors and used
          by the best-profession report.
    """

    __tablename__ = "profiles"

    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_profile_balance_non_negative"),
        CheckConstraint(
            "profile_type IN ('client', 'contractor')",
            name="ck_profile_type",
        ),
        Index("idx_profile_type", "profile_type"),
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)

    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    profession: Mapped[str] = mapped_column(String(100), nullable=False)

    balance: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    profile_type: Mapped[ProfileType] = mapped_column(
        String(20),
        nullable=False,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_client(self) -> bool:
        return ProfileType(self.profile_type) == ProfileType.CLIENT

    def __repr__(self) -> str:
        return f"<Profile {self.id}: {self.full_name} ({ProfileType(self.profile_type).value})>"
