"""
Module: marketplace_kernel.models.job
Responsibility: ORM persistence for billable units of work under a contract.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - price > 0 (ck_job_price_positive).
    - paid iff payment_date is set (ck_job_paid_has_payment_date).
    - paid is monotonic false -> true.  PaymentService flips it with a
      compare-and-set UPDATE (WHERE NOT paid); nothing ever clears it.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_kernel.db.base import IdentityInteger, TrackedBase


class Job(TrackedBase):
    """A priced unit of work, paid at most once."""

    __tablename__ = "jobs"

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_job_price_positive"),
        CheckConstraint(
            "(paid AND payment_date IS NOT NULL) "
            "OR (NOT paid AND payment_date IS NULL)",
            name="ck_job_paid_has_payment_date",
        ),
        Index("idx_job_contract", "contract_id"),
        Index("idx_job_paid", "paid"),
        Index("idx_job_payment_date", "payment_date"),
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)

    price: Mapped[Decimal] = mapped_column(nullable=False)

    paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    payment_date: Mapped[datetime | None] = mapped_column(nullable=True)

    contract_id: Mapped[int] = mapped_column(
        IdentityInteger,
        ForeignKey("contracts.id"),
        nullable=False,
    )

    def __repr__(self) -> str:
        state = "paid" if self.paid else "unpaid"
        return f"<Job {self.id}: {self.price} ({state})>"
