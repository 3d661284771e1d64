"""
Module: marketplace_kernel.selectors.report_selector
Responsibility: Admin aggregates over paid jobs -- the best-earning
    profession and the clients who paid the most in a date window.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Only paid jobs whose payment_date falls in
      [start 00:00 UTC, end + 1 day 00:00 UTC) are counted.
    - Rows are sorted by summed price, highest first; ties are broken by
      profession name / profile id so results are deterministic.
    - An empty window raises ReportNoDataError rather than returning [].
"""

from datetime import date

from sqlalchemy import desc, func, select

from marketplace_kernel.domain.dtos import ClientSpend, ProfessionEarnings
from marketplace_kernel.domain.rules import report_window
from marketplace_kernel.exceptions import ReportNoDataError
from marketplace_kernel.models.contract import Contract
from marketplace_kernel.models.job import Job
from marketplace_kernel.models.profile import Profile
from marketplace_kernel.selectors.base import BaseSelector


class ReportSelector(BaseSelector[Job]):
    """Selector for admin reports."""

    def _paid_in_window(self, start: date, end: date):
        lower, upper = report_window(start, end)
        return (
            Job.paid.is_(True),
            Job.payment_date >= lower,
            Job.payment_date < upper,
        )

    def best_profession(self, start: date, end: date) -> ProfessionEarnings:
        """
        The contractor profession that earned the most in the window.

        Raises:
            InvalidDateRangeError: start is after end.
            ReportNoDataError: no paid jobs in the window.
        """
        total = func.sum(Job.price).label("total_earned")
        stmt = (
            select(Profile.profession, total)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.contractor_id == Profile.id)
            .where(*self._paid_in_window(start, end))
            .group_by(Profile.profession)
            .order_by(desc(total), Profile.profession)
            .limit(1)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            raise ReportNoDataError("best-profession", start, end)
        return ProfessionEarnings(profession=row.profession, total_earned=row.total_earned)

    def best_clients(self, start: date, end: date, limit: int) -> list[ClientSpend]:
        """
        Clients ranked by the total they paid in the window.

        Raises:
            ValueError: limit is below 1.
            InvalidDateRangeError: start is after end.
            ReportNoDataError: no paid jobs in the window.
        """
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        paid = func.sum(Job.price).label("paid")
        stmt = (
            select(Profile.id, Profile.first_name, Profile.last_name, paid)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.client_id == Profile.id)
            .where(*self._paid_in_window(start, end))
            .group_by(Profile.id, Profile.first_name, Profile.last_name)
            .order_by(desc(paid), Profile.id)
            .limit(limit)
        )
        rows = self.session.execute(stmt).all()
        if not rows:
            raise ReportNoDataError("best-clients", start, end)
        return [
            ClientSpend(
                id=row.id,
                full_name=f"{row.first_name} {row.last_name}",
                paid=row.paid,
            )
            for row in rows
        ]
