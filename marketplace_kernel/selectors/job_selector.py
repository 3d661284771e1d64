"""
Module: marketplace_kernel.selectors.job_selector
Responsibility: Job reads -- the unpaid-jobs listing, the typed join record
    used by the payment path, and the unpaid total that drives the deposit
    cap.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - list_unpaid_jobs() only returns unpaid jobs on in_progress contracts
      the requester is a party to.
    - total_unpaid_for_client() counts only unpaid jobs on in_progress
      contracts where the profile is the client.
    - get_job_with_parties(for_update=True) locks the job row first, then
      both profile rows in ascending id order, so two payments touching the
      same profiles always acquire locks in the same order.
"""

from decimal import Decimal

from sqlalchemy import func, or_, select

from marketplace_kernel.db.types import ZERO
from marketplace_kernel.domain.dtos import (
    ContractInfo,
    JobInfo,
    JobWithParties,
    ProfileInfo,
)
from marketplace_kernel.models.contract import Contract, ContractStatus
from marketplace_kernel.models.job import Job
from marketplace_kernel.models.profile import Profile
from marketplace_kernel.selectors.base import BaseSelector


class JobSelector(BaseSelector[Job]):
    """Selector for jobs."""

    def list_unpaid_jobs(self, requester_id: int) -> list[JobInfo]:
        """Unpaid jobs on active contracts where the requester is a party."""
        stmt = (
            select(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .where(
                Job.paid.is_(False),
                Contract.status == ContractStatus.IN_PROGRESS.value,
                or_(
                    Contract.client_id == requester_id,
                    Contract.contractor_id == requester_id,
                ),
            )
            .order_by(Job.id)
        )
        jobs = self.session.execute(stmt).scalars().all()
        return [JobInfo.from_model(j) for j in jobs]

    def get_job_with_parties(
        self,
        job_id: int,
        for_update: bool = False,
    ) -> JobWithParties | None:
        """
        Load a job joined with its contract, client and contractor.

        Args:
            job_id: Job to load.
            for_update: If True, take row locks (PostgreSQL FOR UPDATE) on
                the job and both profiles for the rest of the transaction.

        Returns:
            JobWithParties, or None if the job does not exist.
        """
        stmt = (
            select(Job, Contract)
            .join(Contract, Job.contract_id == Contract.id)
            .where(Job.id == job_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update(of=Job)

        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        job, contract = row

        profile_stmt = (
            select(Profile)
            .where(Profile.id.in_((contract.client_id, contract.contractor_id)))
            .order_by(Profile.id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            profile_stmt = profile_stmt.with_for_update()
        profiles = {
            p.id: p for p in self.session.execute(profile_stmt).scalars()
        }

        return JobWithParties(
            job=JobInfo.from_model(job),
            contract=ContractInfo.from_model(contract),
            client=ProfileInfo.from_model(profiles[contract.client_id]),
            contractor=ProfileInfo.from_model(profiles[contract.contractor_id]),
        )

    def total_unpaid_for_client(self, client_id: int) -> Decimal:
        """Sum of prices of unpaid jobs on the client's in_progress contracts."""
        stmt = (
            select(func.sum(Job.price))
            .join(Contract, Job.contract_id == Contract.id)
            .where(
                Job.paid.is_(False),
                Contract.status == ContractStatus.IN_PROGRESS.value,
                Contract.client_id == client_id,
            )
        )
        total = self.session.execute(stmt).scalar_one()
        return total if total is not None else ZERO
