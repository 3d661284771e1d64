"""
PaymentService -- pays a job by moving its price from client to contractor.

Responsibility:
    The one stateful algorithm of the kernel: load the job with both
    contract parties under row lock, check admissibility, then apply the
    four writes (mark paid, stamp payment date, debit client, credit
    contractor) inside the caller's transaction.

Architecture position:
    Kernel > Services -- imperative shell around domain/rules.py.

Invariants enforced:
    - At-most-once payment: the job is flipped with a compare-and-set
      ``UPDATE ... WHERE NOT paid``.  If another transaction won the race
      the update touches zero rows and JobAlreadyPaidError is raised.
    - No overdraft: the debit is ``UPDATE ... WHERE balance >= price``;
      zero rows means InsufficientFundsError.
    - Balance arithmetic happens in SQL, so no read-modify-write window
      exists for a lost update.
    - paid and payment_date are written in the same statement.

Failure modes:
    - JobNotFoundError, JobAlreadyPaidError, NotContractClientError,
      InsufficientFundsError.  Any exception leaves the transaction for the
      caller to roll back; no partial payment can be committed.
"""

from sqlalchemy import update

from marketplace_kernel.domain.clock import Clock, SystemClock
from marketplace_kernel.domain.dtos import PaymentReceipt
from marketplace_kernel.domain.rules import check_payable
from marketplace_kernel.exceptions import (
    InsufficientFundsError,
    JobAlreadyPaidError,
    JobNotFoundError,
)
from marketplace_kernel.logging_config import LogContext, get_logger
from marketplace_kernel.models.job import Job
from marketplace_kernel.models.profile import Profile
from marketplace_kernel.selectors.job_selector import JobSelector
from marketplace_kernel.services.base import BaseService

logger = get_logger("services.payment")


class PaymentService(BaseService[Job]):
    """Pays jobs on behalf of the contract's client."""

    def __init__(self, session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._jobs = JobSelector(session)

    def pay_job(self, job_id: int, requester_id: int) -> PaymentReceipt:
        """
        Pay for a job.

        Preconditions:
            - Called inside a transaction owned by the caller.
        Postconditions:
            - On return, the job is paid with payment_date = clock.now(),
              the client balance is lower by the price and the contractor
              balance higher by the price -- all pending in the caller's
              transaction.

        Raises:
            JobNotFoundError: No job with this id.
            JobAlreadyPaidError: Job was paid before or concurrently.
            NotContractClientError: Requester is not the contract's client.
            InsufficientFundsError: Client balance is below the price.
        """
        with LogContext.bind(job_id=str(job_id)):
            record = self._jobs.get_job_with_parties(job_id, for_update=True)
            if record is None:
                raise JobNotFoundError(job_id)

            try:
                check_payable(record, requester_id)
            except JobAlreadyPaidError:
                logger.info("job_payment_rejected_already_paid")
                raise

            price = record.job.price
            client_id = record.client.id
            contractor_id = record.contractor.id
            paid_at = self._clock.now()

            self._mark_paid(job_id, paid_at)
            self._debit(client_id, price)
            self._credit(contractor_id, price)
            # Bulk UPDATEs bypass the identity map; reload on next access
            self.session.expire_all()

            logger.info(
                "job_paid",
                extra={
                    "client_id": client_id,
                    "contractor_id": contractor_id,
                    "amount": price,
                    "contract_id": record.contract.id,
                },
            )

            return PaymentReceipt(
                job_id=job_id,
                client_id=client_id,
                contractor_id=contractor_id,
                amount=price,
                paid_at=paid_at,
            )

    def _mark_paid(self, job_id: int, paid_at) -> None:
        result = self.session.execute(
            update(Job)
            .where(Job.id == job_id, Job.paid.is_(False))
            .values(paid=True, payment_date=paid_at)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.warning("concurrent_payment_conflict")
            raise JobAlreadyPaidError(job_id)

    def _debit(self, profile_id: int, amount) -> None:
        result = self.session.execute(
            update(Profile)
            .where(Profile.id == profile_id, Profile.balance >= amount)
            .values(balance=Profile.balance - amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            balance = self.session.get(Profile, profile_id, populate_existing=True).balance
            raise InsufficientFundsError(profile_id, balance, amount)

    def _credit(self, profile_id: int, amount) -> None:
        self.session.execute(
            update(Profile)
            .where(Profile.id == profile_id)
            .values(balance=Profile.balance + amount)
            .execution_options(synchronize_session=False)
        )
