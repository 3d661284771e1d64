"""
BalanceService -- client deposits.

Responsibility:
    Credits a client balance, bounded by the deposit cap: a client may not
    deposit more than ``deposit_cap_ratio`` (25% by default) of the total
    price of their unpaid jobs on in_progress contracts.

Architecture position:
    Kernel > Services -- imperative shell around domain/rules.py.

Invariants enforced:
    - Only client profiles may deposit (InvalidProfileTypeError).
    - amount <= total_unpaid * ratio; a zero unpaid total allows nothing.
    - The increment is ``UPDATE ... SET balance = balance + :amount`` on a
      locked row, so concurrent deposits never lose an update.

Failure modes:
    - ProfileNotFoundError for an unknown requester or target account.
    - InvalidProfileTypeError, NotAccountOwnerError (when restricted),
      InvalidAmountError, DepositLimitExceededError.
"""

from decimal import Decimal

from sqlalchemy import select, update

from marketplace_kernel.domain.dtos import DepositReceipt
from marketplace_kernel.domain.rules import (
    DEFAULT_DEPOSIT_CAP_RATIO,
    check_deposit_limit,
    check_depositor,
)
from marketplace_kernel.exceptions import AmountError, ProfileNotFoundError
from marketplace_kernel.logging_config import get_logger
from marketplace_kernel.models.profile import Profile
from marketplace_kernel.selectors.job_selector import JobSelector
from marketplace_kernel.selectors.profile_selector import ProfileSelector
from marketplace_kernel.services.base import BaseService

logger = get_logger("services.balance")


class BalanceService(BaseService[Profile]):
    """
    Service for client balance deposits.

    Args:
        session: Caller-owned session.
        deposit_cap_ratio: Fraction of the unpaid total a single deposit
            may reach.
        restrict_to_self: If True, a client may only deposit into its own
            account.
    """

    def __init__(
        self,
        session,
        deposit_cap_ratio: Decimal = DEFAULT_DEPOSIT_CAP_RATIO,
        restrict_to_self: bool = False,
    ):
        super().__init__(session)
        self._ratio = deposit_cap_ratio
        self._restrict_to_self = restrict_to_self
        self._profiles = ProfileSelector(session)
        self._jobs = JobSelector(session)

    def deposit(
        self,
        client_id: int,
        amount: Decimal,
        requester_id: int,
    ) -> DepositReceipt:
        """
        Deposit ``amount`` into the balance of ``client_id``.

        Raises:
            ProfileNotFoundError: Requester or target profile is unknown.
            InvalidProfileTypeError: Requester is not a client.
            NotAccountOwnerError: Restricted mode and requester != target.
            InvalidAmountError: Amount not positive or over-precise.
            DepositLimitExceededError: Amount above the deposit cap.
        """
        requester = self._profiles.get(requester_id)
        check_depositor(requester, client_id, self._restrict_to_self)

        self._lock_profile(client_id)

        total_unpaid = self._jobs.total_unpaid_for_client(client_id)
        try:
            cap = check_deposit_limit(client_id, amount, total_unpaid, self._ratio)
        except AmountError:
            logger.info(
                "deposit_rejected",
                extra={
                    "client_id": client_id,
                    "amount": amount,
                    "total_unpaid": total_unpaid,
                },
            )
            raise

        self.session.execute(
            update(Profile)
            .where(Profile.id == client_id)
            .values(balance=Profile.balance + amount)
            .execution_options(synchronize_session=False)
        )
        self.session.expire_all()
        new_balance = self.session.execute(
            select(Profile.balance).where(Profile.id == client_id)
        ).scalar_one()

        logger.info(
            "deposit_applied",
            extra={
                "client_id": client_id,
                "requester_id": requester_id,
                "amount": amount,
                "max_deposit": cap,
                "new_balance": new_balance,
            },
        )

        return DepositReceipt(
            client_id=client_id,
            amount=amount,
            new_balance=new_balance,
        )

    def _lock_profile(self, profile_id: int) -> None:
        """Row-lock the target profile, raising if it does not exist."""
        found = self.session.execute(
            select(Profile.id).where(Profile.id == profile_id).with_for_update()
        ).scalar_one_or_none()
        if found is None:
            raise ProfileNotFoundError(profile_id)
