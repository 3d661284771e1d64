"""
Payment and deposit rules -- pure functional core.

Responsibility:
    The admissibility checks for paying a job and for depositing into a
    client balance, the deposit cap arithmetic, and the report window
    normalisation.  Services load state, call these checks, then write.

Architecture position:
    Kernel > Domain -- zero I/O.  Accepts DTOs and Decimals, raises typed
    kernel exceptions.

Invariants enforced:
    - Payment check order: already paid, then requester is the client,
      then sufficient funds.  (Existence is checked by the caller.)
    - Deposit cap: amount <= total_unpaid * ratio.  Depositing exactly the
      cap is allowed; a zero total allows nothing.
    - Amounts are positive Decimals with at most two decimal places.
"""

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from marketplace_kernel.db.types import ZERO, has_money_precision
from marketplace_kernel.domain.dtos import JobWithParties, ProfileInfo
from marketplace_kernel.exceptions import (
    DepositLimitExceededError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidDateRangeError,
    InvalidProfileTypeError,
    JobAlreadyPaidError,
    NotAccountOwnerError,
    NotContractClientError,
)
from marketplace_kernel.models.profile import ProfileType

DEFAULT_DEPOSIT_CAP_RATIO = Decimal("0.25")


def check_payable(record: JobWithParties, requester_id: int) -> None:
    """
    Raise unless ``requester_id`` may pay for ``record.job`` right now.

    Raises:
        JobAlreadyPaidError: job is already paid.
        NotContractClientError: requester is not the contract's client.
        InsufficientFundsError: client balance is below the job price.
    """
    job = record.job
    if job.paid:
        raise JobAlreadyPaidError(job.id)
    if record.contract.client_id != requester_id:
        raise NotContractClientError(job.id, requester_id)
    if record.client.balance < job.price:
        raise InsufficientFundsError(
            record.client.id, record.client.balance, job.price
        )


def validate_amount(amount: Decimal) -> Decimal:
    """Return ``amount`` if it is a positive Decimal with money precision."""
    if not isinstance(amount, Decimal):
        raise InvalidAmountError(amount, f"must be Decimal, not {type(amount).__name__}")
    if not has_money_precision(amount):
        raise InvalidAmountError(amount, "more than two decimal places")
    if amount <= ZERO:
        raise InvalidAmountError(amount, "must be positive")
    return amount


def max_deposit(
    total_unpaid: Decimal,
    ratio: Decimal = DEFAULT_DEPOSIT_CAP_RATIO,
) -> Decimal:
    """Largest deposit allowed against ``total_unpaid`` (exact, not rounded)."""
    return total_unpaid * ratio


def check_depositor(
    requester: ProfileInfo,
    client_id: int,
    restrict_to_self: bool = False,
) -> None:
    """
    Raise unless ``requester`` may deposit into account ``client_id``.

    Only clients may deposit.  Depositing into a different client's account
    is allowed unless ``restrict_to_self`` is set.
    """
    if not requester.is_client:
        raise InvalidProfileTypeError(
            requester.id,
            requester.profile_type.value,
            ProfileType.CLIENT.value,
        )
    if restrict_to_self and requester.id != client_id:
        raise NotAccountOwnerError(client_id, requester.id)


def check_deposit_limit(
    client_id: int,
    amount: Decimal,
    total_unpaid: Decimal,
    ratio: Decimal = DEFAULT_DEPOSIT_CAP_RATIO,
) -> Decimal:
    """
    Validate ``amount`` against the cap and return the cap.

    Raises:
        InvalidAmountError: amount is not a positive two-place Decimal.
        DepositLimitExceededError: amount is above the cap.
    """
    validate_amount(amount)
    cap = max_deposit(total_unpaid, ratio)
    if amount > cap:
        raise DepositLimitExceededError(client_id, amount, cap, total_unpaid)
    return cap


def report_window(start: date, end: date) -> tuple[datetime, datetime]:
    """
    Convert an inclusive date range into a half-open UTC datetime window.

    ``[start 00:00, (end + 1 day) 00:00)`` so that every payment made on
    ``end`` is included.
    """
    if start > end:
        raise InvalidDateRangeError(start, end)
    lower = datetime.combine(start, time.min, tzinfo=timezone.utc)
    upper = datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return lower, upper
