"""
Typed exception hierarchy for the marketplace kernel.

Every error has a typed class (catch by type, not message), a class-level
``code`` (machine-readable, API-safe) and carries its context as
attributes (not just a message string).

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    MarketplaceKernelError (base)
    |
    +-- NotFoundError
    |   +-- ProfileNotFoundError
    |   +-- ContractNotFoundError
    |   +-- JobNotFoundError
    |   +-- ReportNoDataError
    |
    +-- AuthorizationError
    |   +-- NotContractPartyError
    |   +-- NotContractClientError
    |   +-- NotAccountOwnerError
    |   +-- InvalidProfileTypeError
    |
    +-- AuthenticationRequiredError
    |
    +-- PaymentError
    |   +-- JobAlreadyPaidError
    |   +-- InsufficientFundsError
    |
    +-- AmountError
    |   +-- InvalidAmountError
    |   +-- DepositLimitExceededError
    |
    +-- ValidationError
    |   +-- InvalidDateRangeError
    |
    +-- ConcurrencyError
        +-- ConcurrentModificationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Not found       | PROFILE_NOT_FOUND           | Profile ID doesn't exist
                | CONTRACT_NOT_FOUND          | Contract ID doesn't exist
                | JOB_NOT_FOUND               | Job ID doesn't exist
                | REPORT_NO_DATA              | No paid jobs in the report window
----------------|-----------------------------|-----------------------------------------
Authorization   | NOT_CONTRACT_PARTY          | Requester is neither client nor contractor
                | NOT_CONTRACT_CLIENT         | Only the contract's client may pay
                | NOT_ACCOUNT_OWNER           | Deposit into another client's account
                | INVALID_PROFILE_TYPE        | Contractor attempting a client action
Authentication  | AUTHENTICATION_REQUIRED     | Missing or unknown requester profile
----------------|-----------------------------|-----------------------------------------
Payment         | JOB_ALREADY_PAID            | Job has already been paid
                | INSUFFICIENT_FUNDS          | Client balance below job price
----------------|-----------------------------|-----------------------------------------
Amount          | INVALID_AMOUNT              | Non-positive or over-precise amount
                | DEPOSIT_LIMIT_EXCEEDED      | Deposit above 25% of unpaid total
----------------|-----------------------------|-----------------------------------------
Validation      | INVALID_DATE_RANGE          | Report start date after end date
----------------|-----------------------------|-----------------------------------------
Concurrency     | CONCURRENT_MODIFICATION     | Database rejected a conflicting write

None of these are retried inside the kernel.  Categories let the HTTP
layer map a whole family to one status code.
"""

from datetime import date
from decimal import Decimal


class MarketplaceKernelError(Exception):
    """
    Base exception for all marketplace kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "MARKETPLACE_KERNEL_ERROR"


# Not-found exceptions


class NotFoundError(MarketplaceKernelError):
    """Base exception for missing entities."""

    code: str = "NOT_FOUND"


class ProfileNotFoundError(NotFoundError):
    """Profile with given ID was not found."""

    code: str = "PROFILE_NOT_FOUND"

    def __init__(self, profile_id: int):
        self.profile_id = profile_id
        super().__init__(f"Profile not found: {profile_id}")


class ContractNotFoundError(NotFoundError):
    """Contract with given ID was not found."""

    code: str = "CONTRACT_NOT_FOUND"

    def __init__(self, contract_id: int):
        self.contract_id = contract_id
        super().__init__(f"Contract not found: {contract_id}")


class JobNotFoundError(NotFoundError):
    """Job with given ID was not found."""

    code: str = "JOB_NOT_FOUND"

    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class ReportNoDataError(NotFoundError):
    """No paid jobs fall within the requested reporting window."""

    code: str = "REPORT_NO_DATA"

    def __init__(self, report: str, start: date, end: date):
        self.report = report
        self.start = start
        self.end = end
        super().__init__(
            f"No data for {report} between {start.isoformat()} and {end.isoformat()}"
        )


# Authorization exceptions


class AuthorizationError(MarketplaceKernelError):
    """Base exception for requester authorization failures."""

    code: str = "FORBIDDEN"


class NotContractPartyError(AuthorizationError):
    """Requester is neither the client nor the contractor on the contract."""

    code: str = "NOT_CONTRACT_PARTY"

    def __init__(self, contract_id: int, requester_id: int):
        self.contract_id = contract_id
        self.requester_id = requester_id
        super().__init__(
            f"Profile {requester_id} is not a party to contract {contract_id}"
        )


class NotContractClientError(AuthorizationError):
    """Only the client on a job's contract may pay for the job."""

    code: str = "NOT_CONTRACT_CLIENT"

    def __init__(self, job_id: int, requester_id: int):
        self.job_id = job_id
        self.requester_id = requester_id
        super().__init__(
            f"Profile {requester_id} is not the client for job {job_id}"
        )


class NotAccountOwnerError(AuthorizationError):
    """Requester attempted to deposit into another client's account."""

    code: str = "NOT_ACCOUNT_OWNER"

    def __init__(self, client_id: int, requester_id: int):
        self.client_id = client_id
        self.requester_id = requester_id
        super().__init__(
            f"Profile {requester_id} may not deposit into account {client_id}"
        )


class InvalidProfileTypeError(AuthorizationError):
    """Profile type does not permit the requested action."""

    code: str = "INVALID_PROFILE_TYPE"

    def __init__(self, profile_id: int, profile_type: str, required_type: str):
        self.profile_id = profile_id
        self.profile_type = profile_type
        self.required_type = required_type
        super().__init__(
            f"Profile {profile_id} is a {profile_type}; "
            f"only a {required_type} may perform this action"
        )


class AuthenticationRequiredError(MarketplaceKernelError):
    """Request did not identify a known profile."""

    code: str = "AUTHENTICATION_REQUIRED"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Authentication required: {reason}")


# Payment exceptions


class PaymentError(MarketplaceKernelError):
    """Base exception for job payment failures."""

    code: str = "PAYMENT_ERROR"


class JobAlreadyPaidError(PaymentError):
    """Job has already been paid; payment is terminal."""

    code: str = "JOB_ALREADY_PAID"

    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Job already paid: {job_id}")


class InsufficientFundsError(PaymentError):
    """Client balance does not cover the job price."""

    code: str = "INSUFFICIENT_FUNDS"

    def __init__(self, client_id: int, balance: Decimal, required: Decimal):
        self.client_id = client_id
        self.balance = balance
        self.required = required
        super().__init__(
            f"Insufficient balance for client {client_id}: "
            f"balance {balance}, required {required}"
        )


# Amount exceptions


class AmountError(MarketplaceKernelError):
    """Base exception for rejected monetary amounts."""

    code: str = "AMOUNT_ERROR"


class InvalidAmountError(AmountError):
    """Amount is not a positive value with at most two decimal places."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, amount: Decimal, reason: str):
        self.amount = amount
        self.reason = reason
        super().__init__(f"Invalid amount {amount}: {reason}")


class DepositLimitExceededError(AmountError):
    """Deposit exceeds the cap derived from the client's unpaid jobs."""

    code: str = "DEPOSIT_LIMIT_EXCEEDED"

    def __init__(
        self,
        client_id: int,
        amount: Decimal,
        max_deposit: Decimal,
        total_unpaid: Decimal,
    ):
        self.client_id = client_id
        self.amount = amount
        self.max_deposit = max_deposit
        self.total_unpaid = total_unpaid
        super().__init__(
            f"Deposit of {amount} for client {client_id} exceeds the limit "
            f"of {max_deposit} (unpaid jobs total {total_unpaid})"
        )


# Validation exceptions


class ValidationError(MarketplaceKernelError):
    """Base exception for malformed query parameters."""

    code: str = "VALIDATION_ERROR"


class InvalidDateRangeError(ValidationError):
    """Report window start is after its end."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end
        super().__init__(
            f"Start date {start.isoformat()} is after end date {end.isoformat()}"
        )


# Concurrency exceptions


class ConcurrencyError(MarketplaceKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class ConcurrentModificationError(ConcurrencyError):
    """The database rejected a write that conflicted with another transaction."""

    code: str = "CONCURRENT_MODIFICATION"

    def __init__(self, entity_type: str, entity_id: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"Concurrent modification of {entity_type} {entity_id}: "
            "entity was modified by another transaction"
        )
