"""
Tests for BalanceService.

Covers:
- Deposit cap: 25% of the unpaid total on in_progress contracts
- Depositor rules: clients only, optional self-only restriction
- Amount validation
- Structured log events
"""

from decimal import Decimal

import pytest
from sqlalchemy import select

from marketplace_kernel.exceptions import (
    DepositLimitExceededError,
    InvalidAmountError,
    InvalidProfileTypeError,
    NotAccountOwnerError,
    ProfileNotFoundError,
)
from marketplace_kernel.models import Contract, ContractStatus, Job, Profile, ProfileType
from marketplace_kernel.services import BalanceService


def _balance(session, profile_id) -> Decimal:
    return session.execute(
        select(Profile.balance).where(Profile.id == profile_id)
    ).scalar_one()


@pytest.fixture
def balances(session) -> BalanceService:
    return BalanceService(session)


@pytest.fixture
def client_owing_100(session) -> int:
    """A client with balance 0 and a single unpaid job of 100 on an active contract."""
    client = Profile(
        first_name="Owing", last_name="Client", profession="Buyer",
        balance=Decimal("0"), profile_type=ProfileType.CLIENT.value,
    )
    session.add(client)
    session.flush()
    contract = Contract(
        terms="t", status=ContractStatus.IN_PROGRESS.value,
        client_id=client.id, contractor_id=8,
    )
    session.add(contract)
    session.flush()
    session.add(Job(description="w", price=Decimal("100"), paid=False, contract_id=contract.id))
    session.flush()
    return client.id


class TestDeposit:
    """Accepted deposits."""

    def test_deposit_into_own_account(self, session, balances):
        receipt = balances.deposit(1, Decimal("50"), requester_id=1)

        assert receipt.client_id == 1
        assert receipt.amount == Decimal("50")
        assert receipt.new_balance == Decimal("1200")
        assert _balance(session, 1) == Decimal("1200")

    def test_deposit_into_other_client_account(self, session, balances):
        receipt = balances.deposit(4, Decimal("1"), requester_id=2)
        assert receipt.new_balance == Decimal("2.30")

    def test_exactly_the_cap(self, session, balances):
        # unpaid total 201 -> cap 50.25
        receipt = balances.deposit(1, Decimal("50.25"), requester_id=1)
        assert receipt.new_balance == Decimal("1200.25")

    def test_hundred_unpaid_allows_twenty_five(self, session, balances, client_owing_100):
        with pytest.raises(DepositLimitExceededError):
            balances.deposit(client_owing_100, Decimal("26"), requester_id=client_owing_100)
        assert _balance(session, client_owing_100) == Decimal("0")

        receipt = balances.deposit(client_owing_100, Decimal("25"), requester_id=client_owing_100)
        assert receipt.new_balance == Decimal("25")

    def test_cap_is_per_deposit(self, session, balances, client_owing_100):
        balances.deposit(client_owing_100, Decimal("25"), requester_id=client_owing_100)
        balances.deposit(client_owing_100, Decimal("25"), requester_id=client_owing_100)
        assert _balance(session, client_owing_100) == Decimal("50")

    def test_custom_ratio(self, session):
        service = BalanceService(session, deposit_cap_ratio=Decimal("0.5"))
        receipt = service.deposit(2, Decimal("201"), requester_id=2)
        assert receipt.new_balance == Decimal("432.11")

    def test_logs_deposit_applied(self, balances, captured_logs):
        balances.deposit(4, Decimal("1"), requester_id=2)

        (record,) = [r for r in captured_logs() if r["message"] == "deposit_applied"]
        assert record["client_id"] == 4
        assert record["requester_id"] == 2
        assert record["amount"] == "1"
        assert record["max_deposit"] == "50.0000"


class TestDepositRejections:
    """Rejected deposits leave the balance untouched."""

    def test_over_the_cap(self, session, balances):
        with pytest.raises(DepositLimitExceededError) as exc_info:
            balances.deposit(1, Decimal("1000"), requester_id=1)
        assert exc_info.value.total_unpaid == Decimal("201")
        assert _balance(session, 1) == Decimal("1150")

    def test_zero_unpaid_allows_nothing(self, session, balances):
        with pytest.raises(DepositLimitExceededError):
            balances.deposit(3, Decimal("0.01"), requester_id=3)
        assert _balance(session, 3) == Decimal("451.30")

    def test_contractor_cannot_deposit(self, balances):
        with pytest.raises(InvalidProfileTypeError) as exc_info:
            balances.deposit(5, Decimal("1"), requester_id=5)
        assert exc_info.value.profile_type == "contractor"

    def test_self_only_restriction(self, session):
        service = BalanceService(session, restrict_to_self=True)
        with pytest.raises(NotAccountOwnerError):
            service.deposit(4, Decimal("1"), requester_id=2)
        assert service.deposit(4, Decimal("1"), requester_id=4).new_balance == Decimal("2.30")

    def test_unknown_target(self, balances):
        with pytest.raises(ProfileNotFoundError) as exc_info:
            balances.deposit(999, Decimal("1"), requester_id=1)
        assert exc_info.value.profile_id == 999

    def test_unknown_requester(self, balances):
        with pytest.raises(ProfileNotFoundError):
            balances.deposit(1, Decimal("1"), requester_id=999)

    @pytest.mark.parametrize("amount", ["0", "-5", "0.001"])
    def test_invalid_amount(self, session, balances, amount):
        with pytest.raises(InvalidAmountError):
            balances.deposit(1, Decimal(amount), requester_id=1)
        assert _balance(session, 1) == Decimal("1150")

    def test_logs_rejection(self, balances, captured_logs):
        with pytest.raises(DepositLimitExceededError):
            balances.deposit(1, Decimal("1000"), requester_id=1)
        assert any(r["message"] == "deposit_rejected" for r in captured_logs())
