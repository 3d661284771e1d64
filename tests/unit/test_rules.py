"""
Unit tests for the payment and deposit rules (marketplace_kernel/domain/rules.py).

Pure functions over DTOs; no database.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from marketplace_kernel.domain.dtos import (
    ContractInfo,
    JobInfo,
    JobWithParties,
    ProfileInfo,
)
from marketplace_kernel.domain.rules import (
    DEFAULT_DEPOSIT_CAP_RATIO,
    check_deposit_limit,
    check_depositor,
    check_payable,
    max_deposit,
    report_window,
    validate_amount,
)
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
from marketplace_kernel.models.contract import ContractStatus
from marketplace_kernel.models.profile import ProfileType

PAID_AT = datetime(2020, 8, 15, tzinfo=timezone.utc)


def _profile(pid, balance="0", profile_type=ProfileType.CLIENT) -> ProfileInfo:
    return ProfileInfo(
        id=pid,
        first_name="First",
        last_name=f"Last{pid}",
        profession="Tester",
        balance=Decimal(balance),
        profile_type=profile_type,
    )


def _record(price="5", balance="10", paid=False) -> JobWithParties:
    return JobWithParties(
        job=JobInfo(
            id=1,
            description="work",
            price=Decimal(price),
            paid=paid,
            payment_date=PAID_AT if paid else None,
            contract_id=1,
        ),
        contract=ContractInfo(
            id=1,
            terms="terms",
            status=ContractStatus.IN_PROGRESS,
            client_id=1,
            contractor_id=2,
        ),
        client=_profile(1, balance),
        contractor=_profile(2, "0", ProfileType.CONTRACTOR),
    )


class TestCheckPayable:
    """Order of checks: already paid, requester, funds."""

    def test_payable(self):
        check_payable(_record(price="5", balance="10"), requester_id=1)

    def test_exact_balance_is_payable(self):
        check_payable(_record(price="10", balance="10"), requester_id=1)

    def test_already_paid(self):
        with pytest.raises(JobAlreadyPaidError):
            check_payable(_record(paid=True), requester_id=1)

    def test_already_paid_wins_over_wrong_requester(self):
        with pytest.raises(JobAlreadyPaidError):
            check_payable(_record(paid=True), requester_id=99)

    def test_contractor_cannot_pay(self):
        with pytest.raises(NotContractClientError) as exc_info:
            check_payable(_record(), requester_id=2)
        assert exc_info.value.requester_id == 2

    def test_wrong_requester_wins_over_funds(self):
        with pytest.raises(NotContractClientError):
            check_payable(_record(price="50", balance="10"), requester_id=3)

    def test_insufficient_funds(self):
        with pytest.raises(InsufficientFundsError) as exc_info:
            check_payable(_record(price="10.01", balance="10"), requester_id=1)
        assert exc_info.value.balance == Decimal("10")
        assert exc_info.value.required == Decimal("10.01")


class TestValidateAmount:

    def test_positive_two_places(self):
        assert validate_amount(Decimal("25.50")) == Decimal("25.50")

    @pytest.mark.parametrize("value", ["0", "-1", "-0.01"])
    def test_not_positive(self, value):
        with pytest.raises(InvalidAmountError, match="positive"):
            validate_amount(Decimal(value))

    def test_too_precise(self):
        with pytest.raises(InvalidAmountError, match="decimal places"):
            validate_amount(Decimal("1.001"))

    def test_nan(self):
        with pytest.raises(InvalidAmountError):
            validate_amount(Decimal("NaN"))

    def test_float_refused(self):
        with pytest.raises(InvalidAmountError, match="Decimal"):
            validate_amount(1.5)


class TestDepositCap:

    def test_default_ratio(self):
        assert DEFAULT_DEPOSIT_CAP_RATIO == Decimal("0.25")
        assert max_deposit(Decimal("100")) == Decimal("25")

    def test_exactly_cap_allowed(self):
        cap = check_deposit_limit(1, Decimal("25"), Decimal("100"))
        assert cap == Decimal("25")

    def test_above_cap_rejected(self):
        with pytest.raises(DepositLimitExceededError) as exc_info:
            check_deposit_limit(1, Decimal("26"), Decimal("100"))
        assert exc_info.value.max_deposit == Decimal("25")
        assert exc_info.value.total_unpaid == Decimal("100")

    def test_zero_total_allows_nothing(self):
        with pytest.raises(DepositLimitExceededError):
            check_deposit_limit(1, Decimal("0.01"), Decimal("0"))

    def test_amount_validated_before_cap(self):
        with pytest.raises(InvalidAmountError):
            check_deposit_limit(1, Decimal("0"), Decimal("100"))

    def test_custom_ratio(self):
        assert check_deposit_limit(
            1, Decimal("50"), Decimal("100"), ratio=Decimal("0.5")
        ) == Decimal("50")


class TestCheckDepositor:

    def test_client_may_deposit_anywhere_by_default(self):
        check_depositor(_profile(2), client_id=4)

    def test_contractor_refused(self):
        with pytest.raises(InvalidProfileTypeError) as exc_info:
            check_depositor(_profile(5, profile_type=ProfileType.CONTRACTOR), client_id=5)
        assert exc_info.value.required_type == "client"

    def test_restricted_to_self(self):
        check_depositor(_profile(4), client_id=4, restrict_to_self=True)
        with pytest.raises(NotAccountOwnerError):
            check_depositor(_profile(2), client_id=4, restrict_to_self=True)


class TestReportWindow:

    def test_end_date_inclusive(self):
        lower, upper = report_window(date(2020, 8, 10), date(2020, 8, 15))
        assert lower == datetime(2020, 8, 10, tzinfo=timezone.utc)
        assert upper == datetime(2020, 8, 16, tzinfo=timezone.utc)

    def test_single_day(self):
        lower, upper = report_window(date(2020, 8, 15), date(2020, 8, 15))
        assert (upper - lower).days == 1

    def test_start_after_end(self):
        with pytest.raises(InvalidDateRangeError):
            report_window(date(2020, 8, 16), date(2020, 8, 15))
