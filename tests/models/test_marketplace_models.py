"""
ORM model tests for profiles, contracts and jobs.

Tests: money storage precision, foreign-key columns and the database
CHECK constraints that back the ledger invariants.

These are ORM-level tests only.  Service-layer behaviour is tested elsewhere.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from marketplace_kernel.models import Contract, ContractStatus, Job, Profile, ProfileType


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _profile(**overrides) -> Profile:
    fields = dict(
        first_name="Test",
        last_name="Person",
        profession="Tester",
        balance=Decimal("10.00"),
        profile_type=ProfileType.CLIENT.value,
    )
    fields.update(overrides)
    return Profile(**fields)


class TestDemoDataLoaded:
    """The seeded rows read back with exact Decimal values."""

    def test_balance_is_exact_decimal(self, session):
        robot = session.get(Profile, 2)
        assert robot.balance == Decimal("231.11")
        assert isinstance(robot.balance, Decimal)

    def test_balance_stored_as_minor_units(self, session):
        raw = session.execute(text("SELECT balance FROM profiles WHERE id = 4")).scalar_one()
        assert raw == 130

    def test_contract_foreign_keys(self, session):
        contract = session.get(Contract, 2)
        assert session.get(Profile, contract.client_id).full_name == "Harry Potter"
        assert session.get(Profile, contract.contractor_id).full_name == "Linus Torvalds"
        job_ids = session.execute(
            select(Job.id).where(Job.contract_id == contract.id).order_by(Job.id)
        ).scalars().all()
        assert job_ids == [2, 7, 12]

    def test_paid_jobs_have_dates(self, session):
        jobs = session.execute(select(Job)).scalars().all()
        assert len(jobs) == 14
        for job in jobs:
            assert job.paid == (job.payment_date is not None)

    def test_new_contract_defaults(self, session):
        contract = Contract(terms="t", client_id=1, contractor_id=7)
        session.add(contract)
        session.flush()
        assert contract.status == ContractStatus.NEW.value
        assert contract.created_at is not None


class TestConstraints:
    """CHECK and FOREIGN KEY constraints enforced by the database."""

    def test_negative_balance_rejected(self, session):
        session.add(_profile(balance=Decimal("-0.01")))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_unknown_profile_type_rejected(self, session):
        session.add(_profile(profile_type="admin"))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_contract_with_itself_rejected(self, session):
        session.add(Contract(terms="t", status="new", client_id=1, contractor_id=1))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_contract_unknown_party_rejected(self, session):
        session.add(Contract(terms="t", status="new", client_id=1, contractor_id=999))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_zero_price_rejected(self, session):
        session.add(Job(description="w", price=Decimal("0"), paid=False, contract_id=2))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_paid_without_date_rejected(self, session):
        session.add(Job(description="w", price=Decimal("1"), paid=True, contract_id=2))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_date_without_paid_rejected(self, session):
        session.add(
            Job(
                description="w",
                price=Decimal("1"),
                paid=False,
                payment_date=datetime(2020, 8, 15, tzinfo=timezone.utc),
                contract_id=2,
            )
        )
        with pytest.raises(IntegrityError):
            session.flush()

    def test_sub_cent_price_refused_before_sql(self, session):
        session.add(Job(description="w", price=Decimal("1.001"), paid=False, contract_id=2))
        with pytest.raises(Exception, match="decimal places"):
            session.flush()
