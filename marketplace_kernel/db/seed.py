"""
Module: marketplace_kernel.db.seed
Responsibility: The demo data set -- eight profiles, nine contracts and
    fourteen jobs -- used for local runs and by the HTTP scenario tests.
Architecture position: Kernel > DB.  Imports models; called by
    scripts/seed_db.py and test fixtures only.

Shape of the data (ids are fixed so that scenarios can refer to them):
    - Profiles 1-4 are clients, 5-8 contractors.
    - Contract 1 is terminated, contract 5 is new, all others in_progress.
    - Jobs 1-5 are unpaid; jobs 6-14 were paid in August 2020.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from marketplace_kernel.logging_config import get_logger
from marketplace_kernel.models.contract import Contract, ContractStatus
from marketplace_kernel.models.job import Job
from marketplace_kernel.models.profile import Profile, ProfileType

logger = get_logger("db.seed")

_CLIENT = ProfileType.CLIENT.value
_CONTRACTOR = ProfileType.CONTRACTOR.value

PROFILES = (
    # id, first name, last name, profession, balance, type
    (1, "Harry", "Potter", "Wizard", "1150", _CLIENT),
    (2, "Mr", "Robot", "Hacker", "231.11", _CLIENT),
    (3, "John", "Snow", "Knows nothing", "451.3", _CLIENT),
    (4, "Ash", "Kethcum", "Pokemon master", "1.3", _CLIENT),
    (5, "John", "Lenon", "Musician", "64", _CONTRACTOR),
    (6, "Linus", "Torvalds", "Programmer", "1214", _CONTRACTOR),
    (7, "Alan", "Turing", "Programmer", "22", _CONTRACTOR),
    (8, "Aragorn", "II Elessar Telcontarion", "Fighter", "314", _CONTRACTOR),
)

CONTRACTS = (
    # id, terms, status, client id, contractor id
    (1, "bla bla bla", ContractStatus.TERMINATED, 1, 5),
    (2, "bla bla bla", ContractStatus.IN_PROGRESS, 1, 6),
    (3, "bla bla bla", ContractStatus.IN_PROGRESS, 2, 6),
    (4, "bla bla bla", ContractStatus.IN_PROGRESS, 2, 7),
    (5, "bla bla bla", ContractStatus.NEW, 3, 8),
    (6, "bla bla bla", ContractStatus.IN_PROGRESS, 3, 7),
    (7, "bla bla bla", ContractStatus.IN_PROGRESS, 4, 7),
    (8, "bla bla bla", ContractStatus.IN_PROGRESS, 4, 6),
    (9, "bla bla bla", ContractStatus.IN_PROGRESS, 4, 8),
)


def _paid_on(iso: str) -> datetime:
    return datetime.fromisoformat(iso).replace(tzinfo=timezone.utc)


JOBS = (
    # id, description, price, paid at (None = unpaid), contract id
    (1, "work", "200", None, 1),
    (2, "work", "201", None, 2),
    (3, "work", "202", None, 3),
    (4, "work", "200", None, 4),
    (5, "work", "200", None, 7),
    (6, "work", "2020", _paid_on("2020-08-15T19:11:26.737"), 7),
    (7, "work", "200", _paid_on("2020-08-15T19:11:26.737"), 2),
    (8, "work", "200", _paid_on("2020-08-16T19:11:26.737"), 3),
    (9, "work", "200", _paid_on("2020-08-17T19:11:26.737"), 1),
    (10, "work", "200", _paid_on("2020-08-17T19:11:26.737"), 5),
    (11, "work", "21", _paid_on("2020-08-10T19:11:26.737"), 1),
    (12, "work", "21", _paid_on("2020-08-15T19:11:26.737"), 2),
    (13, "work", "121", _paid_on("2020-08-15T19:11:26.737"), 3),
    (14, "work", "121", _paid_on("2020-08-14T23:11:26.737"), 3),
)


def seed_demo_data(session: Session) -> None:
    """
    Insert the demo data set into an empty schema.

    Flushes but does not commit; the caller owns the transaction.
    """
    for pid, first, last, profession, balance, ptype in PROFILES:
        session.add(
            Profile(
                id=pid,
                first_name=first,
                last_name=last,
                profession=profession,
                balance=Decimal(balance),
                profile_type=ptype,
            )
        )
    session.flush()

    for cid, terms, status, client_id, contractor_id in CONTRACTS:
        session.add(
            Contract(
                id=cid,
                terms=terms,
                status=status.value,
                client_id=client_id,
                contractor_id=contractor_id,
            )
        )
    session.flush()

    for jid, description, price, paid_at, contract_id in JOBS:
        session.add(
            Job(
                id=jid,
                description=description,
                price=Decimal(price),
                paid=paid_at is not None,
                payment_date=paid_at,
                contract_id=contract_id,
            )
        )
    session.flush()

    logger.info(
        "demo_data_seeded",
        extra={
            "profiles": len(PROFILES),
            "contracts": len(CONTRACTS),
            "jobs": len(JOBS),
        },
    )
