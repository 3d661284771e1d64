"""
marketplace_services.marketplace_service -- the application facade.

Responsibility:
    Owns the session factory, clock and ledger settings, and runs every
    marketplace operation (profile lookup, contract and job reads, job
    payment, deposit, admin reports, health) inside its own transaction.
    Callers (the HTTP layer, scripts, tests) never see a Session.

Architecture position:
    Services -- sits above ``marketplace_kernel`` and below
    ``marketplace_api``.  The only place where kernel selectors and
    services are constructed and given a session.

Invariants enforced:
    - One operation, one transaction: a payment's four writes or a
      deposit's increment commit together or not at all.
    - Lock conflicts reported by the database (PostgreSQL serialization
      failure or deadlock, SQLite "database is locked") surface as
      ``ConcurrentModificationError``; nothing is retried here.
    - Returned values are frozen DTOs, safe to use after the session is
      closed.

Failure modes:
    - Any kernel error propagates unchanged after rollback.
    - ``ConcurrentModificationError`` on a database-level write conflict.
    - Other ``sqlalchemy.exc.DBAPIError`` propagate unchanged.

Usage:
    service = MarketplaceService.from_config(get_active_config())
    receipt = service.pay_job(job_id=2, requester_id=1)
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from marketplace_config import LedgerConfig, ReportsConfig, ServiceConfig
from marketplace_kernel.db.engine import (
    create_engine_from_url,
    create_tables,
    make_session_factory,
    session_scope,
)
from marketplace_kernel.domain.clock import Clock, SystemClock
from marketplace_kernel.domain.dtos import (
    ClientSpend,
    ContractInfo,
    DepositReceipt,
    JobInfo,
    PaymentReceipt,
    ProfessionEarnings,
    ProfileInfo,
)
from marketplace_kernel.exceptions import (
    AuthenticationRequiredError,
    ConcurrentModificationError,
)
from marketplace_kernel.logging_config import get_logger
from marketplace_kernel.selectors import (
    ContractSelector,
    JobSelector,
    ProfileSelector,
    ReportSelector,
)
from marketplace_kernel.services import BalanceService, PaymentService

logger = get_logger("services.marketplace")

# PostgreSQL serialization_failure and deadlock_detected
_CONFLICT_PGCODES = frozenset({"40001", "40P01"})


def is_write_conflict(exc: DBAPIError) -> bool:
    """True if the driver error means another transaction holds the rows."""
    if getattr(exc.orig, "pgcode", None) in _CONFLICT_PGCODES:
        return True
    return "database is locked" in str(exc.orig).lower()


class MarketplaceService:
    """
    Transactional facade for all marketplace operations.

    Args:
        session_factory: Factory bound to the ledger database.
        clock: Source of payment timestamps.  Defaults to SystemClock.
        ledger: Deposit settings.  Defaults to LedgerConfig().
        reports: Report settings.  Defaults to ReportsConfig().
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        clock: Clock | None = None,
        ledger: LedgerConfig | None = None,
        reports: ReportsConfig | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._ledger = ledger or LedgerConfig()
        self._reports = reports or ReportsConfig()

    @classmethod
    def from_engine(
        cls,
        engine: Engine,
        clock: Clock | None = None,
        config: ServiceConfig | None = None,
    ) -> MarketplaceService:
        return cls(
            make_session_factory(engine),
            clock=clock,
            ledger=config.ledger if config else None,
            reports=config.reports if config else None,
        )

    @classmethod
    def from_config(
        cls,
        config: ServiceConfig,
        clock: Clock | None = None,
        create_schema: bool = False,
    ) -> MarketplaceService:
        """Build the engine described by ``config`` and wrap it."""
        engine = create_engine_from_url(
            config.database.url,
            echo=config.database.echo,
            pool_size=config.database.pool_size,
            max_overflow=config.database.max_overflow,
        )
        if create_schema:
            create_tables(engine)
        return cls.from_engine(engine, clock=clock, config=config)

    @property
    def session_factory(self) -> sessionmaker[Session]:
        return self._session_factory

    @property
    def best_clients_default_limit(self) -> int:
        return self._reports.best_clients_default_limit

    @contextmanager
    def _transaction(
        self,
        entity_type: str,
        entity_id: int,
    ) -> Generator[Session, None, None]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except DBAPIError as exc:
            if not is_write_conflict(exc):
                raise
            logger.warning(
                "write_conflict",
                extra={"entity_type": entity_type, "entity_id": entity_id},
            )
            raise ConcurrentModificationError(entity_type, entity_id) from exc

    # Identity

    def resolve_profile(self, profile_id: int) -> ProfileInfo:
        """
        Resolve the requesting profile.

        Raises:
            AuthenticationRequiredError: No profile has this id.
        """
        with session_scope(self._session_factory) as session:
            profile = ProfileSelector(session).find(profile_id)
        if profile is None:
            raise AuthenticationRequiredError(f"unknown profile {profile_id}")
        return profile

    # Reads

    def get_contract(self, contract_id: int, requester_id: int) -> ContractInfo:
        with session_scope(self._session_factory) as session:
            return ContractSelector(session).get_contract(contract_id, requester_id)

    def list_contracts(self, requester_id: int) -> list[ContractInfo]:
        with session_scope(self._session_factory) as session:
            return ContractSelector(session).list_contracts(requester_id)

    def list_unpaid_jobs(self, requester_id: int) -> list[JobInfo]:
        with session_scope(self._session_factory) as session:
            return JobSelector(session).list_unpaid_jobs(requester_id)

    # Writes

    def pay_job(self, job_id: int, requester_id: int) -> PaymentReceipt:
        """Pay ``job_id`` from the requester's balance in one transaction."""
        with self._transaction("job", job_id) as session:
            return PaymentService(session, self._clock).pay_job(job_id, requester_id)

    def deposit(
        self,
        client_id: int,
        amount: Decimal,
        requester_id: int,
    ) -> DepositReceipt:
        """Deposit into ``client_id``'s balance in one transaction."""
        with self._transaction("profile", client_id) as session:
            service = BalanceService(
                session,
                deposit_cap_ratio=self._ledger.deposit_cap_ratio,
                restrict_to_self=self._ledger.restrict_deposit_to_self,
            )
            return service.deposit(client_id, amount, requester_id)

    # Reports

    def best_profession(self, start: date, end: date) -> ProfessionEarnings:
        with session_scope(self._session_factory) as session:
            return ReportSelector(session).best_profession(start, end)

    def best_clients(
        self,
        start: date,
        end: date,
        limit: int | None = None,
    ) -> list[ClientSpend]:
        if limit is None:
            limit = self._reports.best_clients_default_limit
        with session_scope(self._session_factory) as session:
            return ReportSelector(session).best_clients(start, end, limit)

    # Health

    def check_health(self) -> bool:
        """True if the database answers ``SELECT 1``."""
        try:
            with session_scope(self._session_factory) as session:
                session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.error("database_unreachable", exc_info=True)
            return False
        return True
