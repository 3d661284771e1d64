"""
Pytest fixtures for the marketplace test suite.

Provides:
- Structured-log configuration and capture
- In-memory SQLite engines with the schema created per test
- A session over the demo data set
- A MarketplaceService driven by a DeterministicClock
- A FastAPI TestClient bound to that service

No external database is needed: every engine is built through
create_engine_from_url so the SQLite PRAGMAs and pooling match runtime.
"""

import json
import logging
from collections.abc import Generator
from datetime import datetime, timezone
from io import StringIO

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from marketplace_api.app import create_app
from marketplace_kernel.db.engine import (
    create_engine_from_url,
    create_tables,
    drop_tables,
    make_session_factory,
    session_scope,
)
from marketplace_kernel.db.seed import seed_demo_data
from marketplace_kernel.domain.clock import DeterministicClock
from marketplace_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from marketplace_services import MarketplaceService

# Payment timestamps produced by the test clock
TEST_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

MEMORY_URL = "sqlite:///:memory:"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture marketplace_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.pay_job(2, 1)
            logs = captured_logs()
            assert any(r["message"] == "job_paid" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("marketplace_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow_locks: mark test as potentially waiting for DB locks"
    )


# =============================================================================
# Database fixtures
# =============================================================================


def _seed(engine: Engine) -> None:
    with session_scope(make_session_factory(engine)) as session:
        seed_demo_data(session)


@pytest.fixture
def empty_engine() -> Generator[Engine, None, None]:
    """In-memory engine with the schema but no rows."""
    engine = create_engine_from_url(MEMORY_URL)
    create_tables(engine)
    yield engine
    drop_tables(engine)
    engine.dispose()


@pytest.fixture
def engine(empty_engine) -> Engine:
    """In-memory engine loaded with the demo data set."""
    _seed(empty_engine)
    return empty_engine


@pytest.fixture
def file_engine(tmp_path) -> Generator[Engine, None, None]:
    """
    File-backed engine loaded with the demo data set.

    Unlike :memory:, every pooled connection is a real, separate SQLite
    connection, so threads contend on the database lock.
    """
    engine = create_engine_from_url(f"sqlite:///{tmp_path / 'marketplace.db'}")
    create_tables(engine)
    _seed(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    """
    Session over the demo data for service and selector tests.

    Services only flush; the transaction is rolled back at teardown.
    """
    sess = make_session_factory(engine)()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(TEST_NOW)


# =============================================================================
# Service and HTTP fixtures
# =============================================================================


@pytest.fixture
def service(engine, deterministic_clock) -> MarketplaceService:
    return MarketplaceService(make_session_factory(engine), clock=deterministic_clock)


@pytest.fixture
def client(service) -> Generator[TestClient, None, None]:
    with TestClient(create_app(service=service)) as test_client:
        yield test_client


@pytest.fixture
def as_profile():
    """Build the identity header for a profile id."""

    def _headers(profile_id) -> dict[str, str]:
        return {"profile_id": str(profile_id)}

    return _headers
