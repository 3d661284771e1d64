"""
ServiceConfig schema.

The runtime configuration of the marketplace service.  YAML fragments and
environment overrides are parsed into these frozen types by the loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class DatabaseConfig:
    """Where the ledger lives and how connections are pooled."""

    url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10


@dataclass(frozen=True)
class LedgerConfig:
    """Business knobs for deposits."""

    deposit_cap_ratio: Decimal = Decimal("0.25")
    restrict_deposit_to_self: bool = False


@dataclass(frozen=True)
class ReportsConfig:
    best_clients_default_limit: int = 2


@dataclass(frozen=True)
class ApiConfig:
    host: str = "127.0.0.1"
    port: int = 3001


@dataclass(frozen=True)
class ServiceConfig:
    """Complete, validated service configuration."""

    database: DatabaseConfig
    log_level: str = "INFO"
    ledger: LedgerConfig = LedgerConfig()
    reports: ReportsConfig = ReportsConfig()
    api: ApiConfig = ApiConfig()
    checksum: str = ""
