"""
YAML and environment loading for ServiceConfig.

Responsibility:
    Reads YAML fragments, deep-merges them, overlays ``MARKETPLACE_*``
    environment variables and parses the result into the frozen types of
    ``marketplace_config.schema``.  Callers go through
    ``marketplace_config.get_active_config()``; nothing here is meant to be
    used at request time.

Invariants enforced:
    - Every parse error is a ``ValueError`` naming the offending key.
    - Overlay order is defaults, user file, environment; later wins.
    - ``compute_checksum`` is deterministic for identical effective data.

Failure modes:
    - ``FileNotFoundError`` -- an explicitly named YAML file is missing.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``ValueError`` -- a key holds a value of the wrong type or range.
"""

from __future__ import annotations

import copy
import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping

import yaml

from marketplace_config.schema import (
    ApiConfig,
    DatabaseConfig,
    LedgerConfig,
    ReportsConfig,
    ServiceConfig,
)

# Environment variable -> (section, key) in the merged YAML tree
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "MARKETPLACE_DATABASE_URL": ("database", "url"),
    "MARKETPLACE_SQL_ECHO": ("database", "echo"),
    "MARKETPLACE_LOG_LEVEL": ("logging", "level"),
    "MARKETPLACE_DEPOSIT_CAP_RATIO": ("ledger", "deposit_cap_ratio"),
    "MARKETPLACE_RESTRICT_DEPOSIT_TO_SELF": ("ledger", "restrict_deposit_to_self"),
    "MARKETPLACE_BEST_CLIENTS_LIMIT": ("reports", "best_clients_default_limit"),
    "MARKETPLACE_API_HOST": ("api", "host"),
    "MARKETPLACE_API_PORT": ("api", "port"),
}

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto a copy of ``base``."""
    result = copy.deepcopy(dict(base))
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def apply_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    """Overlay the recognised ``MARKETPLACE_*`` variables present in ``env``."""
    overlay: dict[str, dict[str, Any]] = {}
    for var, (section, key) in ENV_OVERRIDES.items():
        if var in env:
            overlay.setdefault(section, {})[key] = env[var]
    return merge(data, overlay)


def parse_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ValueError(f"{key}: expected a boolean, got {value!r}")


def parse_int(value: Any, key: str, minimum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key}: expected an integer, got {value!r}")
    try:
        result = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key}: expected an integer, got {value!r}") from None
    if isinstance(value, float) and value != result:
        raise ValueError(f"{key}: expected an integer, got {value!r}")
    if minimum is not None and result < minimum:
        raise ValueError(f"{key}: must be >= {minimum}, got {result}")
    return result


def parse_ratio(value: Any, key: str) -> Decimal:
    """Parse a ratio in [0, 1] as an exact Decimal (floats go through str)."""
    if isinstance(value, bool):
        raise ValueError(f"{key}: expected a decimal, got {value!r}")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{key}: expected a decimal, got {value!r}") from None
    if not result.is_finite() or result < 0 or result > 1:
        raise ValueError(f"{key}: must be between 0 and 1, got {value!r}")
    return result


def parse_log_level(value: Any, key: str) -> str:
    level = str(value).strip().upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"{key}: unknown log level {value!r}")
    return level


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"{name}: expected a mapping, got {section!r}")
    return section


def parse_service_config(data: Mapping[str, Any]) -> ServiceConfig:
    """
    Build a ServiceConfig from a merged YAML tree.

    Raises:
        ValueError: naming the first invalid key.
    """
    db = _section(data, "database")
    url = db.get("url")
    if not isinstance(url, str) or not url.strip():
        raise ValueError(f"database.url: expected a non-empty string, got {url!r}")

    database = DatabaseConfig(
        url=url.strip(),
        echo=parse_bool(db.get("echo", False), "database.echo"),
        pool_size=parse_int(db.get("pool_size", 20), "database.pool_size", minimum=1),
        max_overflow=parse_int(
            db.get("max_overflow", 10), "database.max_overflow", minimum=0
        ),
    )

    ledger_data = _section(data, "ledger")
    ledger = LedgerConfig(
        deposit_cap_ratio=parse_ratio(
            ledger_data.get("deposit_cap_ratio", "0.25"), "ledger.deposit_cap_ratio"
        ),
        restrict_deposit_to_self=parse_bool(
            ledger_data.get("restrict_deposit_to_self", False),
            "ledger.restrict_deposit_to_self",
        ),
    )

    reports_data = _section(data, "reports")
    reports = ReportsConfig(
        best_clients_default_limit=parse_int(
            reports_data.get("best_clients_default_limit", 2),
            "reports.best_clients_default_limit",
            minimum=1,
        ),
    )

    api_data = _section(data, "api")
    api = ApiConfig(
        host=str(api_data.get("host", "127.0.0.1")),
        port=parse_int(api_data.get("port", 3001), "api.port", minimum=1),
    )

    return ServiceConfig(
        database=database,
        log_level=parse_log_level(
            _section(data, "logging").get("level", "INFO"), "logging.level"
        ),
        ledger=ledger,
        reports=reports,
        api=api,
        checksum=compute_checksum(dict(data)),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
