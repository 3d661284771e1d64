"""
marketplace_config -- single public entrypoint for service configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``ServiceConfig``.

Architecture position:
    Configuration.  Imported by ``marketplace_services``, ``marketplace_api``
    and ``scripts``.  The kernel MUST NEVER import from this package; the
    service facade passes plain values (URL, ratio, flags) down.

Invariants enforced:
    - Overlay order: ``defaults.yaml``, then the user YAML file, then
      ``MARKETPLACE_*`` environment variables.
    - Same effective data always gives the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the user YAML file named explicitly or via
      ``MARKETPLACE_CONFIG`` does not exist.
    - ``ValueError`` -- a value has the wrong type or range; the message
      names the key.

Audit relevance:
    Every successful call emits a ``MARKETPLACE_CONFIG_TRACE`` log entry
    with the checksum of the effective configuration, so a log stream can
    be tied to the exact settings that produced it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from marketplace_config.loader import apply_env, load_yaml_file, merge, parse_service_config
from marketplace_config.schema import (
    ApiConfig,
    DatabaseConfig,
    LedgerConfig,
    ReportsConfig,
    ServiceConfig,
)

_logger = logging.getLogger("marketplace_kernel.config")

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"
CONFIG_PATH_ENV = "MARKETPLACE_CONFIG"


def get_active_config(
    config_path: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> ServiceConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Optional user YAML file overlaid on the defaults.
            When omitted, ``MARKETPLACE_CONFIG`` from ``env`` is used.
        env: Environment mapping.  Defaults to ``os.environ``; tests pass
            a plain dict.

    Returns:
        ServiceConfig with ``checksum`` set.

    Raises:
        FileNotFoundError: If the user YAML file does not exist.
        ValueError: If any value fails validation.
    """
    env = os.environ if env is None else env

    data = load_yaml_file(DEFAULTS_PATH)
    if config_path is None:
        config_path = env.get(CONFIG_PATH_ENV) or None
    if config_path is not None:
        data = merge(data, load_yaml_file(Path(config_path)))
    data = apply_env(data, env)

    config = parse_service_config(data)

    _logger.info(
        "MARKETPLACE_CONFIG_TRACE",
        extra={
            "trace_type": "MARKETPLACE_CONFIG_TRACE",
            "checksum": config.checksum,
            "config_path": str(config_path) if config_path else None,
            "log_level": config.log_level,
            "deposit_cap_ratio": config.ledger.deposit_cap_ratio,
            "restrict_deposit_to_self": config.ledger.restrict_deposit_to_self,
        },
    )
    return config


__all__ = [
    "ApiConfig",
    "DatabaseConfig",
    "LedgerConfig",
    "ReportsConfig",
    "ServiceConfig",
    "get_active_config",
]
