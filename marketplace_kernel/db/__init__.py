"""Database layer - engine, base classes, money types, and demo data."""

from marketplace_kernel.db.base import Base, TrackedBase
from marketplace_kernel.db.engine import (
    create_engine_from_url,
    create_tables,
    drop_tables,
    make_session_factory,
    session_scope,
)
from marketplace_kernel.db.types import MoneyAmount

__all__ = [
    "create_engine_from_url",
    "make_session_factory",
    "session_scope",
    "create_tables",
    "drop_tables",
    "Base",
    "TrackedBase",
    "MoneyAmount",
]
