"""
Module: marketplace_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.  Provides
    the integer primary key convention, the type annotation map for consistent
    column types, and the TrackedBase mixin for audit timestamps.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Integer primary keys: profile, contract and job ids are the small
      integers clients send in paths and the ``profile_id`` header.
    - Money precision: type_annotation_map maps Python Decimal to
      MoneyAmount (integer minor units).  NEVER use float for money.
    - Audit timestamps: TrackedBase provides created_at and updated_at.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import BigInteger, DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from marketplace_kernel.db.types import MoneyAmount

# SQLite only auto-assigns rowids to columns declared exactly INTEGER PRIMARY KEY
IdentityInteger = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - id is an auto-assigned integer on every supported dialect.
        - Decimal maps to MoneyAmount -- exact minor-unit storage.
        - datetime maps to DateTime(timezone=True) -- always timezone-aware.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: MoneyAmount(),
        datetime: DateTime(timezone=True),
    }

    id: Mapped[int] = mapped_column(
        IdentityInteger,
        primary_key=True,
        autoincrement=True,
    )


class TrackedBase(Base):
    """
    Abstract base with audit timestamps.

    Guarantees:
        - created_at is set to server NOW() on INSERT and never changes.
        - updated_at is set on INSERT and refreshed on every ORM UPDATE.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
