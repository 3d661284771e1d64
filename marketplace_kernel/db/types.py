"""
Module: marketplace_kernel.db.types
Responsibility: Column type and helpers for monetary values.  Centralizes
    precision and rounding so that every model, selector and service treats
    balances and prices identically.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - No floats anywhere in the kernel.  Python code sees Decimal; the
      database sees an integer count of minor units (cents), so SQL-side
      arithmetic such as ``balance = balance - :price`` is exact on every
      dialect, including SQLite whose NUMERIC affinity would store REAL.
    - round_money() is the ONLY sanctioned rounding function for money.
    - has_money_precision() is the boundary check used before any amount
      supplied by a caller is applied to a balance.

Failure modes:
    - ValueError from MoneyAmount.process_bind_param when a value with more
      than MONEY_DECIMAL_PLACES digits reaches the database.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import BigInteger
from sqlalchemy.types import TypeDecorator

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")

_MINOR_UNITS = Decimal(10) ** MONEY_DECIMAL_PLACES


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the specified decimal places.

    This is the ONLY sanctioned rounding function for monetary values.
    """
    quantize_str = "0." + "0" * decimal_places
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def has_money_precision(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
) -> bool:
    """Return True if value is finite and carries no more than decimal_places digits."""
    if not value.is_finite():
        return False
    try:
        return value == round_money(value, decimal_places)
    except InvalidOperation:
        # More significant digits than the decimal context can hold
        return False


class MoneyAmount(TypeDecorator):
    """
    Decimal money stored as a BIGINT count of minor units.

    Contract:
        Transparently converts between Python Decimal major units and
        integer minor units (e.g., Decimal("10.50") <-> 1050).

    Guarantees:
        - process_bind_param: Decimal -> int on INSERT/UPDATE and in every
          comparison or arithmetic bind against a money column.
        - process_result_value: int -> Decimal quantized to two places,
          including aggregates such as SUM().
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        amount = Decimal(value)
        if not has_money_precision(amount):
            raise ValueError(
                f"Money value {value} has more than {MONEY_DECIMAL_PLACES} decimal places"
            )
        return int(amount * _MINOR_UNITS)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return round_money(Decimal(int(value)) / _MINOR_UNITS)

