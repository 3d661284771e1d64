"""Kernel write services."""

from marketplace_kernel.services.balance_service import BalanceService
from marketplace_kernel.services.payment_service import PaymentService

__all__ = [
    "BalanceService",
    "PaymentService",
]
