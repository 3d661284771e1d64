"""
Marketplace Kernel

Ledger and contract core for a freelance marketplace:
- Profiles (clients and contractors) holding cash balances
- Contracts between one client and one contractor
- Jobs priced under a contract, paid exactly once
- Atomic balance transfers and capped client deposits
"""

__version__ = "0.1.0"
