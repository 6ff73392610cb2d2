"""Protocol-based interfaces for the ledger services.

This module exports all service protocol interfaces, providing a clear contract
for service implementations and enabling dependency injection and testing.
"""

from rpeconomy.interfaces.ledger import IAccountLedger, ITreasury
from rpeconomy.interfaces.policy import IPolicyStore

__all__ = [
    "IAccountLedger",
    "IPolicyStore",
    "ITreasury",
]
