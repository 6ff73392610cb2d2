from .account import AccountCreate, AccountRead
from .ledger import LedgerEntryRead
from .player import JobCreate, JobRead, PlayerCreate, PlayerRead
from .policy import PolicyRead, PolicyUpdate

__all__ = [
    "AccountCreate",
    "AccountRead",
    "JobCreate",
    "JobRead",
    "LedgerEntryRead",
    "PlayerCreate",
    "PlayerRead",
    "PolicyRead",
    "PolicyUpdate",
]
